"""In-App Messaging CLI."""
