"""
In-App Messaging Errors
"""

from typing import Any


class InAppMessagingError(Exception):
    """Base error for the in-app messaging engine."""


class StorageError(InAppMessagingError):
    """Error from a storage backend."""

    def __init__(self, message: str, key: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.key = key
        self.details = details or {}
