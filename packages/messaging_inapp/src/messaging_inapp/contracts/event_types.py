"""
In-App Messaging Event Types

Lifecycle events published to host listeners, and the analytics
channel/event names the engine reacts to.
"""

from enum import Enum


class MessageEvent(str, Enum):
    """
    Lifecycle events observable by the host application.

    PUBLISHED by the engine:
    - MESSAGES_RECEIVED: cached messages matched an analytics record

    PUBLISHED by the host (via notify helpers):
    - MESSAGE_DISPLAYED: a message was rendered
    - MESSAGE_DISMISSED: a message was closed by the user
    - MESSAGE_ACTION_TAKEN: the user acted on a message (button, link)
    """

    MESSAGES_RECEIVED = "messages_received"
    MESSAGE_DISPLAYED = "message_displayed"
    MESSAGE_DISMISSED = "message_dismissed"
    MESSAGE_ACTION_TAKEN = "message_action_taken"

    def __str__(self) -> str:
        return self.value


# Analytics bus channel the bridge subscribes to
ANALYTICS_CHANNEL = "analytics"

# Only analytics payloads with this discriminator trigger evaluation
RECORD_EVENT = "record"

# Capability values every registered provider must report
NOTIFICATIONS_CATEGORY = "Notifications"
IN_APP_MESSAGING_SUBCATEGORY = "InAppMessaging"
