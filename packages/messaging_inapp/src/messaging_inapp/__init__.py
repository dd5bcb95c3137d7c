"""
In-App Messaging Engine

Provider-agnostic in-app messaging:
- Registry of pluggable message providers
- Per-provider message cache over a key-value storage
- Evaluation of cached messages on analytics "record" events
- Lifecycle listeners (received, displayed, dismissed, action taken)
"""

from messaging_inapp.contracts.envelope import AnalyticsEvent
from messaging_inapp.contracts.event_types import MessageEvent
from messaging_inapp.engine import InAppMessaging
from messaging_inapp.errors import InAppMessagingError, StorageError
from messaging_inapp.hub import Hub, hub
from messaging_inapp.providers.base import InAppMessagingProvider, ProviderError

__all__ = [
    "AnalyticsEvent",
    "MessageEvent",
    "InAppMessaging",
    "InAppMessagingError",
    "StorageError",
    "Hub",
    "hub",
    "InAppMessagingProvider",
    "ProviderError",
]
