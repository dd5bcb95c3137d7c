"""
In-App Messaging Contracts

Lifecycle event kinds, analytics envelope and payload models.
"""

from messaging_inapp.contracts.event_types import (
    ANALYTICS_CHANNEL,
    RECORD_EVENT,
    MessageEvent,
)
from messaging_inapp.contracts.envelope import AnalyticsEvent
from messaging_inapp.contracts.payloads import (
    Comparison,
    InAppMessage,
    InAppMessagingEvent,
    MessageTrigger,
    MetricCondition,
)

__all__ = [
    "ANALYTICS_CHANNEL",
    "RECORD_EVENT",
    "MessageEvent",
    "AnalyticsEvent",
    "Comparison",
    "InAppMessage",
    "InAppMessagingEvent",
    "MessageTrigger",
    "MetricCondition",
]
