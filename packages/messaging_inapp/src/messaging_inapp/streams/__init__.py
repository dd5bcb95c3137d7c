"""
In-App Messaging Redis Streams

Producer and consumer relaying analytics events between processes.
"""

from messaging_inapp.streams.consumer import AnalyticsStreamConsumer
from messaging_inapp.streams.groups import (
    ANALYTICS_STREAM,
    INAPP_GROUP,
    StreamConfig,
    ensure_analytics_stream,
)
from messaging_inapp.streams.producer import AnalyticsStreamProducer

__all__ = [
    "AnalyticsStreamConsumer",
    "AnalyticsStreamProducer",
    "ANALYTICS_STREAM",
    "INAPP_GROUP",
    "StreamConfig",
    "ensure_analytics_stream",
]
