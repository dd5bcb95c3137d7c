"""
Analytics Stream Consumer

Consumes analytics records from a Redis Stream (XREADGROUP) and
re-dispatches them on the in-process analytics hub.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import ResponseError

from messaging_inapp.contracts.envelope import AnalyticsEvent
from messaging_inapp.contracts.event_types import ANALYTICS_CHANNEL
from messaging_inapp.hub import Hub
from messaging_inapp.streams.groups import ANALYTICS_STREAM, INAPP_GROUP

logger = logging.getLogger(__name__)


class AnalyticsStreamConsumer:
    """
    Consumer for relaying analytics events from Redis Streams.

    Uses XREADGROUP for consumer group support and reliable delivery.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        hub: Hub,
        consumer_name: str,
        stream_name: str = ANALYTICS_STREAM,
        group_name: str = INAPP_GROUP,
    ):
        self.redis = redis_client
        self.hub = hub
        self.consumer_name = consumer_name
        self.stream_name = stream_name
        self.group_name = group_name

    async def read_events(
        self,
        count: int = 10,
        block_ms: int = 5000,
    ) -> list[tuple[str, AnalyticsEvent]]:
        """
        Read events from the stream.

        Entries that cannot be parsed are acknowledged and dropped.

        Returns:
            List of (message_id, event) tuples
        """
        try:
            result = await self.redis.xreadgroup(
                self.group_name,
                self.consumer_name,
                {self.stream_name: ">"},
                count=count,
                block=block_ms,
            )
        except ResponseError as e:
            if "NOGROUP" in str(e):
                logger.error(f"Consumer group {self.group_name} does not exist for {self.stream_name}")
            raise

        if not result:
            return []

        events = []
        for _stream, entries in result:
            for msg_id, data in entries:
                try:
                    events.append((msg_id, AnalyticsEvent.from_stream_message(data)))
                except (KeyError, ValueError) as e:
                    logger.error(f"Failed to parse message {msg_id}: {e}", extra={"msg_id": msg_id})
                    # ACK invalid messages to prevent blocking
                    await self.ack(msg_id)

        return events

    async def ack(self, message_id: str) -> int:
        """Acknowledge a message as processed."""
        return await self.redis.xack(self.stream_name, self.group_name, message_id)

    async def relay(self, count: int = 10, block_ms: int = 5000) -> int:
        """
        Read a batch and dispatch each event on the analytics channel.

        Returns:
            Number of events relayed
        """
        events = await self.read_events(count=count, block_ms=block_ms)
        for msg_id, event in events:
            self.hub.dispatch(ANALYTICS_CHANNEL, event.to_dict(), source=f"stream:{self.stream_name}")
            await self.ack(msg_id)

        if events:
            logger.debug(
                f"Relayed {len(events)} analytics events",
                extra={"stream": self.stream_name, "count": len(events)},
            )
        return len(events)
