"""
Analytics Stream Producer

Publishes analytics records to a Redis Stream so an engine running
in another process (the worker) can evaluate them.
"""

import logging

import redis.asyncio as redis

from messaging_inapp.contracts.envelope import AnalyticsEvent
from messaging_inapp.streams.groups import ANALYTICS_STREAM

logger = logging.getLogger(__name__)


class AnalyticsStreamProducer:
    def __init__(
        self,
        redis_client: redis.Redis,
        stream_name: str = ANALYTICS_STREAM,
        max_len: int = 100000,
    ):
        self.redis = redis_client
        self.stream_name = stream_name
        self.max_len = max_len

    async def publish_record(
        self,
        name: str,
        attributes: dict[str, str] | None = None,
        metrics: dict[str, float] | None = None,
    ) -> str:
        """
        Publish a record event.

        Returns:
            Stream message ID
        """
        return await self.publish(AnalyticsEvent.record(name, attributes, metrics))

    async def publish(self, event: AnalyticsEvent) -> str:
        msg_id = await self.redis.xadd(
            self.stream_name,
            event.to_stream_data(),
            maxlen=self.max_len,
            approximate=True,
        )

        logger.debug(
            f"Published to {self.stream_name}",
            extra={"stream": self.stream_name, "event": event.event, "msg_id": msg_id},
        )
        return msg_id
