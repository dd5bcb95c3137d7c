"""
In-App Messaging Worker

Relays analytics records from Redis Streams into an engine.

Features:
- XREADGROUP consumer for horizontal scaling
- Initial message sync on startup
- Graceful shutdown (SIGINT / SIGTERM)
"""

import asyncio
import logging
import os
import signal
import socket

from basecore.redis import get_redis_client
from basecore.settings import get_settings

from messaging_inapp.engine import InAppMessaging
from messaging_inapp.streams.consumer import AnalyticsStreamConsumer
from messaging_inapp.streams.groups import StreamConfig, ensure_analytics_stream

logger = logging.getLogger(__name__)


def default_consumer_name() -> str:
    return f"inapp-worker-{socket.gethostname()}-{os.getpid()}"


async def run_worker(
    engine: InAppMessaging,
    consumer: AnalyticsStreamConsumer,
    stop: asyncio.Event,
    batch_size: int = 10,
    block_ms: int = 5000,
) -> int:
    """
    Relay batches until stop is set.

    Returns:
        Total number of events relayed
    """
    await engine.sync_messages()
    logger.info(
        f"Worker started: consumer={consumer.consumer_name}",
        extra={"stream": consumer.stream_name},
    )

    relayed = 0
    while not stop.is_set():
        try:
            relayed += await consumer.relay(count=batch_size, block_ms=block_ms)
            await engine.bridge.drain()
        except Exception:
            logger.exception("Error in worker loop")
            await asyncio.sleep(1)

    logger.info(f"Worker stopped after relaying {relayed} events")
    return relayed


async def main(engine: InAppMessaging, consumer_name: str | None = None) -> None:
    """Run the worker against the configured Redis stream."""
    settings = get_settings()
    client = get_redis_client()

    config = StreamConfig(settings.INAPP_ANALYTICS_STREAM, settings.INAPP_CONSUMER_GROUP)
    await ensure_analytics_stream(client, config)

    consumer = AnalyticsStreamConsumer(
        client,
        engine.hub,
        consumer_name or settings.INAPP_CONSUMER_NAME or default_consumer_name(),
        stream_name=config.stream_name,
        group_name=config.group_name,
    )

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, stop.set)

    try:
        await run_worker(
            engine,
            consumer,
            stop,
            batch_size=settings.INAPP_BATCH_SIZE,
            block_ms=settings.INAPP_BLOCK_MS,
        )
    finally:
        await engine.close()
        await client.aclose()
