"""
Redis Stream Configuration

Stream names, consumer groups, and setup utilities.
"""

import logging
from dataclasses import dataclass

import redis.asyncio as redis

from basecore.redis import ensure_stream_group

logger = logging.getLogger(__name__)

# Stream names
ANALYTICS_STREAM = "inapp:analytics"

# Consumer group
INAPP_GROUP = "inapp-engine"


@dataclass
class StreamConfig:
    """Configuration for a stream and its consumer group."""

    stream_name: str
    group_name: str
    max_len: int = 100000
    start_id: str = "$"  # "0" = all history, "$" = new only


async def ensure_analytics_stream(client: redis.Redis, config: StreamConfig) -> bool:
    """
    Ensure the analytics stream and its consumer group exist.

    Should be called on startup by the worker.

    Returns:
        True if the group was created
    """
    created = await ensure_stream_group(client, config.stream_name, config.group_name, config.start_id)
    if created:
        logger.info(f"Created consumer group '{config.group_name}' for stream '{config.stream_name}'")
    else:
        logger.debug(f"Consumer group '{config.group_name}' already exists for '{config.stream_name}'")
    return created

