"""
Redis Storage

Persists cache slots as plain Redis string keys so several
processes (CLI, worker, app) share one cache.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from messaging_inapp.errors import StorageError
from messaging_inapp.storage.base import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "inapp:"


class RedisStorage(KeyValueStorage):
    """
    Key-value storage backed by Redis.

    sync() pings the server, so an unreachable Redis leaves the
    message cache unsynced and the sync is retried on next access.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        prefix: str = DEFAULT_PREFIX,
    ):
        self._redis = redis_client
        self.prefix = prefix

    @property
    def redis(self) -> redis.Redis:
        if self._redis is None:
            from basecore.redis import get_redis_client

            self._redis = get_redis_client()
        return self._redis

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def sync(self) -> None:
        try:
            await self.redis.ping()
        except RedisError as e:
            raise StorageError(f"Redis unavailable: {e}") from e
        logger.debug("Redis storage synced", extra={"key": self.prefix})

    async def get_item(self, key: str) -> str | None:
        try:
            return await self.redis.get(self._key(key))
        except RedisError as e:
            raise StorageError(f"Failed to read {key}: {e}", key=key) from e

    async def set_item(self, key: str, value: str) -> None:
        try:
            await self.redis.set(self._key(key), value)
        except RedisError as e:
            raise StorageError(f"Failed to write {key}: {e}", key=key) from e

    async def remove_item(self, key: str) -> None:
        try:
            await self.redis.delete(self._key(key))
        except RedisError as e:
            raise StorageError(f"Failed to remove {key}: {e}", key=key) from e
