"""
Tests for storage backends.
"""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from messaging_inapp.errors import StorageError
from messaging_inapp.storage import MemoryStorage, RedisStorage


class TestMemoryStorage:
    @pytest.mark.asyncio
    async def test_set_get_remove(self):
        storage = MemoryStorage()

        await storage.set_item("k", "v")
        assert await storage.get_item("k") == "v"

        await storage.remove_item("k")
        assert await storage.get_item("k") is None

    @pytest.mark.asyncio
    async def test_remove_missing(self):
        await MemoryStorage().remove_item("missing")

    def test_initial_items(self):
        storage = MemoryStorage({"k": "v"})
        assert len(storage) == 1


class TestRedisStorage:
    @pytest.fixture
    def client(self):
        return AsyncMock()

    @pytest.mark.asyncio
    async def test_keys_are_prefixed(self, client):
        client.get.return_value = "[]"
        storage = RedisStorage(client, prefix="app:")

        assert await storage.get_item("push_inAppMessages") == "[]"
        await storage.set_item("push_inAppMessages", "[1]")
        await storage.remove_item("push_inAppMessages")

        client.get.assert_awaited_once_with("app:push_inAppMessages")
        client.set.assert_awaited_once_with("app:push_inAppMessages", "[1]")
        client.delete.assert_awaited_once_with("app:push_inAppMessages")

    @pytest.mark.asyncio
    async def test_sync_pings(self, client):
        await RedisStorage(client).sync()
        client.ping.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_sync_failure(self, client):
        client.ping.side_effect = RedisConnectionError("down")

        with pytest.raises(StorageError):
            await RedisStorage(client).sync()

    @pytest.mark.asyncio
    async def test_read_failure(self, client):
        client.get.side_effect = RedisConnectionError("down")

        with pytest.raises(StorageError) as exc_info:
            await RedisStorage(client).get_item("k")

        assert exc_info.value.key == "k"

    @pytest.mark.asyncio
    async def test_write_failure(self, client):
        client.set.side_effect = RedisConnectionError("down")

        with pytest.raises(StorageError):
            await RedisStorage(client).set_item("k", "v")

    @pytest.mark.asyncio
    async def test_cache_over_unreachable_redis_fails_open(self, client):
        from messaging_inapp.cache import MessageCache

        client.ping.side_effect = RedisConnectionError("down")
        client.get.side_effect = RedisConnectionError("down")
        cache = MessageCache(RedisStorage(client))

        assert await cache.read("push") is None
        assert cache.synced is False
