"""
Message Cache

One storage slot per provider holding the provider's last fetched
messages as JSON text. Every operation tolerates storage failure:
errors are logged and degrade to "no data" or a no-op, they never
reach the caller.

Storage sync state machine:

    UNSYNCED --ensure_synced--> SYNCING --ok--> SYNCED
                                   |
                                   +--error--> UNSYNCED (retried on next access)

Concurrent callers share a single in-flight sync.
"""

import asyncio
import json
import logging
from collections.abc import Sequence
from enum import Enum
from typing import Any

from pydantic_core import to_jsonable_python

from messaging_inapp.storage.base import KeyValueStorage

logger = logging.getLogger(__name__)

STORAGE_KEY_SUFFIX = "_inAppMessages"


def cache_key(provider_name: str) -> str:
    """Storage key of a provider's cache slot."""
    return f"{provider_name}{STORAGE_KEY_SUFFIX}"


class SyncState(str, Enum):
    UNSYNCED = "unsynced"
    SYNCING = "syncing"
    SYNCED = "synced"


class MessageCache:
    """Lazily-synced per-provider message cache over a key-value storage."""

    def __init__(self, storage: KeyValueStorage):
        self._storage = storage
        self.state = SyncState.UNSYNCED
        self._sync_lock: asyncio.Lock | None = None
        self._sync_lock_loop: asyncio.AbstractEventLoop | None = None

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    @storage.setter
    def storage(self, storage: KeyValueStorage) -> None:
        # A different backend has not been synced yet
        if storage is not self._storage:
            self._storage = storage
            self.state = SyncState.UNSYNCED

    def _lock(self) -> asyncio.Lock:
        # A lock is bound to one loop; records dispatched without a running
        # loop each get a fresh asyncio.run() loop
        loop = asyncio.get_running_loop()
        if self._sync_lock is None or self._sync_lock_loop is not loop:
            self._sync_lock = asyncio.Lock()
            self._sync_lock_loop = loop
        return self._sync_lock

    @property
    def synced(self) -> bool:
        return self.state is SyncState.SYNCED

    async def ensure_synced(self) -> bool:
        """
        Sync the storage once per process.

        Calls storage.sync() when the storage defines it. Failures are
        logged and leave the cache UNSYNCED so the next operation retries.

        Returns:
            True if the storage is synced
        """
        if self.state is SyncState.SYNCED:
            return True

        async with self._lock():
            # Another caller may have finished the sync while we waited
            if self.state is SyncState.SYNCED:
                return True

            self.state = SyncState.SYNCING
            sync = getattr(self._storage, "sync", None)
            try:
                if callable(sync):
                    await sync()
            except Exception:
                self.state = SyncState.UNSYNCED
                logger.error("Failed to sync storage", exc_info=True)
                return False

            self.state = SyncState.SYNCED
            return True

    async def read(self, provider_name: str) -> list[Any] | None:
        """
        Read a provider's cached messages.

        Returns:
            The cached messages ([] if nothing is stored), or None if the
            slot could not be read or decoded
        """
        key = cache_key(provider_name)
        try:
            await self.ensure_synced()
            stored = await self._storage.get_item(key)
            if not stored:
                return []
            messages = json.loads(stored)
            if not isinstance(messages, list):
                raise ValueError(f"Expected a list of messages, got {type(messages).__name__}")
            return messages
        except Exception:
            logger.error(
                "Failed to retrieve in-app messages from storage",
                extra={"provider": provider_name, "key": key},
                exc_info=True,
            )
            return None

    async def write(self, provider_name: str, messages: Sequence[Any] | None) -> None:
        """Replace a provider's cached messages. None is ignored, [] is stored."""
        if messages is None:
            return

        key = cache_key(provider_name)
        try:
            await self.ensure_synced()
            serialized = json.dumps(to_jsonable_python(list(messages)))
            await self._storage.set_item(key, serialized)
        except Exception:
            logger.error(
                "Failed to store in-app messages",
                extra={"provider": provider_name, "key": key},
                exc_info=True,
            )

    async def clear(self, provider_name: str) -> None:
        """Remove a provider's cache slot."""
        key = cache_key(provider_name)
        try:
            await self.ensure_synced()
            await self._storage.remove_item(key)
        except Exception:
            logger.error(
                "Failed to remove in-app messages from storage",
                extra={"provider": provider_name, "key": key},
                exc_info=True,
            )
