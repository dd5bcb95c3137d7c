"""
Pytest fixtures for in-app messaging tests.
"""

import asyncio

import pytest

from messaging_inapp.engine import InAppMessaging
from messaging_inapp.errors import StorageError
from messaging_inapp.hub import Hub
from messaging_inapp.providers.stub import StubInAppMessagingProvider
from messaging_inapp.storage.memory import MemoryStorage


class SyncingMemoryStorage(MemoryStorage):
    """Memory storage with a sync() that can be told to fail."""

    def __init__(self, fail_sync: bool = False):
        super().__init__()
        self.fail_sync = fail_sync
        self.sync_calls = 0

    async def sync(self) -> None:
        self.sync_calls += 1
        if self.fail_sync:
            raise StorageError("Simulated sync failure")


class SuspendingSyncStorage(MemoryStorage):
    """Memory storage whose sync() yields to the loop, then fails."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.sync_calls = 0

    async def sync(self) -> None:
        self.sync_calls += 1
        await asyncio.sleep(0)
        raise StorageError("Simulated sync failure")


class BrokenStorage(MemoryStorage):
    """Memory storage whose reads, writes and removes can be told to fail."""

    def __init__(self, fail_get=False, fail_set=False, fail_remove=False):
        super().__init__()
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.fail_remove = fail_remove

    async def get_item(self, key):
        if self.fail_get:
            raise StorageError("Simulated read failure", key=key)
        return await super().get_item(key)

    async def set_item(self, key, value):
        if self.fail_set:
            raise StorageError("Simulated write failure", key=key)
        await super().set_item(key, value)

    async def remove_item(self, key):
        if self.fail_remove:
            raise StorageError("Simulated remove failure", key=key)
        await super().remove_item(key)


def make_message(message_id, event_type="purchase", **extra):
    """Campaign-shaped message triggered by event_type."""
    return {"id": message_id, "trigger": {"event_type": event_type}, **extra}


@pytest.fixture
def storage():
    return SyncingMemoryStorage()


@pytest.fixture
def hub():
    return Hub()


@pytest.fixture
def engine(storage, hub):
    """Engine without a default provider, isolated hub and storage."""
    return InAppMessaging(storage=storage, hub=hub, default_provider_factory=None)


@pytest.fixture
def push_provider():
    return StubInAppMessagingProvider(
        name="push",
        messages=[make_message("push-1"), make_message("push-2", event_type="login")],
    )


@pytest.fixture
def pull_provider():
    return StubInAppMessagingProvider(
        name="pull",
        messages=[make_message("pull-1")],
    )
