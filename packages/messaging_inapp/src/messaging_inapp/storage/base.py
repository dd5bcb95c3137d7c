"""
Storage Base

Key-value capability the message cache persists into.
Implementations: in-memory (default), Redis.
"""

from abc import ABC, abstractmethod


class KeyValueStorage(ABC):
    """
    Abstract key-value storage.

    Values are serialized text. Implementations that need to load
    persisted state before first use may also define:

        async def sync(self) -> None

    The message cache calls it once (and again after a failure)
    before the first read or write.
    """

    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        """Return the stored text for key, or None if absent."""
        ...

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store text under key, replacing any previous value."""
        ...

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Delete key. Deleting a missing key is not an error."""
        ...
