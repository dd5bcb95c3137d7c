"""
In-App Messaging Storage

Storage capability and its implementations.
"""

from messaging_inapp.storage.base import KeyValueStorage
from messaging_inapp.storage.memory import MemoryStorage
from messaging_inapp.storage.redis import RedisStorage

__all__ = [
    "KeyValueStorage",
    "MemoryStorage",
    "RedisStorage",
]
