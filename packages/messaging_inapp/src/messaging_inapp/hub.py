"""
Analytics Hub

In-process channel bus the host's analytics layer publishes to.
The engine only needs listen(channel, callback); dispatch() is
what analytics code (or the Redis stream relay) calls.
"""

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HubCapsule:
    """What listeners receive."""

    channel: str
    payload: dict[str, Any]
    source: str | None = None


HubCallback = Callable[[HubCapsule], Any]


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


@dataclass(eq=False)
class HubListener:
    channel: str
    callback: HubCallback
    _hub: "Hub" = field(repr=False, compare=False)

    def remove(self) -> None:
        self._hub.remove(self)


class Hub:
    """
    Channel -> listeners bus.

    Sync callbacks run inline. Async callbacks are scheduled on the
    running event loop; the tasks are kept until done so they are not
    garbage collected mid-flight. Without a running loop an async
    callback runs to completion before dispatch() returns.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[HubListener]] = defaultdict(list)
        self._background_tasks: set[asyncio.Task] = set()

    def listen(self, channel: str, callback: HubCallback) -> HubListener:
        listener = HubListener(channel=channel, callback=callback, _hub=self)
        self._listeners[channel].append(listener)
        return listener

    def remove(self, listener: HubListener) -> None:
        try:
            self._listeners[listener.channel].remove(listener)
        except ValueError:
            pass

    def listener_count(self, channel: str) -> int:
        return len(self._listeners.get(channel, []))

    def dispatch(self, channel: str, payload: dict[str, Any], source: str | None = None) -> None:
        capsule = HubCapsule(channel=channel, payload=payload, source=source)
        for listener in list(self._listeners.get(channel, [])):
            result = listener.callback(capsule)
            if not inspect.isawaitable(result):
                continue

            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                asyncio.run(_await(result))
                continue

            task = loop.create_task(_await(result))
            self._background_tasks.add(task)
            task.add_done_callback(self._background_tasks.discard)


# Default bus shared by the host's analytics code and the engine
hub = Hub()
