"""
Message Event Listeners

Host-facing publish/subscribe for message lifecycle events.
Handlers run synchronously, in subscription order. A handler that
raises stops the notification and the error reaches the publisher.
"""

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from messaging_inapp.contracts.event_types import MessageEvent

logger = logging.getLogger(__name__)

MessageEventHandler = Callable[[Any], Any]


@dataclass
class ListenerHandle:
    """Returned by add(); call remove() to unsubscribe."""

    event: MessageEvent
    listener_id: int
    _listeners: "MessageEventListeners" = field(repr=False, compare=False)

    def remove(self) -> None:
        self._listeners.remove(self)


class MessageEventListeners:
    """Handlers per lifecycle event, keyed by a stable listener id."""

    def __init__(self) -> None:
        self._handlers: dict[MessageEvent, dict[int, MessageEventHandler]] = {
            event: {} for event in MessageEvent
        }
        self._ids = itertools.count(1)

    def add(self, handler: MessageEventHandler, event: MessageEvent) -> ListenerHandle:
        listener_id = next(self._ids)
        self._handlers[MessageEvent(event)][listener_id] = handler
        return ListenerHandle(event=MessageEvent(event), listener_id=listener_id, _listeners=self)

    def remove(self, handle: ListenerHandle) -> bool:
        """Unsubscribe. Removing twice is a no-op."""
        return self._handlers[handle.event].pop(handle.listener_id, None) is not None

    def count(self, event: MessageEvent) -> int:
        return len(self._handlers[MessageEvent(event)])

    def notify(self, payload: Any, event: MessageEvent) -> None:
        """Call every handler of this event with the payload."""
        handlers = list(self._handlers[MessageEvent(event)].values())
        logger.debug(f"Notifying {len(handlers)} listeners of {event}", extra={"event": str(event)})
        for handler in handlers:
            handler(payload)
