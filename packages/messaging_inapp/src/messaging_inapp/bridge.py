"""
Analytics Bridge

Subscribes the dispatcher to the analytics hub, once per engine.
"""

import asyncio
import logging

from messaging_inapp.contracts.envelope import AnalyticsEvent
from messaging_inapp.contracts.event_types import ANALYTICS_CHANNEL
from messaging_inapp.dispatcher import MessageDispatcher
from messaging_inapp.hub import Hub, HubCapsule

logger = logging.getLogger(__name__)


class AnalyticsBridge:
    """
    Routes analytics "record" payloads into MessageDispatcher.dispatch.

    Dispatches started from inside an event loop run as background
    tasks; drain() waits for them. Without a running loop the
    dispatch runs to completion before the hub callback returns.
    There is no unsubscribe: once listening, the bridge stays
    subscribed for the life of the hub.
    """

    def __init__(self, hub: Hub, dispatcher: MessageDispatcher):
        self.hub = hub
        self.dispatcher = dispatcher
        self.listening = False
        self._pending: set[asyncio.Task] = set()

    def start(self) -> bool:
        """
        Subscribe to the analytics channel.

        Returns:
            True if this call subscribed, False if already listening
        """
        if self.listening:
            return False

        self.hub.listen(ANALYTICS_CHANNEL, self._on_analytics)
        self.listening = True
        logger.debug(f"Listening for analytics events on '{ANALYTICS_CHANNEL}'")
        return True

    def _on_analytics(self, capsule: HubCapsule) -> None:
        event = AnalyticsEvent.from_dict(capsule.payload)
        if not event.is_record:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self.dispatcher.dispatch(event))
            return

        task = loop.create_task(self.dispatcher.dispatch(event))
        self._pending.add(task)
        task.add_done_callback(self._on_dispatch_done)

    def _on_dispatch_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Failed to dispatch analytics event", exc_info=error)

    async def drain(self) -> None:
        """Wait for in-flight dispatches started by analytics events."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
