"""
Message Dispatcher

Fans sync / clear / dispatch out to every registered provider
concurrently and joins the results.

By default the first provider error propagates to the caller and
the batch result is lost (the other branches still run to the end).
With isolate_errors=True each failing provider is logged and
skipped, and the remaining providers' results are still used.
"""

import asyncio
import logging
from collections.abc import Awaitable, Mapping
from typing import Any

from messaging_inapp.cache import MessageCache
from messaging_inapp.contracts.envelope import AnalyticsEvent
from messaging_inapp.contracts.event_types import MessageEvent
from messaging_inapp.listeners import MessageEventListeners
from messaging_inapp.providers.base import InAppMessagingProvider
from messaging_inapp.registry import PluggableRegistry

logger = logging.getLogger(__name__)


class MessageDispatcher:
    def __init__(
        self,
        registry: PluggableRegistry,
        cache: MessageCache,
        listeners: MessageEventListeners,
        isolate_errors: bool = False,
    ):
        self.registry = registry
        self.cache = cache
        self.listeners = listeners
        self.isolate_errors = isolate_errors

    async def _gather(
        self,
        operation: str,
        pluggables: list[InAppMessagingProvider],
        branches: list[Awaitable[Any]],
    ) -> list[Any]:
        """Join per-provider branches; failed branches yield None when isolated."""
        if not self.isolate_errors:
            return list(await asyncio.gather(*branches))

        results = await asyncio.gather(*branches, return_exceptions=True)
        joined: list[Any] = []
        for pluggable, result in zip(pluggables, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                name = pluggable.get_provider_name()
                logger.error(
                    f"Provider {name} failed during {operation}",
                    extra={"provider": name},
                    exc_info=result,
                )
                joined.append(None)
            else:
                joined.append(result)
        return joined

    async def _sync_one(self, pluggable: InAppMessagingProvider) -> None:
        messages = await pluggable.fetch_messages()
        await self.cache.write(pluggable.get_provider_name(), messages)

    async def sync_messages(self) -> None:
        """Fetch every provider's messages into its cache slot."""
        pluggables = self.registry.pluggables
        await self._gather(
            "sync",
            pluggables,
            [self._sync_one(pluggable) for pluggable in pluggables],
        )

    async def clear_messages(self) -> None:
        """Empty every provider's cache slot."""
        logger.debug("clearing In-App Messages")

        pluggables = self.registry.pluggables
        await self._gather(
            "clear",
            pluggables,
            [self.cache.clear(pluggable.get_provider_name()) for pluggable in pluggables],
        )

    async def _evaluate_one(self, pluggable: InAppMessagingProvider, data: Any) -> list[Any]:
        cached = await self.cache.read(pluggable.get_provider_name())
        return await pluggable.evaluate(cached or [], data)

    async def dispatch(self, event: AnalyticsEvent | Mapping[str, Any]) -> list[Any]:
        """
        Evaluate an analytics event against every provider's cache.

        Non-record events are ignored. Matches are flattened in registry
        order and published once as MESSAGES_RECEIVED when non-empty.

        Returns:
            The published messages ([] if none)
        """
        event = AnalyticsEvent.coerce(event)
        if not event.is_record:
            return []

        pluggables = self.registry.pluggables
        results = await self._gather(
            "dispatch",
            pluggables,
            [self._evaluate_one(pluggable, event.data) for pluggable in pluggables],
        )

        messages = [message for matched in results if matched for message in matched]
        if messages:
            self.listeners.notify(messages, MessageEvent.MESSAGES_RECEIVED)
        return messages
