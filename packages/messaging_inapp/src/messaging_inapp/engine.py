"""
In-App Messaging Engine

Public facade. Owns the provider registry, the message cache, the
lifecycle listeners and the analytics bridge for one host application.

Typical use:

    messaging = InAppMessaging()
    messaging.configure({"Campaigns": {"endpoint": "https://..."}})
    messaging.on_messages_received(render)
    await messaging.sync_messages()

    # analytics code elsewhere:
    hub.dispatch("analytics", {"event": "record", "data": {"name": "purchase"}})
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from messaging_inapp.bridge import AnalyticsBridge
from messaging_inapp.cache import MessageCache
from messaging_inapp.config import split_config
from messaging_inapp.contracts.envelope import AnalyticsEvent
from messaging_inapp.contracts.event_types import IN_APP_MESSAGING_SUBCATEGORY, MessageEvent
from messaging_inapp.dispatcher import MessageDispatcher
from messaging_inapp.hub import Hub
from messaging_inapp.hub import hub as default_hub
from messaging_inapp.listeners import ListenerHandle, MessageEventHandler, MessageEventListeners
from messaging_inapp.providers.base import InAppMessagingProvider
from messaging_inapp.providers.campaigns import CampaignsProvider
from messaging_inapp.registry import PluggableRegistry
from messaging_inapp.storage.base import KeyValueStorage
from messaging_inapp.storage.memory import MemoryStorage

logger = logging.getLogger(__name__)


class InAppMessaging:
    """
    In-app messaging engine.

    Args:
        storage: Cache backend (default: in-memory)
        hub: Analytics bus to listen on (default: the module-level hub)
        default_provider_factory: Provider registered by configure() when
            none has been added
    """

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        hub: Hub | None = None,
        default_provider_factory: Callable[[], InAppMessagingProvider] | None = CampaignsProvider,
    ):
        storage = storage if storage is not None else MemoryStorage()
        self.hub = hub if hub is not None else default_hub
        self.registry = PluggableRegistry(
            config={"storage": storage},
            default_factory=default_provider_factory,
        )
        self.cache = MessageCache(storage)
        self.listeners = MessageEventListeners()
        self.dispatcher = MessageDispatcher(self.registry, self.cache, self.listeners)
        self.bridge = AnalyticsBridge(self.hub, self.dispatcher)

    @property
    def config(self) -> dict[str, Any]:
        return self.registry.config

    def configure(self, config: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """
        Configure the engine and every provider.

        Args:
            config: listenForAnalyticsEvents (default True),
                isolateProviderErrors (default False), storage, and
                provider sections keyed by provider name

        Returns:
            The effective global config
        """
        options, stored = split_config(dict(config or {}))

        effective = self.registry.configure_all(stored)
        logger.debug(f"configure InAppMessaging: {sorted(effective)}")

        if effective.get("storage") is not None:
            self.cache.storage = effective["storage"]
        self.dispatcher.isolate_errors = bool(effective.get("isolateProviderErrors", False))

        if options.listen_for_analytics_events:
            self.bridge.start()

        return effective

    def get_module_name(self) -> str:
        return IN_APP_MESSAGING_SUBCATEGORY

    def get_pluggable(self, provider_name: str) -> InAppMessagingProvider | None:
        return self.registry.lookup(provider_name)

    def add_pluggable(self, pluggable: InAppMessagingProvider) -> None:
        self.registry.register(pluggable)

    def remove_pluggable(self, provider_name: str) -> None:
        self.registry.unregister(provider_name)

    async def sync_messages(self) -> None:
        await self.dispatcher.sync_messages()

    async def clear_messages(self) -> None:
        await self.dispatcher.clear_messages()

    async def dispatch_event(self, event: AnalyticsEvent | Mapping[str, Any]) -> list[Any]:
        return await self.dispatcher.dispatch(event)

    def on_messages_received(self, handler: MessageEventHandler) -> ListenerHandle:
        return self.listeners.add(handler, MessageEvent.MESSAGES_RECEIVED)

    def on_message_displayed(self, handler: MessageEventHandler) -> ListenerHandle:
        return self.listeners.add(handler, MessageEvent.MESSAGE_DISPLAYED)

    def on_message_dismissed(self, handler: MessageEventHandler) -> ListenerHandle:
        return self.listeners.add(handler, MessageEvent.MESSAGE_DISMISSED)

    def on_message_action_taken(self, handler: MessageEventHandler) -> ListenerHandle:
        return self.listeners.add(handler, MessageEvent.MESSAGE_ACTION_TAKEN)

    def notify_message_displayed(self, message: Any) -> None:
        self.listeners.notify(message, MessageEvent.MESSAGE_DISPLAYED)

    def notify_message_dismissed(self, message: Any) -> None:
        self.listeners.notify(message, MessageEvent.MESSAGE_DISMISSED)

    def notify_message_action_taken(self, message: Any) -> None:
        self.listeners.notify(message, MessageEvent.MESSAGE_ACTION_TAKEN)

    async def close(self) -> None:
        """Release provider resources (HTTP clients)."""
        await self.bridge.drain()
        for pluggable in self.registry:
            close = getattr(pluggable, "close", None)
            if callable(close):
                await close()
