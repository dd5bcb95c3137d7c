"""
Pluggable Registry

Ordered list of in-app messaging providers plus the global
configuration each of them is configured from.

Each provider receives the global config merged with its own
section (config[provider_name]), section keys winning.
Names are not deduplicated: adding a provider twice keeps both.
"""

import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from messaging_inapp.contracts.event_types import (
    IN_APP_MESSAGING_SUBCATEGORY,
    NOTIFICATIONS_CATEGORY,
)
from messaging_inapp.providers.base import InAppMessagingProvider

logger = logging.getLogger(__name__)


def merge_provider_config(config: Mapping[str, Any], provider_name: str) -> dict[str, Any]:
    """Global config overlaid with the provider's own section."""
    section = config.get(provider_name)
    if not isinstance(section, Mapping):
        # Only a mapping is a provider section; other values are global keys
        return dict(config)
    return {**config, **section}


def is_in_app_provider(pluggable: Any) -> bool:
    """Runtime capability check for dynamically loaded providers."""
    if pluggable is None:
        return False
    try:
        return (
            pluggable.get_category() == NOTIFICATIONS_CATEGORY
            and pluggable.get_sub_category() == IN_APP_MESSAGING_SUBCATEGORY
        )
    except AttributeError:
        return False


class PluggableRegistry:
    """
    Registry of providers, in registration order.

    Args:
        default_factory: Builds the provider registered by configure_all()
            when the registry is empty
    """

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        default_factory: Callable[[], InAppMessagingProvider] | None = None,
    ):
        self.config: dict[str, Any] = dict(config or {})
        self.default_factory = default_factory
        self._pluggables: list[InAppMessagingProvider] = []

    def __iter__(self) -> Iterator[InAppMessagingProvider]:
        return iter(list(self._pluggables))

    def __len__(self) -> int:
        return len(self._pluggables)

    @property
    def pluggables(self) -> list[InAppMessagingProvider]:
        return list(self._pluggables)

    def register(self, pluggable: InAppMessagingProvider) -> bool:
        """
        Add a provider and configure it.

        Providers reporting another category/subcategory are ignored.

        Returns:
            True if the provider was added
        """
        if not is_in_app_provider(pluggable):
            logger.warning(f"Ignoring pluggable that is not an in-app messaging provider: {pluggable!r}")
            return False

        self._pluggables.append(pluggable)
        name = pluggable.get_provider_name()
        pluggable.configure(merge_provider_config(self.config, name))
        logger.debug(f"Added pluggable {name}", extra={"provider": name})
        return True

    def unregister(self, provider_name: str) -> bool:
        """
        Remove the first provider with this name.

        Returns:
            True if a provider was removed
        """
        for index, pluggable in enumerate(self._pluggables):
            if pluggable.get_provider_name() == provider_name:
                del self._pluggables[index]
                return True

        logger.debug(f"No plugin found with name {provider_name}")
        return False

    def lookup(self, provider_name: str) -> InAppMessagingProvider | None:
        """Return the first provider with this name, or None."""
        for pluggable in self._pluggables:
            if pluggable.get_provider_name() == provider_name:
                return pluggable

        logger.debug(f"No plugin found with name {provider_name}")
        return None

    def configure_all(self, config: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """
        Merge new global config and reconfigure every provider.

        When no provider is registered, the default provider is added
        afterwards so it is configured from the merged config.

        Returns:
            The merged global config
        """
        self.config = {**self.config, **(config or {})}

        for pluggable in self._pluggables:
            pluggable.configure(merge_provider_config(self.config, pluggable.get_provider_name()))

        if not self._pluggables and self.default_factory is not None:
            self.register(self.default_factory())

        return self.config
