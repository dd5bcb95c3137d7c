"""
In-App Messaging Provider Base

Abstract interface for in-app message backends.
Implementations: Campaigns (default, HTTP), Stub (for development).
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from messaging_inapp.contracts.event_types import (
    IN_APP_MESSAGING_SUBCATEGORY,
    NOTIFICATIONS_CATEGORY,
)
from messaging_inapp.errors import InAppMessagingError


class ProviderError(InAppMessagingError):
    """Error from an in-app messaging provider."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.retryable = retryable


class InAppMessagingProvider(ABC):
    """
    Abstract interface for in-app messaging providers.

    Implementations must handle:
    - Fetching the current messages from their backend
    - Deciding which cached messages match an analytics record

    Messages are opaque to the engine but must be JSON-serializable,
    since they are cached as JSON between fetch and evaluation.
    """

    def __init__(self) -> None:
        self.config: dict[str, Any] = {}

    @abstractmethod
    def get_provider_name(self) -> str:
        """Unique provider name. Also names the provider's cache slot."""
        ...

    def get_category(self) -> str:
        return NOTIFICATIONS_CATEGORY

    def get_sub_category(self) -> str:
        return IN_APP_MESSAGING_SUBCATEGORY

    def configure(self, config: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """
        Apply configuration.

        Args:
            config: Global engine config merged with this provider's own section

        Returns:
            The provider's effective config
        """
        self.config = {**self.config, **(config or {})}
        return self.config

    @abstractmethod
    async def fetch_messages(self) -> list[Any]:
        """
        Fetch the provider's current messages.

        Returns:
            Messages to cache (may be empty)

        Raises:
            ProviderError: If the backend could not be reached
        """
        ...

    @abstractmethod
    async def evaluate(self, messages: list[Any], event: Any) -> list[Any]:
        """
        Select the cached messages that match an analytics record.

        Args:
            messages: Messages read from this provider's cache slot
            event: Record data ({name, attributes, metrics})

        Returns:
            Matching messages in display order
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the provider."""
        return None
