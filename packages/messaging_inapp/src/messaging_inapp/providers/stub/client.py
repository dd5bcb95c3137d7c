"""
Stub In-App Messaging Provider

Development provider serving a fixed list of messages without any
backend calls. Useful for local development and testing.
"""

import logging
from collections.abc import Mapping
from typing import Any

from messaging_inapp.providers.base import InAppMessagingProvider, ProviderError

logger = logging.getLogger(__name__)


class StubInAppMessagingProvider(InAppMessagingProvider):
    """
    Stub provider for development and testing.

    - Serves the configured messages from fetch_messages()
    - Matches messages whose trigger event_type equals the record name
    - Records every call
    - Can be configured to fail fetch or evaluate
    """

    def __init__(
        self,
        messages: list[Any] | None = None,
        name: str = "Stub",
        fail_fetch: bool = False,
        fail_evaluate: bool = False,
    ):
        super().__init__()
        self.name = name
        self.messages = list(messages or [])
        self.fail_fetch = fail_fetch
        self.fail_evaluate = fail_evaluate
        self.fetch_calls = 0
        self.evaluate_calls: list[tuple[list[Any], Any]] = []
        self.configure_calls: list[dict[str, Any]] = []
        self.closed = False

    def get_provider_name(self) -> str:
        return self.name

    def configure(self, config: Mapping[str, Any] | None = None) -> dict[str, Any]:
        self.configure_calls.append(dict(config or {}))
        return super().configure(config)

    async def fetch_messages(self) -> list[Any]:
        self.fetch_calls += 1
        logger.info(f"[STUB] Fetching {len(self.messages)} messages", extra={"provider": self.name})

        if self.fail_fetch:
            raise ProviderError("Simulated fetch failure", code="STUB_SIMULATED_FAILURE")

        return list(self.messages)

    async def evaluate(self, messages: list[Any], event: Any) -> list[Any]:
        self.evaluate_calls.append((messages, event))

        if self.fail_evaluate:
            raise ProviderError("Simulated evaluate failure", code="STUB_SIMULATED_FAILURE")

        name = event.get("name") if isinstance(event, Mapping) else None
        return [
            message
            for message in messages
            if isinstance(message, Mapping) and (message.get("trigger") or {}).get("event_type") == name
        ]

    async def close(self) -> None:
        self.closed = True
