"""
Campaigns In-App Messaging Provider

Default provider. Fetches campaign messages from an HTTP endpoint
and evaluates their triggers locally.

Configuration (engine config section "Campaigns"):
- endpoint: URL returning a JSON list of messages, or {"messages": [...]}
- headers: extra request headers (e.g. Authorization)
- timeout: request timeout in seconds
"""

import logging
from typing import Any

import httpx

from messaging_inapp.providers.base import InAppMessagingProvider, ProviderError
from messaging_inapp.providers.campaigns.rules import match_messages

logger = logging.getLogger(__name__)

PROVIDER_NAME = "Campaigns"
DEFAULT_TIMEOUT = 30.0


class CampaignsProvider(InAppMessagingProvider):
    """
    HTTP campaigns provider.

    Messages use the InAppMessage shape (id, content, trigger, priority,
    start/end). Unknown fields are passed through to the host unchanged.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        super().__init__()
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    def get_provider_name(self) -> str:
        return PROVIDER_NAME

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=float(self.config.get("timeout", self.timeout)),
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def fetch_messages(self) -> list[Any]:
        """Fetch all campaign messages from the configured endpoint."""
        endpoint = self.config.get("endpoint")
        if not endpoint:
            logger.debug("No campaigns endpoint configured, nothing to fetch")
            return []

        client = await self._get_client()
        headers = dict(self.config.get("headers") or {})

        try:
            response = await client.get(endpoint, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"HTTP request failed: {e}")
            raise ProviderError(
                message=f"HTTP request failed: {e}",
                code="HTTP_ERROR",
                retryable=True,
            ) from e

        if response.status_code >= 400:
            raise ProviderError(
                message=f"Campaigns endpoint returned {response.status_code}",
                code=str(response.status_code),
                details={"body": response.text[:500]},
                retryable=response.status_code >= 500,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(message="Campaigns endpoint returned invalid JSON", code="INVALID_RESPONSE") from e

        messages = data.get("messages") if isinstance(data, dict) else data
        if not isinstance(messages, list):
            raise ProviderError(
                message="Campaigns endpoint returned no message list",
                code="INVALID_RESPONSE",
                details={"type": type(data).__name__},
            )

        logger.info(
            f"Fetched {len(messages)} campaign messages",
            extra={"provider": PROVIDER_NAME, "count": len(messages)},
        )
        return messages

    async def evaluate(self, messages: list[Any], event: Any) -> list[Any]:
        return match_messages(messages, event)
