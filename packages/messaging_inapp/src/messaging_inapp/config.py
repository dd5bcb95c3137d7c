"""
In-App Messaging Configuration

Validated view of the mapping passed to InAppMessaging.configure().
Unknown keys are kept: provider sections are keyed by provider name.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Keys consumed by configure() itself and not stored in the global config
LISTEN_KEYS = ("listenForAnalyticsEvents", "listen_for_analytics_events")


class InAppMessagingConfig(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, arbitrary_types_allowed=True)

    listen_for_analytics_events: bool = Field(
        True,
        alias="listenForAnalyticsEvents",
        description="Subscribe to analytics 'record' events",
    )
    isolate_provider_errors: bool = Field(
        False,
        alias="isolateProviderErrors",
        description="Log and skip failing providers instead of failing the whole operation",
    )
    storage: Any = Field(None, description="Storage backend for the message cache")


def split_config(config: dict[str, Any] | None) -> tuple[InAppMessagingConfig, dict[str, Any]]:
    """
    Validate a configure() mapping.

    Returns:
        (validated options, mapping to merge into the global config)
    """
    raw = dict(config or {})
    options = InAppMessagingConfig.model_validate(raw)
    stored = {key: value for key, value in raw.items() if key not in LISTEN_KEYS}
    if "isolate_provider_errors" in stored or "isolateProviderErrors" in stored:
        stored.pop("isolate_provider_errors", None)
        # Stored as the validated bool so "false" stays False
        stored["isolateProviderErrors"] = options.isolate_provider_errors
    return options, stored
