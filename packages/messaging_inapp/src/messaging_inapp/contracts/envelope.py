"""
Analytics Event Envelope

Boundary value received from the analytics bus: {event, data}.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from messaging_inapp.contracts.event_types import RECORD_EVENT


@dataclass(frozen=True)
class AnalyticsEvent:
    """
    Analytics bus payload.

    Attributes:
        event: Discriminator ("record" is the only one the engine acts on)
        data: Event-specific data, for records an in-app messaging event
              ({name, attributes, metrics})
    """

    event: str
    data: Any = None

    @property
    def is_record(self) -> bool:
        return self.event == RECORD_EVENT

    @classmethod
    def record(
        cls,
        name: str,
        attributes: dict[str, str] | None = None,
        metrics: dict[str, float] | None = None,
    ) -> "AnalyticsEvent":
        """Create a record event for the given analytics event name."""
        return cls(
            event=RECORD_EVENT,
            data={
                "name": name,
                "attributes": attributes or {},
                "metrics": metrics or {},
            },
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnalyticsEvent":
        """Create an event from a bus payload mapping."""
        return cls(event=str(data.get("event", "")), data=data.get("data"))

    @classmethod
    def coerce(cls, value: "AnalyticsEvent | Mapping[str, Any]") -> "AnalyticsEvent":
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.from_dict(value)
        raise TypeError(f"Expected AnalyticsEvent or mapping, got {type(value).__name__}")

    @classmethod
    def from_stream_message(cls, data: Mapping[str, str]) -> "AnalyticsEvent":
        """Parse a Redis Stream entry into an event."""
        return cls(
            event=data["event"],
            data=json.loads(data.get("data") or "null"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"event": self.event, "data": self.data}

    def to_stream_data(self) -> dict[str, str]:
        """Convert to dictionary suitable for Redis Stream (all string values)."""
        return {
            "event": self.event,
            "data": json.dumps(self.data),
        }
