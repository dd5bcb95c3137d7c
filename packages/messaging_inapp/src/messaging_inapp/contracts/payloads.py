"""
In-App Messaging Payload Models

Pydantic models for analytics record data and for the message
shape understood by the default Campaigns provider. The engine
itself treats messages as opaque JSON-serializable values.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Comparison(str, Enum):
    """Metric comparison operators used by message triggers."""

    EQUAL = "EQUAL"
    GREATER_THAN = "GREATER_THAN"
    GREATER_THAN_OR_EQUAL = "GREATER_THAN_OR_EQUAL"
    LESS_THAN = "LESS_THAN"
    LESS_THAN_OR_EQUAL = "LESS_THAN_OR_EQUAL"


class InAppMessagingEvent(BaseModel):
    """
    Data of an analytics "record" event.

    This is what providers evaluate their cached messages against.
    """

    name: str = Field(..., description="Analytics event name (e.g. 'purchase')")
    attributes: dict[str, str] = Field(default_factory=dict, description="String attributes")
    metrics: dict[str, float] = Field(default_factory=dict, description="Numeric metrics")


class MetricCondition(BaseModel):
    comparison: Comparison
    value: float


class MessageTrigger(BaseModel):
    """Event conditions under which a message should be shown."""

    event_type: str = Field(..., description="Analytics event name that triggers the message")
    attributes: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Attribute name -> allowed values",
    )
    metrics: dict[str, MetricCondition] = Field(
        default_factory=dict,
        description="Metric name -> comparison",
    )


class InAppMessage(BaseModel):
    """
    In-app message as served by the Campaigns endpoint.

    Unknown fields are kept so the host receives the message unchanged.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Message ID")
    layout: str | None = Field(None, description="Layout hint for the renderer")
    content: list[dict[str, Any]] = Field(default_factory=list, description="Renderable content blocks")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Campaign metadata")
    trigger: MessageTrigger | None = Field(None, description="When to show the message")
    priority: int | None = Field(None, description="Lower value is shown first")
    start: datetime | None = Field(None, description="Message is inactive before this time")
    end: datetime | None = Field(None, description="Message is inactive after this time")
