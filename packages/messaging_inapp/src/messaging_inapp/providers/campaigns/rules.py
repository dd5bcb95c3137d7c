"""
Campaign Trigger Rules

Decides which cached campaign messages match an analytics record.
"""

import logging
import operator
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import ValidationError

from messaging_inapp.contracts.payloads import (
    Comparison,
    InAppMessage,
    InAppMessagingEvent,
    MetricCondition,
)

logger = logging.getLogger(__name__)

COMPARATORS: dict[Comparison, Callable[[float, float], bool]] = {
    Comparison.EQUAL: operator.eq,
    Comparison.GREATER_THAN: operator.gt,
    Comparison.GREATER_THAN_OR_EQUAL: operator.ge,
    Comparison.LESS_THAN: operator.lt,
    Comparison.LESS_THAN_OR_EQUAL: operator.le,
}


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps from the endpoint are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def metric_holds(value: float, condition: MetricCondition) -> bool:
    return COMPARATORS[condition.comparison](value, condition.value)


def is_active(message: InAppMessage, now: datetime) -> bool:
    """Check the message's start/end window."""
    if message.start is not None and now < _as_utc(message.start):
        return False
    if message.end is not None and now > _as_utc(message.end):
        return False
    return True


def is_match(message: InAppMessage, event: InAppMessagingEvent, now: datetime) -> bool:
    """
    Check whether a message should be shown for an event.

    All trigger conditions must hold:
    - event name equals trigger event_type
    - every trigger attribute is present with an allowed value
    - every trigger metric is present and satisfies its comparison
    - the message is inside its active window
    """
    trigger = message.trigger
    if trigger is None or trigger.event_type != event.name:
        return False

    for key, allowed in trigger.attributes.items():
        value = event.attributes.get(key)
        if value is None or value not in allowed:
            return False

    for key, condition in trigger.metrics.items():
        value = event.metrics.get(key)
        if value is None or not metric_holds(value, condition):
            return False

    return is_active(message, now)


def match_messages(
    messages: list[Any],
    event: InAppMessagingEvent | Mapping[str, Any] | None,
    now: datetime | None = None,
) -> list[Any]:
    """
    Select matching messages, ordered by priority.

    Messages are returned exactly as cached. Lower priority values come
    first, messages without a priority come last, ties keep cache order.
    Malformed cached entries are skipped.
    """
    if not isinstance(event, InAppMessagingEvent):
        try:
            event = InAppMessagingEvent.model_validate(event)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid in-app messaging event: {e}")
            return []

    now = now or datetime.now(timezone.utc)
    matched: list[tuple[InAppMessage, Any]] = []

    for raw in messages:
        try:
            message = InAppMessage.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Skipping malformed cached message: {e}")
            continue

        if is_match(message, event, now):
            matched.append((message, raw))

    matched.sort(key=lambda pair: (pair[0].priority is None, pair[0].priority or 0))
    return [raw for _message, raw in matched]
