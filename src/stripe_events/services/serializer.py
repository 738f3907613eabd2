"""Canonical JSON encoding and decoding of event envelopes."""

import json
import logging
from typing import Any

from pydantic import ValidationError

from stripe_events.errors.exceptions import EventParseError
from stripe_events.models.event import Event

logger = logging.getLogger(__name__)


def canonical_json(value: Any) -> str:
    """Compact JSON, keys in the order the value already holds them."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def serialize_event(event: Event) -> str:
    """Serialize an event to its canonical JSON text.

    Envelope fields appear in model declaration order, which is
    alphabetical. Keys inside ``data.object`` and ``data.previous_attributes``
    are sorted. Required scalars are always present with their zero values.
    ``account`` is omitted when empty, ``request`` and ``data`` are ``null``
    when unset, and ``data.previous_attributes`` is omitted unless it has
    entries.
    """
    return canonical_json(event.model_dump(mode="json"))


def parse_event(payload: str | bytes) -> Event:
    """Decode JSON text into an Event.

    Raises:
        EventParseError: The payload is not JSON or not an event object.
    """
    try:
        decoded = json.loads(payload)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise EventParseError(f"Event payload is not valid JSON: {exc}") from exc

    if not isinstance(decoded, dict):
        raise EventParseError(
            f"Event payload must be a JSON object, got {type(decoded).__name__}"
        )

    try:
        event = Event.model_validate(decoded)
    except ValidationError as exc:
        raise EventParseError(
            "Event payload failed validation",
            details=exc.errors(include_url=False, include_input=False),
        ) from exc

    logger.debug("Parsed event %s (%s)", event.id, event.type)
    return event
