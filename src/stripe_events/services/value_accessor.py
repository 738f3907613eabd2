"""Read-only path access into decoded JSON payloads.

Payloads arrive as whatever ``json.loads`` produced: nested dicts, lists and
scalars of unknown shape. ``get_value`` walks such a value one path segment
per level and returns the addressed leaf as text.

Missing keys are expected on variably-shaped payloads and yield ``""``.
Segments that cannot apply to the value at their depth (a non-integer
index into a list, or any key below a scalar) raise a ``PathError``.
"""

import json
import logging
import math
import re
from collections.abc import Mapping
from typing import Any

from stripe_events.errors.exceptions import (
    NonDescendableValueError,
    NonIntegerKeyError,
    SequenceIndexError,
)

logger = logging.getLogger(__name__)

# Optional sign followed by ASCII digits
_INDEX_RE = re.compile(r"[+-]?[0-9]+")


def get_value(root: Any, *path: str) -> str:
    """Return the text form of the value at ``path`` below ``root``.

    Args:
        root: Decoded JSON value to traverse. Never modified.
        *path: Mapping keys or base-10 sequence indices, outermost first.

    Returns:
        The leaf as text, or ``""`` when a mapping key is absent or the leaf
        is null.

    Raises:
        NonIntegerKeyError: A non-integer segment was applied to a sequence.
        SequenceIndexError: An integer segment is outside the sequence.
        NonDescendableValueError: A segment was applied to a scalar or null.
    """
    current = root
    for segment in path:
        if isinstance(current, Mapping):
            if segment not in current:
                logger.debug("Path segment %r not found, returning empty value", segment)
                return ""
            current = current[segment]
        elif isinstance(current, (list, tuple)):
            current = current[_parse_index(segment, len(current))]
        else:
            raise NonDescendableValueError(segment)

    return to_text(current)


def _parse_index(segment: str, length: int) -> int:
    if not _INDEX_RE.fullmatch(segment):
        raise NonIntegerKeyError(segment)
    index = int(segment)
    if index < 0 or index >= length:
        raise SequenceIndexError(segment)
    return index


def to_text(value: Any) -> str:
    """Render a decoded JSON value as plain text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    # bool before int: True is an int
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        # Integral floats print as integers below the exponent threshold
        if math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return str(value)
