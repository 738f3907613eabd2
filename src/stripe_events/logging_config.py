"""structlog setup for event handling.

Library modules log through ``logging.getLogger(__name__)``. Records are
rendered by structlog, and fields passed with ``extra=`` are kept as
structured keys. ``event_log_context`` binds the envelope fields of the event
being handled so every record emitted inside it carries them.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Iterator

import structlog

from stripe_events.models.event import Event

# Keys whose values must never reach a log sink
REDACTED_KEYS = frozenset({"secret", "webhook_secret", "signature", "signature_header"})


def redact_secrets(logger, method_name: str, event_dict: dict) -> dict:
    """Mask signing material passed as structured fields."""
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "[redacted]"
    return event_dict


def _renderer(json_output: bool):
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(log_level: str = "warning", json_output: bool = False) -> None:
    """Route stdlib logging through structlog on stderr.

    stdout is left to command output. Unknown level names fall back to
    warning.
    """
    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_output),
            ],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, log_level.upper(), logging.WARNING))


def event_fields(event: Event) -> dict:
    """Envelope fields bound to log records for an event."""
    return {
        "event_id": event.id,
        "event_type": event.type,
        "api_version": event.api_version,
        "livemode": event.livemode,
    }


@contextmanager
def event_log_context(event: Event) -> Iterator[None]:
    """Bind ``event``'s envelope fields for the duration of the block."""
    with structlog.contextvars.bound_contextvars(**event_fields(event)):
        yield
