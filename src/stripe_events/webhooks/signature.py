"""Webhook signature verification with HMAC-SHA256.

Signed deliveries carry a header of the form::

    t=1700000000,v1=5257a869...,v0=6ffbb59b...

where each ``v1`` value is the hex HMAC-SHA256 of ``"<t>.<raw body>"`` under
the endpoint secret. Several ``v1`` entries may be present while a secret is
being rolled.
"""

import hashlib
import hmac
import logging
import re
import time

from stripe_events.config import settings
from stripe_events.errors.exceptions import APIVersionMismatchError, SignatureVerificationError
from stripe_events.logging_config import event_log_context
from stripe_events.models.event import Event
from stripe_events.services.serializer import parse_event

logger = logging.getLogger(__name__)

SIGNING_SCHEME = "v1"

# Unix seconds: ASCII digits only, no sign, whitespace or underscores
_TIMESTAMP_RE = re.compile(r"[0-9]+")


def _as_bytes(payload: str | bytes) -> bytes:
    return payload.encode("utf-8") if isinstance(payload, str) else payload


def compute_signature(timestamp: int, payload: str | bytes, secret: str) -> str:
    """Compute the HMAC-SHA256 signature over ``"<timestamp>.<payload>"``."""
    signed = str(timestamp).encode("utf-8") + b"." + _as_bytes(payload)
    return hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()


def generate_test_header(
    payload: str | bytes,
    secret: str,
    timestamp: int | None = None,
    scheme: str = SIGNING_SCHEME,
) -> str:
    """Build a signature header for ``payload``, for use in tests and fixtures."""
    if timestamp is None:
        timestamp = int(time.time())
    return f"t={timestamp},{scheme}={compute_signature(timestamp, payload, secret)}"


def _parse_header(header: str) -> tuple[int, list[str]]:
    timestamp = None
    signatures = []
    for item in header.split(","):
        key, sep, value = item.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            if not _TIMESTAMP_RE.fullmatch(value):
                raise SignatureVerificationError(
                    "INVALID_HEADER", "Signature header has a non-integer timestamp", header
                )
            timestamp = int(value)
        elif key == SIGNING_SCHEME:
            signatures.append(value)

    if timestamp is None:
        raise SignatureVerificationError(
            "INVALID_HEADER", "Signature header has no timestamp", header
        )
    if not signatures:
        raise SignatureVerificationError(
            "NO_VALID_SIGNATURE",
            f"Signature header has no {SIGNING_SCHEME} signatures",
            header,
        )
    return timestamp, signatures


def verify_header(
    payload: str | bytes,
    header: str,
    secret: str,
    tolerance: int | None = None,
    now: float | None = None,
) -> None:
    """Verify a signature header against the raw request body.

    Args:
        payload: Raw body exactly as received.
        header: Value of the signature header.
        secret: Endpoint signing secret.
        tolerance: Maximum signature age in seconds. Zero or negative
            disables the check. Defaults to the configured tolerance.
        now: Current unix time, for tests.

    Raises:
        SignatureVerificationError: If the header is missing, malformed,
            older than the tolerance, or carries no matching signature.
    """
    if not header:
        raise SignatureVerificationError("NOT_SIGNED", "Webhook has no signature header")

    if tolerance is None:
        tolerance = settings.webhook_tolerance_seconds
    if now is None:
        now = time.time()

    timestamp, signatures = _parse_header(header)

    if tolerance > 0 and now - timestamp > tolerance:
        logger.warning("Rejected webhook signed at %d, older than %ds", timestamp, tolerance)
        raise SignatureVerificationError(
            "TIMESTAMP_OUTSIDE_TOLERANCE",
            f"Signature timestamp {timestamp} is outside the tolerance of {tolerance}s",
            header,
        )

    expected = compute_signature(timestamp, payload, secret)
    if not any(hmac.compare_digest(expected.encode("utf-8"), sig.encode("utf-8")) for sig in signatures):
        logger.warning(
            "Rejected webhook with no matching %s signature",
            SIGNING_SCHEME,
            extra={"signature_header": header},
        )
        raise SignatureVerificationError(
            "NO_VALID_SIGNATURE", "No signature matches the expected signature for the payload", header
        )


def construct_event(
    payload: str | bytes,
    header: str,
    secret: str,
    tolerance: int | None = None,
    expected_api_version: str | None = None,
) -> Event:
    """Verify a signed webhook delivery and parse it into an Event.

    ``expected_api_version`` defaults to the configured value; when neither
    is set the event's API version is not checked.
    """
    verify_header(payload, header, secret, tolerance=tolerance)
    event = parse_event(payload)

    if expected_api_version is None:
        expected_api_version = settings.expected_api_version
    with event_log_context(event):
        if expected_api_version and event.api_version != expected_api_version:
            logger.warning("Rejected webhook event rendered with another API version")
            raise APIVersionMismatchError(event.api_version, expected_api_version)
        logger.info("Verified webhook event")
    return event
