"""Custom exception classes for stripe-events."""


class StripeEventsError(Exception):
    """Base exception for stripe-events."""

    def __init__(self, code: str, message: str, details=None):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)


class PathError(StripeEventsError):
    """A path segment is structurally incompatible with the value it addresses.

    These indicate a caller bug, not missing data, and are never converted
    into an empty result.
    """

    def __init__(self, code: str, message: str, segment: str):
        self.segment = segment
        super().__init__(code, message, {"segment": segment})


class NonIntegerKeyError(PathError):
    """Non-integer segment used to index into a sequence."""

    def __init__(self, segment: str):
        super().__init__(
            "NON_INTEGER_KEY",
            f"Cannot access nested slice element with non-integer key: {segment}",
            segment,
        )


class NonDescendableValueError(PathError):
    """Further descent requested into a scalar or null."""

    def __init__(self, segment: str):
        super().__init__(
            "NON_DESCENDABLE_VALUE",
            f"Cannot descend into non-map non-slice object with key: {segment}",
            segment,
        )


class SequenceIndexError(PathError):
    """Integer segment outside the bounds of the sequence."""

    def __init__(self, segment: str):
        super().__init__(
            "INDEX_OUT_OF_RANGE",
            f"Sequence index out of range: {segment}",
            segment,
        )


class EventParseError(StripeEventsError):
    """Payload is not a decodable event."""

    def __init__(self, message: str, details=None):
        super().__init__("INVALID_PAYLOAD", message, details)


class SignatureVerificationError(StripeEventsError):
    """Webhook signature header is missing, malformed, stale or wrong."""

    def __init__(self, code: str, message: str, header: str | None = None):
        super().__init__(code, message, {"header": header} if header else None)


class APIVersionMismatchError(StripeEventsError):
    """Event was rendered with a different API version than expected."""

    def __init__(self, received: str, expected: str):
        super().__init__(
            "API_VERSION_MISMATCH",
            f"Received event with API version {received}, but expected API version {expected}",
            {"received": received, "expected": expected},
        )
