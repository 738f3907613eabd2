"""Tests for webhook signature verification."""

import hashlib
import hmac

import pytest

from stripe_events.errors.exceptions import APIVersionMismatchError, SignatureVerificationError
from stripe_events.webhooks.signature import (
    compute_signature,
    construct_event,
    generate_test_header,
    verify_header,
)

SECRET = "whsec_test_secret"
NOW = 1_700_000_000


def test_compute_signature():
    """HMAC-SHA256 over "<timestamp>.<payload>"."""
    body = b'{"id":"evt_1"}'
    expected = hmac.new(SECRET.encode("utf-8"), b"1700000000." + body, hashlib.sha256).hexdigest()
    assert compute_signature(NOW, body, SECRET) == expected
    assert compute_signature(NOW, body.decode("utf-8"), SECRET) == expected


def test_generate_test_header():
    header = generate_test_header("{}", SECRET, timestamp=NOW)
    assert header == f"t={NOW},v1={compute_signature(NOW, '{}', SECRET)}"


def test_verify_valid_header():
    header = generate_test_header("{}", SECRET, timestamp=NOW)
    verify_header("{}", header, SECRET, now=NOW + 10)


def test_verify_accepts_any_matching_v1_signature():
    good = compute_signature(NOW, "{}", SECRET)
    header = f"t={NOW},v1={'0' * 64},v1={good},v0=legacy"
    verify_header("{}", header, SECRET, now=NOW)


def test_missing_header():
    with pytest.raises(SignatureVerificationError) as exc_info:
        verify_header("{}", "", SECRET)
    assert exc_info.value.code == "NOT_SIGNED"


@pytest.mark.parametrize("header", ["v1=abc", "t=soon,v1=abc", "garbage"])
def test_invalid_header(header):
    with pytest.raises(SignatureVerificationError) as exc_info:
        verify_header("{}", header, SECRET, now=NOW)
    assert exc_info.value.code == "INVALID_HEADER"


def test_header_without_v1_signature():
    header = generate_test_header("{}", SECRET, timestamp=NOW, scheme="v0")
    with pytest.raises(SignatureVerificationError) as exc_info:
        verify_header("{}", header, SECRET, now=NOW)
    assert exc_info.value.code == "NO_VALID_SIGNATURE"


def test_wrong_secret():
    header = generate_test_header("{}", "whsec_other", timestamp=NOW)
    with pytest.raises(SignatureVerificationError) as exc_info:
        verify_header("{}", header, SECRET, now=NOW)
    assert exc_info.value.code == "NO_VALID_SIGNATURE"


def test_tampered_payload():
    header = generate_test_header('{"amount":100}', SECRET, timestamp=NOW)
    with pytest.raises(SignatureVerificationError):
        verify_header('{"amount":1}', header, SECRET, now=NOW)


def test_stale_timestamp():
    header = generate_test_header("{}", SECRET, timestamp=NOW)
    with pytest.raises(SignatureVerificationError) as exc_info:
        verify_header("{}", header, SECRET, tolerance=300, now=NOW + 301)
    assert exc_info.value.code == "TIMESTAMP_OUTSIDE_TOLERANCE"


def test_zero_tolerance_disables_age_check():
    header = generate_test_header("{}", SECRET, timestamp=NOW)
    verify_header("{}", header, SECRET, tolerance=0, now=NOW + 86_400)


class TestConstructEvent:
    def test_returns_parsed_event(self, invoice_event_bytes):
        header = generate_test_header(invoice_event_bytes, SECRET)
        event = construct_event(invoice_event_bytes, header, SECRET)
        assert event.id == "evt_1NG8Du2eZvKYlo2CUI79vXWy"
        assert event.get_object_value("amount_paid") == "2000"

    def test_rejects_bad_signature(self, invoice_event_bytes):
        header = generate_test_header(invoice_event_bytes, "whsec_other")
        with pytest.raises(SignatureVerificationError):
            construct_event(invoice_event_bytes, header, SECRET)

    def test_api_version_match(self, invoice_event_bytes):
        header = generate_test_header(invoice_event_bytes, SECRET)
        event = construct_event(invoice_event_bytes, header, SECRET, expected_api_version="2023-10-16")
        assert event.api_version == "2023-10-16"

    def test_api_version_mismatch(self, legacy_event_bytes):
        header = generate_test_header(legacy_event_bytes, SECRET)
        with pytest.raises(APIVersionMismatchError) as exc_info:
            construct_event(legacy_event_bytes, header, SECRET, expected_api_version="2023-10-16")
        assert exc_info.value.details == {"received": "2017-05-25", "expected": "2023-10-16"}

    def test_configured_api_version_is_used(self, legacy_event_bytes, monkeypatch):
        from stripe_events.config import settings

        monkeypatch.setattr(settings, "expected_api_version", "2023-10-16")
        header = generate_test_header(legacy_event_bytes, SECRET)
        with pytest.raises(APIVersionMismatchError):
            construct_event(legacy_event_bytes, header, SECRET)


@pytest.mark.parametrize("timestamp", [" 5", "+5", "-5", "1_000", "5.0", "٥"])
def test_timestamp_must_be_plain_digits(timestamp):
    signature = compute_signature(5, "{}", SECRET)
    with pytest.raises(SignatureVerificationError) as exc_info:
        verify_header("{}", f"t={timestamp},v1={signature}", SECRET, tolerance=0)
    assert exc_info.value.code == "INVALID_HEADER"
