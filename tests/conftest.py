"""Shared test fixtures."""

import json
import logging
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


def load_fixture_bytes(rel_path: str) -> bytes:
    return (FIXTURES_DIR / rel_path).read_bytes()


@pytest.fixture
def object_payload() -> dict:
    """A nested data.object covering every kind of path step."""
    return {
        "top_level_key": "top_level",
        "integer_key": 123,
        "map": {"nested_key": "nested"},
        "slice": ["index-0", "index-1", "index-2"],
        "slice_of_maps": [{"slice_nested_key": "slice_nested"}],
    }


@pytest.fixture
def invoice_event_bytes() -> bytes:
    return load_fixture_bytes("events/invoice.updated.json")


@pytest.fixture
def invoice_event_dict(invoice_event_bytes) -> dict:
    return json.loads(invoice_event_bytes)


@pytest.fixture
def legacy_event_bytes() -> bytes:
    return load_fixture_bytes("events/customer.created.legacy.json")


@pytest.fixture(autouse=True)
def restore_root_logging():
    """configure_logging() replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
