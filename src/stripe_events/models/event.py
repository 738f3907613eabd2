"""Pydantic models for the event envelope delivered by the payments API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, SerializerFunctionWrapHandler, model_serializer, model_validator

from stripe_events.services.value_accessor import get_value


class EventRequest(BaseModel):
    """API request that triggered the event."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = ""
    idempotency_key: str = ""

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_request_id(cls, data: Any) -> Any:
        # Older API versions send the request id as a plain string
        if isinstance(data, str):
            return {"id": data}
        return data


def _sort_mapping_keys(value: Any) -> Any:
    """Recursively order mapping keys inside a decoded JSON value."""
    if isinstance(value, dict):
        return {key: _sort_mapping_keys(value[key]) for key in sorted(value)}
    if isinstance(value, list):
        return [_sort_mapping_keys(item) for item in value]
    return value


class EventData(BaseModel):
    """Object affected by the event, plus the attributes it changed.

    Fields serialize in declaration order. Keys inside the decoded mappings
    are sorted so that output does not depend on how they were built.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    previous_attributes: dict[str, Any] | None = None
    object: dict[str, Any] | None = None

    @model_serializer(mode="wrap")
    def _serialize_payload(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        # An empty mapping counts as unset; zero-valued entries inside a
        # non-empty mapping are kept.
        if self.previous_attributes:
            data["previous_attributes"] = _sort_mapping_keys(data["previous_attributes"])
        else:
            data.pop("previous_attributes", None)
        if data.get("object") is not None:
            data["object"] = _sort_mapping_keys(data["object"])
        return data


class Event(BaseModel):
    """Event envelope. Fields are declared in serialization order."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    account: str = ""
    api_version: str = ""
    created: int = 0
    data: EventData | None = None
    id: str = ""
    livemode: bool = False
    object: str = ""
    pending_webhooks: int = 0
    request: EventRequest | None = None
    type: str = ""

    @model_serializer(mode="wrap")
    def _omit_empty_account(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        if not self.account:
            data.pop("account", None)
        return data

    def get_object_value(self, *keys: str) -> str:
        """Return the text value at ``keys`` inside ``data.object``."""
        if self.data is None or self.data.object is None:
            return ""
        return get_value(self.data.object, *keys)

    def get_previous_value(self, *keys: str) -> str:
        """Return the text value at ``keys`` inside ``data.previous_attributes``."""
        if self.data is None or self.data.previous_attributes is None:
            return ""
        return get_value(self.data.previous_attributes, *keys)

    def to_json(self) -> str:
        from stripe_events.services.serializer import serialize_event

        return serialize_event(self)
