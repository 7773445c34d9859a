"""Pydantic models shared by service bindings.

Frozen models; responses ignore fields the SDK does not model so new
provider fields never break decoding.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field


class Filter(BaseModel):
    """General-purpose filter structure."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., alias="Name", min_length=1)
    values: list[str] = Field(default_factory=list, alias="Values")

    @classmethod
    def of(cls, name: str, values: Iterable[str]) -> Filter:
        return cls(name=name, values=list(values))

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class Tag(BaseModel):
    """Key/value tag reused across services."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str = Field(..., alias="Key")
    value: str = Field(..., alias="Value")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ActionResult(BaseModel):
    """Inner ``Response`` object common to every action."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    request_id: str = Field(..., alias="RequestId")


ResultT = TypeVar("ResultT", bound=ActionResult)


class Envelope(BaseModel, Generic[ResultT]):
    """``{"Response": {...}}`` wrapper around an action result."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    response: ResultT = Field(..., alias="Response")

    @property
    def request_id(self) -> str:
        """Provider request id."""
        return self.response.request_id


# For actions whose response carries nothing but the request id.
ActionResponse = Envelope[ActionResult]


def compact_payload(**fields: Any) -> dict[str, Any]:
    """Build a request payload, dropping unset (``None``) fields.

    Models exposing ``to_payload()`` (and lists of them) are converted.
    """
    payload: dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            value = [item.to_payload() if hasattr(item, "to_payload") else item for item in value]
        elif hasattr(value, "to_payload"):
            value = value.to_payload()
        payload[key] = value
    return payload
