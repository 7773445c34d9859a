"""Endpoint capability consumed by the request executor.

Each provider action is one concrete :class:`Endpoint` subclass. The
executor only ever talks to this interface, never to concrete action types.
"""

from __future__ import annotations

from abc import ABC
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from .types import IDEMPOTENT_METHODS, READ_ONLY_ACTION_PREFIXES, HttpMethod

T = TypeVar("T")


class Endpoint(ABC, Generic[T]):
    """One provider action.

    Subclasses set the class attributes and override whichever producers
    they need. ``response_model`` drives the default :meth:`parse`.
    """

    service: ClassVar[str]
    action: ClassVar[str]
    version: ClassVar[str]
    method: ClassVar[HttpMethod] = "POST"
    path_segments: ClassVar[tuple[str, ...]] = ()
    response_model: ClassVar[type[BaseModel] | None] = None

    region: str | None = None

    @property
    def is_idempotent(self) -> bool:
        """Whether the action is safe to retry without an idempotency key.

        Idempotent verbs always are; a POST is only when its action name
        follows a read-only convention (``Describe*``, ``Get*``, ...).
        """
        method = self.method.upper()
        if method in IDEMPOTENT_METHODS:
            return True
        if method == "POST":
            return self.action.startswith(READ_ONLY_ACTION_PREFIXES)
        return False

    def query(self) -> list[tuple[str, str]]:
        """Query parameters; order does not matter."""
        return []

    def payload(self) -> Any:
        """JSON-serializable request body, or ``None`` for no body."""
        return {}

    def extra_headers(self) -> dict[str, str]:
        """Endpoint-specific headers merged after signing."""
        return {}

    def parse(self, body: Any) -> T:
        """Decode the JSON success body into the typed result.

        Raises:
            pydantic.ValidationError: If the body does not match the model.
        """
        if self.response_model is None:
            return body
        return self.response_model.model_validate(body)  # type: ignore[return-value]
