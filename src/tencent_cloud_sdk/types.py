"""Type definitions for Tencent Cloud SDK."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

HttpMethod = Literal["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"]

# Verbs that never carry a request body.
BODYLESS_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})

# Verbs that are safe to repeat without an idempotency key.
IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "PUT", "DELETE"})

# POST actions following these naming conventions are read-only.
READ_ONLY_ACTION_PREFIXES = ("Describe", "Get", "List", "Inquiry")


@dataclass(frozen=True)
class TransportResponse:
    """One network attempt's result. Never mutated after construction."""

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""

    @property
    def is_success(self) -> bool:
        """Whether the status is 2xx."""
        return 200 <= self.status < 300

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None
