"""Request URL and body construction shared by sync and async executors."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any
from urllib.parse import quote

from ..errors import InvalidConfigError
from ..types import BODYLESS_METHODS

# RFC 3986 unreserved characters (letters and digits are always kept).
_UNRESERVED = "-_.~"


def encode_component(value: str) -> str:
    """Percent-encode everything except unreserved characters."""
    return quote(value, safe=_UNRESERVED)


def canonical_query_string(pairs: Iterable[tuple[str, str]]) -> str:
    """Stable query string: sorted by key then value, percent-encoded.

    Any permutation of the same pairs yields the same string.
    """
    items = sorted((str(key), str(value)) for key, value in pairs)
    return "&".join(
        f"{encode_component(key)}={encode_component(value)}" for key, value in items
    )


def build_path(path_segments: Iterable[str]) -> str:
    """Join individually encoded path segments; ``/`` when there are none."""
    segments = [encode_component(segment) for segment in path_segments]
    return "/" + "/".join(segments)


def build_url(scheme: str, host: str, path: str, canonical_query: str) -> str:
    """Assemble ``scheme://host/path[?query]``."""
    url = f"{scheme}://{host}{path}"
    if canonical_query:
        url += f"?{canonical_query}"
    return url


def serialize_payload(method: str, payload: Any) -> bytes | None:
    """JSON body for verbs that carry one; ``None`` otherwise.

    Raises:
        InvalidConfigError: If the payload is not JSON-serializable.
    """
    if method.upper() in BODYLESS_METHODS or payload is None:
        return None
    try:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise InvalidConfigError("failed to serialize request payload", cause=e) from e
