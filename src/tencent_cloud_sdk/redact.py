"""Redaction of response bodies captured for diagnostics.

Only used to build the ``body_snippet`` attached to errors; the value
returned to callers is never redacted.
"""

from __future__ import annotations

import json
from typing import Any

REDACTED = "[redacted]"
TRUNCATION_MARKER = "..."

_SENSITIVE_KEYS = frozenset(
    {
        "authorization",
        "cookie",
        "token",
        "accesstoken",
        "idtoken",
        "refreshtoken",
        "secret",
        "secretid",
        "secretkey",
        "apikey",
        "privatekey",
        "password",
        "passwd",
        "signature",
    }
)


def is_sensitive_key(key: str) -> bool:
    """Check a JSON key against the sensitive-name heuristic.

    Keys are compared lower-cased with non-alphanumerics dropped, so
    ``Secret-Key``, ``secret_key`` and ``SecretKey`` all match.
    """
    normalized = "".join(ch.lower() for ch in key if ch.isascii() and ch.isalnum())
    return (
        normalized in _SENSITIVE_KEYS
        or "secret" in normalized
        or "password" in normalized
        or normalized.endswith("token")
        or normalized.endswith("privatekey")
    )


def redact_value(value: Any) -> Any:
    """Recursively replace sensitive values in decoded JSON."""
    if isinstance(value, dict):
        return {
            key: REDACTED if is_sensitive_key(key) else redact_value(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact_value(item) for item in value]
    return value


def redact_body(body: str) -> str:
    """Redact a JSON body; non-JSON bodies pass through unchanged."""
    try:
        value = json.loads(body)
    except ValueError:
        return body
    return json.dumps(redact_value(value), ensure_ascii=False, separators=(",", ":"))


def truncate_to_bytes(value: str, max_bytes: int) -> str:
    """Cut ``value`` to at most ``max_bytes`` UTF-8 bytes plus a marker."""
    encoded = value.encode("utf-8")
    if len(encoded) <= max_bytes:
        return value
    # a multi-byte character split at the boundary is dropped
    return encoded[:max_bytes].decode("utf-8", errors="ignore") + TRUNCATION_MARKER


def body_snippet(body: str, max_bytes: int) -> str:
    """Redacted, size-bounded snippet of a response body."""
    return truncate_to_bytes(redact_body(body), max_bytes)
