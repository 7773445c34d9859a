"""TC3-HMAC-SHA256 request signing.

Builds the canonical request, derives the date/service/scope key chain and
produces the signed header set. Pure functions of their inputs: a fresh
:class:`SigningInput` (with a fresh timestamp) is signed on every attempt.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from datetime import UTC, datetime

from .credentials import Credentials
from .errors import SigningError

ALGORITHM = "TC3-HMAC-SHA256"
KEY_PREFIX = "TC3"
SCOPE_SUFFIX = "tc3_request"
CONTENT_TYPE = "application/json; charset=utf-8"
SIGNED_HEADERS = "content-type;host;x-tc-action"

HEADER_ACTION = "X-TC-Action"
HEADER_VERSION = "X-TC-Version"
HEADER_TIMESTAMP = "X-TC-Timestamp"
HEADER_REGION = "X-TC-Region"
HEADER_TOKEN = "X-TC-Token"

# 9999-12-31T23:59:59Z
_MAX_TIMESTAMP = 253402300799


@dataclass(frozen=True, slots=True)
class SigningInput:
    """Everything that goes into one signature."""

    method: str
    service: str
    host: str
    path: str
    canonical_query: str
    region: str | None
    action: str
    version: str
    payload: bytes
    timestamp: int


def sha256_hex(data: bytes) -> str:
    """Hex-encoded SHA-256 digest."""
    return hashlib.sha256(data).hexdigest()


def hmac_sha256(key: bytes, msg: str) -> bytes:
    """Raw HMAC-SHA256 digest of ``msg`` under ``key``."""
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def canonical_request(input: SigningInput) -> str:
    """Build the canonical request string that is hashed and signed."""
    canonical_headers = (
        f"content-type:{CONTENT_TYPE}\n"
        f"host:{input.host}\n"
        f"x-tc-action:{input.action.lower()}\n"
    )
    return "\n".join(
        (
            input.method.upper(),
            input.path,
            input.canonical_query,
            canonical_headers,
            SIGNED_HEADERS,
            sha256_hex(input.payload),
        )
    )


def credential_scope(date: str, service: str) -> str:
    """``date/service/tc3_request``."""
    return f"{date}/{service}/{SCOPE_SUFFIX}"


def signing_date(timestamp: int) -> str:
    """UTC calendar date for a unix timestamp.

    Raises:
        SigningError: If the timestamp is out of range.
    """
    if timestamp < 0 or timestamp > _MAX_TIMESTAMP:
        raise SigningError(f"timestamp {timestamp} is out of range")
    return datetime.fromtimestamp(timestamp, tz=UTC).strftime("%Y-%m-%d")


def derive_signing_key(secret_key: str, date: str, service: str) -> bytes:
    """Derive the TC3 signing key: ``TC3+key -> date -> service -> tc3_request``."""
    date_key = hmac_sha256(f"{KEY_PREFIX}{secret_key}".encode("utf-8"), date)
    service_key = hmac_sha256(date_key, service)
    return hmac_sha256(service_key, SCOPE_SUFFIX)


def sign(credentials: Credentials, input: SigningInput) -> str:
    """Compute the ``Authorization`` header value."""
    secret_id = credentials.secret_id.get_secret_value()
    secret_key = credentials.secret_key.get_secret_value()
    if not secret_id or not secret_key:
        raise SigningError("missing secret id or secret key")

    date = signing_date(input.timestamp)
    scope = credential_scope(date, input.service)
    string_to_sign = "\n".join(
        (
            ALGORITHM,
            str(input.timestamp),
            scope,
            sha256_hex(canonical_request(input).encode("utf-8")),
        )
    )

    key = derive_signing_key(secret_key, date, input.service)
    signature = hmac.new(key, string_to_sign.encode("utf-8"), hashlib.sha256).hexdigest()

    return (
        f"{ALGORITHM} Credential={secret_id}/{scope}, "
        f"SignedHeaders={SIGNED_HEADERS}, Signature={signature}"
    )


def header_value_problem(value: str) -> str | None:
    """Why ``value`` cannot travel in an HTTP header, or ``None``."""
    if "\r" in value or "\n" in value:
        return "contains a line break"
    try:
        value.encode("latin-1")
    except UnicodeEncodeError:
        return "is not latin-1 encodable"
    return None


def build_signed_headers(credentials: Credentials, input: SigningInput) -> dict[str, str]:
    """Produce the complete signed header set for one attempt.

    Raises:
        SigningError: On missing credentials, an out-of-range timestamp, or a
            header value that cannot be encoded.
    """
    headers = {
        "Authorization": sign(credentials, input),
        "Content-Type": CONTENT_TYPE,
        "Host": input.host,
        HEADER_ACTION: input.action,
        HEADER_VERSION: input.version,
        HEADER_TIMESTAMP: str(input.timestamp),
    }
    if input.region:
        headers[HEADER_REGION] = input.region
    if credentials.token is not None:
        headers[HEADER_TOKEN] = credentials.token.get_secret_value()

    for name, value in headers.items():
        problem = header_value_problem(value)
        if problem is not None:
            raise SigningError(f"header {name} {problem}")

    return headers
