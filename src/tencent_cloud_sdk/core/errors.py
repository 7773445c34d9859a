"""Centralized error classification for Tencent Cloud SDK.

Maps raw failures (transport faults, HTTP statuses, decoded service errors)
into the closed error taxonomy. Retryability is a fixed property of the
resulting error class and is never re-derived elsewhere.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from ..errors import (
    ApiError,
    ApiErrorCategory,
    AuthError,
    ConflictError,
    ErrorKind,
    NotFoundError,
    RateLimitedError,
    TencentCloudError,
    TransportError,
)

AUTH_CODE_PREFIXES = (
    "AuthFailure",
    "InvalidCredential",
    "UnauthorizedOperation",
    "OperationDenied",
    "Forbidden",
)
RATE_LIMIT_CODE_PREFIXES = ("LimitExceeded", "RequestLimitExceeded", "Throttling")
NOT_FOUND_CODE_PREFIXES = ("ResourceNotFound",)
CONFLICT_CODE_PREFIXES = ("ResourceInUse", "ResourceUnavailable")
INTERNAL_CODE_PREFIXES = ("InternalError", "ServiceUnavailable")
VALIDATION_CODE_PREFIXES = (
    "InvalidParameter",
    "MissingParameter",
    "UnknownParameter",
    "UnsupportedOperation",
    "InvalidAction",
)

REQUEST_ID_HEADERS = (
    "x-tc-requestid",
    "x-request-id",
    "x-requestid",
    "x-tc-traceid",
)

# httpx faults worth another attempt: the request may not have reached the
# server, or the connection dropped before a response arrived.
TRANSIENT_TRANSPORT_ERRORS: tuple[type[httpx.HTTPError], ...] = (
    httpx.TimeoutException,
    httpx.ConnectError,
    httpx.ReadError,
    httpx.WriteError,
    httpx.RemoteProtocolError,
)

_ERROR_CLASSES: dict[ErrorKind, type[TencentCloudError]] = {
    ErrorKind.AUTH: AuthError,
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.CONFLICT: ConflictError,
}


def classify_code(code: str) -> ErrorKind:
    """Classify a provider error code by prefix."""
    if code.startswith(AUTH_CODE_PREFIXES):
        return ErrorKind.AUTH
    if code.startswith(RATE_LIMIT_CODE_PREFIXES):
        return ErrorKind.RATE_LIMITED
    if code.startswith(NOT_FOUND_CODE_PREFIXES):
        return ErrorKind.NOT_FOUND
    if code.startswith(CONFLICT_CODE_PREFIXES):
        return ErrorKind.CONFLICT
    return ErrorKind.API


def classify(status: int | None, code: str | None) -> ErrorKind:
    """Classify a provider-reported failure: status first, then code prefix."""
    if status == 429:
        return ErrorKind.RATE_LIMITED
    if status in (401, 403):
        return ErrorKind.AUTH
    if status == 404:
        return ErrorKind.NOT_FOUND
    if status in (409, 412):
        return ErrorKind.CONFLICT
    if code is None:
        return ErrorKind.API
    return classify_code(code)


def api_category(status: int | None, code: str | None) -> ApiErrorCategory:
    """Sub-classify a generic API failure."""
    if code is not None:
        if code.startswith(INTERNAL_CODE_PREFIXES):
            return ApiErrorCategory.INTERNAL
        if code.startswith(VALIDATION_CODE_PREFIXES):
            return ApiErrorCategory.VALIDATION
    if status is not None:
        if status >= 500:
            return ApiErrorCategory.INTERNAL
        if status == 400:
            return ApiErrorCategory.VALIDATION
    return ApiErrorCategory.UNKNOWN


def service_error_from_value(value: Any) -> tuple[str, str, str | None] | None:
    """Extract ``(code, message, request_id)`` from an error envelope.

    Recognises ``{"Response": {"Error": {"Code", "Message"}, "RequestId"}}``.
    """
    if not isinstance(value, dict):
        return None
    response = value.get("Response")
    if not isinstance(response, dict):
        return None
    error = response.get("Error")
    if not isinstance(error, dict):
        return None
    code = error.get("Code")
    message = error.get("Message")
    if not isinstance(code, str) or not isinstance(message, str):
        return None
    return code, message, request_id_from_value(value)


def request_id_from_value(value: Any) -> str | None:
    """``Response.RequestId`` of a decoded body, if present."""
    if not isinstance(value, dict):
        return None
    response = value.get("Response")
    if not isinstance(response, dict):
        return None
    request_id = response.get("RequestId")
    return request_id if isinstance(request_id, str) else None


def request_id_from_headers(headers: Mapping[str, str]) -> str | None:
    """First non-blank provider request id header."""
    lowered = {key.lower(): value for key, value in headers.items()}
    for name in REQUEST_ID_HEADERS:
        value = lowered.get(name, "").strip()
        if value:
            return value
    return None


def _host_and_path(url: str) -> tuple[str | None, str | None]:
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError):
        return None, None
    path = parsed.raw_path.decode("ascii", errors="replace").split("?", 1)[0]
    return parsed.netloc.decode("ascii", errors="replace"), path


class ErrorFactory:
    """Centralized error creation with consistent structure."""

    @staticmethod
    def is_transient(exc: BaseException) -> bool:
        """Whether a transport exception looks worth retrying."""
        return isinstance(exc, TRANSIENT_TRANSPORT_ERRORS)

    @staticmethod
    def from_transport_exception(
        exc: BaseException,
        *,
        method: str,
        url: str,
    ) -> TransportError:
        """Create a TransportError from an httpx exception.

        Args:
            exc: Original exception.
            method: HTTP method of the failed request.
            url: Target URL of the failed request.

        Returns:
            TransportError flagged transient when worth retrying.
        """
        host, path = _host_and_path(url)
        message = str(exc) or exc.__class__.__name__
        return TransportError(
            message,
            method=method,
            host=host,
            path=path,
            transient=ErrorFactory.is_transient(exc),
            cause=exc,
        )

    @staticmethod
    def api_error(
        *,
        status: int | None,
        code: str | None,
        message: str | None,
        method: str | None = None,
        host: str | None = None,
        path: str | None = None,
        request_id: str | None = None,
        body_snippet: str | None = None,
        retry_after: float | None = None,
    ) -> TencentCloudError:
        """Create the classified error for a provider-reported failure.

        Returns:
            AuthError, NotFoundError, ConflictError, RateLimitedError or ApiError.
        """
        context: dict[str, Any] = {
            "method": method,
            "host": host,
            "path": path,
            "status_code": status,
            "code": code,
            "request_id": request_id,
            "body_snippet": body_snippet,
        }
        kind = classify(status, code)

        if kind is ErrorKind.RATE_LIMITED:
            return RateLimitedError(message, retry_after=retry_after, **context)
        if kind is ErrorKind.API:
            return ApiError(message, category=api_category(status, code), **context)
        return _ERROR_CLASSES[kind](message, **context)
