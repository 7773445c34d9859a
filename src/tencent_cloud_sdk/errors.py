"""Error classes for Tencent Cloud SDK.

Implements a closed error taxonomy. Every error carries whatever request
context is available (method, host, path, HTTP status, provider code and
message, request id and a redacted body snippet) and an explicit, fixed
retryability property.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    """Top-level error categories."""

    INVALID_CONFIG = "invalid_config"
    TRANSPORT = "transport"
    DECODE = "decode"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    RATE_LIMITED = "rate_limited"
    API = "api"


class ApiErrorCategory(StrEnum):
    """Sub-categories of a generic provider-reported failure."""

    VALIDATION = "validation"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


class TencentCloudError(Exception):
    """Base error for Tencent Cloud SDK with structured request context."""

    kind: ErrorKind = ErrorKind.API
    retryable: bool = False
    label: str = "api error"

    def __init__(
        self,
        message: str | None = None,
        *,
        method: str | None = None,
        host: str | None = None,
        path: str | None = None,
        status_code: int | None = None,
        code: str | None = None,
        request_id: str | None = None,
        body_snippet: str | None = None,
    ) -> None:
        self.message = message
        self.method = method
        self.host = host
        self.path = path
        self.status_code = status_code
        self.code = code
        self.request_id = request_id
        self.body_snippet = body_snippet
        super().__init__(message)

    def __str__(self) -> str:
        return self._render()

    def _render(self) -> str:
        status = self.status_code if self.status_code is not None else "<unknown>"
        text = f"{self.label} (HTTP {status})"
        if self.code and self.message:
            text += f" {self.code}: {self.message}"
        elif self.message:
            text += f": {self.message}"
        if self.request_id:
            text += f" (request {self.request_id})"
        return text

    def _target(self) -> str:
        return f"{self.method or '?'} {self.host or ''}{self.path or ''}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "method": self.method,
            "host": self.host,
            "path": self.path,
            "status_code": self.status_code,
            "code": self.code,
            "request_id": self.request_id,
            "body_snippet": self.body_snippet,
            "retryable": self.retryable,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(kind={self.kind.value!r}, "
            f"status_code={self.status_code!r}, code={self.code!r}, "
            f"request_id={self.request_id!r})"
        )


class InvalidConfigError(TencentCloudError):
    """Local configuration or request-construction failure. Never retried."""

    kind = ErrorKind.INVALID_CONFIG
    label = "invalid config"

    def __init__(
        self,
        message: str,
        *,
        base_url: str | None = None,
        field: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.base_url = base_url
        self.field = field
        super().__init__(message)
        self.__cause__ = cause

    def _render(self) -> str:
        if self.base_url:
            return f"invalid config (base url `{self.base_url}`): {self.message}"
        return f"invalid config: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["base_url"] = self.base_url
        data["field"] = self.field
        return data


class SigningError(InvalidConfigError):
    """Request could not be signed (missing secrets, bad timestamp, bad header)."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(f"signing error: {message}", cause=cause)


class TransportError(TencentCloudError):
    """No HTTP response was obtained."""

    kind = ErrorKind.TRANSPORT
    label = "transport error"

    def __init__(
        self,
        message: str = "transport failure",
        *,
        method: str | None = None,
        host: str | None = None,
        path: str | None = None,
        transient: bool = False,
        cause: BaseException | None = None,
    ) -> None:
        self.transient = transient
        super().__init__(message, method=method, host=host, path=path)
        self.__cause__ = cause

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.transient

    def _render(self) -> str:
        return f"transport error ({self._target()}): {self.message}"


class DecodeError(TencentCloudError):
    """HTTP completed but the body could not be decoded."""

    kind = ErrorKind.DECODE
    label = "decode error"

    def __init__(
        self,
        message: str = "failed to decode response body",
        *,
        cause: BaseException | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message, **context)
        self.__cause__ = cause

    def _render(self) -> str:
        text = f"decode error ({self._target()}): {self.message}"
        if self.request_id:
            text += f" (request {self.request_id})"
        return text


class ApiError(TencentCloudError):
    """Provider-reported failure not covered by a more specific kind."""

    kind = ErrorKind.API
    label = "api error"

    def __init__(
        self,
        message: str | None = None,
        *,
        category: ApiErrorCategory = ApiErrorCategory.UNKNOWN,
        **context: Any,
    ) -> None:
        self.category = category
        super().__init__(message, **context)

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.category is not ApiErrorCategory.VALIDATION

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["category"] = self.category.value
        return data


class AuthError(TencentCloudError):
    """Credentials rejected or operation not authorized."""

    kind = ErrorKind.AUTH
    label = "auth error"


class NotFoundError(TencentCloudError):
    """Target resource does not exist."""

    kind = ErrorKind.NOT_FOUND
    label = "not found"


class ConflictError(TencentCloudError):
    """Resource is in use, unavailable, or a precondition failed."""

    kind = ErrorKind.CONFLICT
    label = "conflict"


class RateLimitedError(TencentCloudError):
    """Request was throttled."""

    kind = ErrorKind.RATE_LIMITED
    retryable = True
    label = "rate limited"

    def __init__(
        self,
        message: str | None = None,
        *,
        retry_after: float | None = None,
        **context: Any,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(message, **context)

    def _render(self) -> str:
        text = super()._render()
        if self.retry_after is not None:
            text += f" (retry after {self.retry_after:g}s)"
        return text

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["retry_after"] = self.retry_after
        return data
