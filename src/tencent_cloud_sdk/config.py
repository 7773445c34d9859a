"""Configuration for Tencent Cloud SDK.

Uses Pydantic v2 for validation with sensible defaults. All models are
frozen: a client's configuration is fixed at construction time and shared
read-only by every call.
"""

from __future__ import annotations

import random
from enum import StrEnum
from typing import Annotated, Any, Self
from urllib.parse import urlsplit

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)

from . import __version__
from .errors import InvalidConfigError

DEFAULT_BASE_URL = "https://tencentcloudapi.com"
DEFAULT_USER_AGENT = f"tencent-cloud-sdk/{__version__} Python"
DEFAULT_BODY_SNIPPET_MAX_BYTES = 4096


class EndpointMode(StrEnum):
    """How a service name is turned into a request host."""

    # `{service}.{base_host}`
    SERVICE_SUBDOMAIN = "service_subdomain"
    # always `base_host` (mock servers, private gateways)
    FIXED_HOST = "fixed_host"


class RetryConfig(BaseModel):
    """Retry configuration with jittered exponential backoff.

    Retries are opt-in: ``max_retries`` defaults to 0. A server-supplied
    ``Retry-After`` is honoured up to ``max_retry_after`` seconds.
    """

    model_config = ConfigDict(frozen=True)

    max_retries: Annotated[int, Field(ge=0, le=20)] = 0
    base_delay: Annotated[float, Field(ge=0, le=60)] = 0.05
    max_retry_after: Annotated[float, Field(gt=0, le=3600)] = 120.0

    def get_delay(self, attempt: int) -> float:
        """Calculate the sleep before ``attempt`` (0-indexed).

        ``delay(0) == 0``; afterwards ``base * 2**(n-1) * U(0.5, 1.5)``.
        """
        if attempt <= 0:
            return 0.0
        jitter = 0.5 + random.random()  # noqa: S311
        return self.base_delay * (2 ** (attempt - 1)) * jitter


class TransportConfig(BaseModel):
    """Settings applied when the HTTP transport is constructed."""

    model_config = ConfigDict(frozen=True)

    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)
    accept_invalid_certs: bool = False
    no_proxy: bool = False
    connect_timeout: Annotated[float, Field(gt=0, le=300)] = 10.0
    read_timeout: Annotated[float, Field(gt=0, le=3600)] | None = None


class TelemetryConfig(BaseModel):
    """Logging/tracing/metrics configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "tencent-cloud-sdk"
    record_metrics: bool = True
    log_level: str = "INFO"


class RequestOptions(BaseModel):
    """Per-call overrides."""

    model_config = ConfigDict(frozen=True)

    timeout: Annotated[float, Field(gt=0, le=3600)] | None = None
    capture_body_snippet: bool | None = None
    idempotency_key: SecretStr | None = None

    @field_validator("idempotency_key")
    @classmethod
    def validate_idempotency_key(cls, v: SecretStr | None) -> SecretStr | None:
        """Reject keys that cannot travel in an HTTP header."""
        if v is None:
            return v
        raw = v.get_secret_value()
        if not raw or any(ch in raw for ch in "\r\n") or not raw.isascii():
            msg = "idempotency_key must be a non-empty single-line ASCII string"
            raise ValueError(msg)
        return v


class ClientConfig(BaseModel):
    """Main configuration for Tencent Cloud SDK clients."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    base_url: str = DEFAULT_BASE_URL
    endpoint_mode: EndpointMode = EndpointMode.SERVICE_SUBDOMAIN
    default_region: str | None = None

    # Request defaults
    timeout: Annotated[float, Field(gt=0, le=3600)] = 30.0
    capture_body_snippet: bool = True
    body_snippet_max_bytes: Annotated[int, Field(ge=0)] = DEFAULT_BODY_SNIPPET_MAX_BYTES

    # Sub-configurations
    retry: RetryConfig = Field(default_factory=RetryConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @field_validator("default_region")
    @classmethod
    def validate_region(cls, v: str | None) -> str | None:
        """Treat blank regions as unset."""
        if v is None:
            return None
        v = v.strip()
        return v or None

    @model_validator(mode="after")
    def validate_base_url(self) -> Self:
        """Validate the base URL shape.

        Raises InvalidConfigError directly (pydantic only wraps ValueError).
        """
        try:
            parse_base_url(self.base_url)
        except ValueError as e:
            raise InvalidConfigError(
                str(e), base_url=self.base_url, field="base_url", cause=e
            ) from e
        return self

    @property
    def scheme(self) -> str:
        """URL scheme requests are sent with."""
        return parse_base_url(self.base_url)[0]

    def authority_for_service(self, service: str) -> str:
        """Resolve ``host[:port]`` for a service."""
        _, host, port = parse_base_url(self.base_url)
        if self.endpoint_mode is EndpointMode.SERVICE_SUBDOMAIN:
            host = f"{service}.{host}"
        return f"{host}:{port}" if port is not None else host

    def with_overrides(self, **kwargs: Any) -> Self:
        """Create new config with overridden values."""
        data = self.model_dump()
        data.update(kwargs)
        return self.__class__(**data)

    @classmethod
    def from_env(cls, prefix: str = "TENCENTCLOUD_") -> Self:
        """Create config from environment variables.

        Raises:
            InvalidConfigError: If a variable is malformed or out of range.
        """
        import os

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        try:
            return cls(
                base_url=get_env("BASE_URL", DEFAULT_BASE_URL),
                endpoint_mode=get_env("ENDPOINT_MODE", EndpointMode.SERVICE_SUBDOMAIN),
                default_region=get_env("REGION"),
                timeout=float(get_env("TIMEOUT", "30.0")),
                retry=RetryConfig(max_retries=int(get_env("MAX_RETRIES", "0"))),
            )
        except ValueError as e:
            # covers float/int parsing and pydantic ValidationError
            raise InvalidConfigError(
                f"invalid {prefix}* environment configuration: {e}", field="environment", cause=e
            ) from e


def parse_base_url(base_url: str) -> tuple[str, str, int | None]:
    """Split a base URL into ``(scheme, host, port)``.

    Raises:
        ValueError: If the URL is not a bare http(s) origin.
    """
    try:
        parts = urlsplit(base_url)
        port = parts.port
    except ValueError as e:
        msg = f"invalid base url {base_url!r}: {e}"
        raise ValueError(msg) from e

    if parts.scheme not in ("http", "https"):
        msg = "base url scheme must be http or https"
        raise ValueError(msg)
    if parts.username or parts.password:
        msg = "base url must not include credentials"
        raise ValueError(msg)
    if parts.fragment:
        msg = "base url must not include a fragment"
        raise ValueError(msg)
    if not parts.hostname:
        msg = "base url must include a host"
        raise ValueError(msg)
    if parts.path not in ("", "/") or parts.query:
        msg = "base url must not include a path or query"
        raise ValueError(msg)

    host = parts.hostname
    if ":" in host:
        host = f"[{host}]"

    return parts.scheme, host, port
