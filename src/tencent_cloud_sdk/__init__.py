"""Tencent Cloud Python SDK."""

__version__ = "0.1.0"

from .async_client import AsyncTencentCloudClient  # noqa: E402
from .client import TencentCloudClient  # noqa: E402
from .config import (  # noqa: E402
    ClientConfig,
    EndpointMode,
    RequestOptions,
    RetryConfig,
    TelemetryConfig,
    TransportConfig,
)
from .credentials import Credentials  # noqa: E402
from .endpoint import Endpoint  # noqa: E402
from .errors import (  # noqa: E402
    ApiError,
    ApiErrorCategory,
    AuthError,
    ConflictError,
    DecodeError,
    ErrorKind,
    InvalidConfigError,
    NotFoundError,
    RateLimitedError,
    SigningError,
    TencentCloudError,
    TransportError,
)
from .http import AsyncHttpxTransport, AsyncTransport, HttpxTransport, SyncTransport  # noqa: E402
from .models import Envelope, Filter, Tag  # noqa: E402
from .telemetry import configure_telemetry  # noqa: E402
from .types import TransportResponse  # noqa: E402

__all__ = [
    "ApiError",
    "ApiErrorCategory",
    "AsyncHttpxTransport",
    "AsyncTencentCloudClient",
    "AsyncTransport",
    "AuthError",
    "ClientConfig",
    "ConflictError",
    "Credentials",
    "DecodeError",
    "Endpoint",
    "EndpointMode",
    "Envelope",
    "ErrorKind",
    "Filter",
    "HttpxTransport",
    "InvalidConfigError",
    "NotFoundError",
    "RateLimitedError",
    "RequestOptions",
    "RetryConfig",
    "SigningError",
    "Tag",
    "TelemetryConfig",
    "TencentCloudClient",
    "TencentCloudError",
    "TransportConfig",
    "TransportError",
    "TransportResponse",
    "configure_telemetry",
    "__version__",
]
