"""Core components for Tencent Cloud SDK.

Centralized request preparation, classification and retry logic shared
between sync and async clients.
"""

from __future__ import annotations

from .errors import ErrorFactory
from .http_executor import (
    AsyncRequestExecutor,
    SyncRequestExecutor,
    calculate_retry_delay,
    parse_retry_after,
)
from .request_builder import canonical_query_string

__all__ = [
    "ErrorFactory",
    "SyncRequestExecutor",
    "AsyncRequestExecutor",
    "calculate_retry_delay",
    "parse_retry_after",
    "canonical_query_string",
]
