"""
Shared test fixtures for Tencent Cloud SDK tests.

Provides credentials, client configuration, a quiet telemetry setup
and a recorder for retry sleeps.
"""

from __future__ import annotations

import pytest

from support import FIXED_TIMESTAMP, SECRET_ID, SECRET_KEY
from tencent_cloud_sdk import telemetry
from tencent_cloud_sdk.config import ClientConfig, RetryConfig, TelemetryConfig
from tencent_cloud_sdk.core import http_executor
from tencent_cloud_sdk.credentials import Credentials


@pytest.fixture(autouse=True)
def quiet_telemetry() -> None:
    """Run every test with no-op tracing and metrics."""
    telemetry.configure_telemetry(TelemetryConfig(enabled=False))


@pytest.fixture
def credentials() -> Credentials:
    """Provide the documented example key pair."""
    return Credentials.create(SECRET_ID, SECRET_KEY)


@pytest.fixture
def client_config() -> ClientConfig:
    """Provide a configuration with a retry budget and instant backoff."""
    return ClientConfig(
        default_region="ap-guangzhou",
        retry=RetryConfig(max_retries=3, base_delay=0.0),
    )


@pytest.fixture
def fixed_clock():
    """Provide a clock pinned to the documented signing example."""
    return lambda: float(FIXED_TIMESTAMP)


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record blocking retry sleeps instead of sleeping."""
    recorded: list[float] = []
    monkeypatch.setattr(http_executor.time, "sleep", recorded.append)
    return recorded
