"""OpenTelemetry integration for Tencent Cloud SDK.

Provides tracing, metrics, and structured logging for observability.
Telemetry is best effort: nothing here may influence request control flow.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import metrics, trace
from opentelemetry.trace import Status, StatusCode

from . import __version__

if TYPE_CHECKING:
    from collections.abc import Generator

    from .config import TelemetryConfig
    from .errors import TencentCloudError

INSTRUMENTATION_NAME = "tencent-cloud-sdk"

# Module-level tracer, meter and logger
_tracer: trace.Tracer | None = None
_logger: structlog.BoundLogger | None = None
_metrics: RequestMetrics | None = None


def get_tracer() -> trace.Tracer:
    """Get or create the SDK tracer."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(INSTRUMENTATION_NAME, __version__)
    return _tracer


def get_logger() -> structlog.BoundLogger:
    """Get or create the SDK logger."""
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(INSTRUMENTATION_NAME)
    return _logger


def get_metrics() -> RequestMetrics:
    """Get or create the SDK request metrics."""
    global _metrics
    if _metrics is None:
        _metrics = RequestMetrics(metrics.get_meter(INSTRUMENTATION_NAME, __version__))
    return _metrics


def configure_telemetry(config: TelemetryConfig) -> None:
    """Configure telemetry based on config.

    Args:
        config: Telemetry configuration.
    """
    global _tracer, _logger, _metrics

    if not config.enabled:
        _tracer = trace.NoOpTracer()
        _metrics = RequestMetrics(metrics.NoOpMeter(INSTRUMENTATION_NAME))
        return

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _log_level_to_int(config.log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _tracer = trace.get_tracer(config.service_name, __version__)
    _logger = structlog.get_logger(config.service_name)
    meter = (
        metrics.get_meter(config.service_name, __version__)
        if config.record_metrics
        else metrics.NoOpMeter(config.service_name)
    )
    _metrics = RequestMetrics(meter)


def _log_level_to_int(level: str) -> int:
    """Convert log level string to integer."""
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


@contextmanager
def trace_operation(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Context manager for tracing an operation.

    Args:
        name: Name of the operation.
        attributes: Optional span attributes. ``None`` values are skipped.

    Yields:
        The active span.
    """
    tracer = get_tracer()
    with tracer.start_as_current_span(name, record_exception=False) as span:
        if attributes:
            for key, value in attributes.items():
                if value is not None:
                    span.set_attribute(key, value)
        try:
            yield span
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise


class RequestMetrics:
    """Request counters and latency histogram.

    Every recording call swallows instrument failures.
    """

    def __init__(self, meter: metrics.Meter) -> None:
        self._requests = meter.create_counter(
            "tencent_sdk_requests_total",
            description="Logical SDK calls by outcome",
        )
        self._duration = meter.create_histogram(
            "tencent_sdk_request_duration_seconds",
            unit="s",
            description="End-to-end duration of logical SDK calls, retries included",
        )
        self._retries = meter.create_counter(
            "tencent_sdk_retries_total",
            description="Retry attempts performed by the SDK",
        )

    def record_success(
        self,
        service: str,
        action: str,
        status: int,
        retries: int,
        elapsed: float,
    ) -> None:
        """Record a successful call."""
        self._record(
            service,
            action,
            {"outcome": "ok", "status": str(status)},
            retries,
            elapsed,
        )

    def record_error(
        self,
        service: str,
        action: str,
        error: TencentCloudError,
        retries: int,
        elapsed: float,
    ) -> None:
        """Record a failed call."""
        status = str(error.status_code) if error.status_code is not None else "none"
        self._record(
            service,
            action,
            {"outcome": "error", "status": status, "error_kind": error.kind.value},
            retries,
            elapsed,
        )

    def _record(
        self,
        service: str,
        action: str,
        labels: dict[str, str],
        retries: int,
        elapsed: float,
    ) -> None:
        base = {"service": service, "action": action}
        try:
            self._requests.add(1, {**base, **labels})
            self._duration.record(elapsed, {**base, "outcome": labels["outcome"]})
            if retries > 0:
                self._retries.add(retries, base)
        except Exception:  # noqa: BLE001
            get_logger().debug("failed to record request metrics", service=service, action=action)
