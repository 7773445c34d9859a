"""Centralized request executors for Tencent Cloud SDK.

Provides the per-call state machine shared by sync and async clients:
prepare the request once, then sign, send and classify each attempt,
retrying only when the call is eligible, the failure is retryable and
budget remains.
"""

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING, Any, TypeVar

from ..config import RequestOptions
from ..errors import (
    DecodeError,
    InvalidConfigError,
    RateLimitedError,
    TencentCloudError,
    TransportError,
)
from ..redact import body_snippet
from ..signing import (
    HEADER_ACTION,
    HEADER_REGION,
    HEADER_TIMESTAMP,
    HEADER_TOKEN,
    HEADER_VERSION,
    SigningInput,
    build_signed_headers,
    header_value_problem,
)
from ..telemetry import get_logger, get_metrics, trace_operation
from .errors import (
    ErrorFactory,
    request_id_from_headers,
    request_id_from_value,
    service_error_from_value,
)
from .request_builder import build_path, build_url, canonical_query_string, serialize_payload

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..config import ClientConfig, RetryConfig
    from ..credentials import Credentials
    from ..endpoint import Endpoint
    from ..http import AsyncTransport, SyncTransport
    from ..types import TransportResponse

T = TypeVar("T")

IDEMPOTENCY_KEY_HEADER = "Idempotency-Key"

# Largest delay-seconds value accepted (u64); anything above falls back to backoff.
MAX_RETRY_AFTER_SECONDS = 2**64 - 1

# Headers set by the SDK that endpoint extra headers may not replace.
_RESERVED_HEADERS = frozenset(
    name.lower()
    for name in (
        "Authorization",
        "Content-Type",
        "Host",
        HEADER_ACTION,
        HEADER_VERSION,
        HEADER_TIMESTAMP,
        HEADER_REGION,
        HEADER_TOKEN,
        IDEMPOTENCY_KEY_HEADER,
    )
)


def calculate_retry_delay(retry_config: RetryConfig, attempt: int) -> float:
    """Calculate retry delay with jittered exponential backoff.

    Args:
        retry_config: Retry configuration.
        attempt: Attempt about to be made (0-indexed).

    Returns:
        Delay in seconds.
    """
    return retry_config.get_delay(attempt)


def parse_retry_after(value: str | None, *, now: datetime | None = None) -> float | None:
    """Parse a ``Retry-After`` header value.

    Accepts delay-seconds or an HTTP-date. Dates in the past yield ``0``;
    delay-seconds beyond an unsigned 64-bit integer count as unparseable.

    Returns:
        Seconds to wait, or ``None`` when absent or unparseable.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if value.isascii() and value.isdigit():
        seconds = int(value)
        if seconds > MAX_RETRY_AFTER_SECONDS:
            return None
        return float(seconds)
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError, OverflowError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=UTC)
    now = now or datetime.now(UTC)
    return max((when - now).total_seconds(), 0.0)


def checked_extra_headers(endpoint: Endpoint[Any]) -> dict[str, str]:
    """Endpoint-specific headers, validated before they join a signed request.

    Raises:
        InvalidConfigError: If the endpoint fails to produce them, a header
            would replace one the SDK sets, or a name or value cannot travel
            in an HTTP header.
    """
    try:
        headers = dict(endpoint.extra_headers())
    except Exception as e:  # noqa: BLE001
        raise InvalidConfigError(
            f"failed to build {endpoint.action} extra headers: {e}",
            field="extra_headers",
            cause=e,
        ) from e

    for name, value in headers.items():
        if not isinstance(name, str) or not isinstance(value, str):
            msg = f"extra header {name!r} must have a string name and value"
            raise InvalidConfigError(msg, field="extra_headers")
        if name.lower() in _RESERVED_HEADERS:
            msg = f"extra header {name} would replace a header set by the SDK"
            raise InvalidConfigError(msg, field="extra_headers")
        problem = header_value_problem(name) or header_value_problem(value)
        if problem is not None:
            raise InvalidConfigError(f"extra header {name!r} {problem}", field="extra_headers")
    return headers


@dataclass(frozen=True, slots=True)
class PreparedRequest:
    """Attempt-independent request parts, resolved once per call."""

    service: str
    action: str
    version: str
    method: str
    region: str | None
    host: str
    path: str
    canonical_query: str
    url: str
    body: bytes | None
    extra_headers: dict[str, str]
    timeout: float
    capture_body_snippet: bool
    idempotency_key: str | None
    retry_eligible: bool

    def span_attributes(self) -> dict[str, Any]:
        return {
            "tencent.service": self.service,
            "tencent.action": self.action,
            "tencent.version": self.version,
            "tencent.region": self.region,
            "http.method": self.method,
            "server.address": self.host,
            "url.path": self.path,
        }


@dataclass(slots=True)
class AttemptOutcome:
    """What a single attempt produced: a result or a classified error."""

    result: Any = None
    error: TencentCloudError | None = None
    status: int | None = None
    request_id: str | None = None
    retry_after: float | None = None


class _RequestExecutorBase:
    """Attempt-independent logic shared by both executors."""

    def __init__(
        self,
        credentials: Credentials,
        config: ClientConfig,
        *,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._credentials = credentials
        self._config = config
        self._clock = clock or time.time
        self._logger = get_logger()

    @property
    def config(self) -> ClientConfig:
        """Client configuration this executor was built with."""
        return self._config

    def prepare(self, endpoint: Endpoint[Any], options: RequestOptions | None) -> PreparedRequest:
        """Resolve region, host, path, query, body, extra headers and per-call options.

        Raises:
            InvalidConfigError: If the endpoint cannot produce its query,
                payload or extra headers, or the payload cannot be serialized.
        """
        options = options or RequestOptions()
        config = self._config
        method = endpoint.method.upper()
        host = config.authority_for_service(endpoint.service)
        path = build_path(endpoint.path_segments)
        try:
            query = endpoint.query()
            payload = endpoint.payload()
        except Exception as e:  # noqa: BLE001
            raise InvalidConfigError(
                f"failed to build {endpoint.action} request: {e}", field="payload", cause=e
            ) from e
        canonical_query = canonical_query_string(query)
        idempotency_key = (
            options.idempotency_key.get_secret_value()
            if options.idempotency_key is not None
            else None
        )
        return PreparedRequest(
            service=endpoint.service,
            action=endpoint.action,
            version=endpoint.version,
            method=method,
            region=endpoint.region or config.default_region,
            host=host,
            path=path,
            canonical_query=canonical_query,
            url=build_url(config.scheme, host, path, canonical_query),
            body=serialize_payload(method, payload),
            extra_headers=checked_extra_headers(endpoint),
            timeout=options.timeout if options.timeout is not None else config.timeout,
            capture_body_snippet=(
                options.capture_body_snippet
                if options.capture_body_snippet is not None
                else config.capture_body_snippet
            ),
            idempotency_key=idempotency_key,
            retry_eligible=endpoint.is_idempotent or idempotency_key is not None,
        )

    def build_headers(self, prepared: PreparedRequest) -> dict[str, str]:
        """Sign one attempt with a fresh timestamp.

        Raises:
            SigningError: If the request cannot be signed.
        """
        signing_input = SigningInput(
            method=prepared.method,
            service=prepared.service,
            host=prepared.host,
            path=prepared.path,
            canonical_query=prepared.canonical_query,
            region=prepared.region,
            action=prepared.action,
            version=prepared.version,
            payload=prepared.body or b"",
            timestamp=int(self._clock()),
        )
        headers = build_signed_headers(self._credentials, signing_input)
        headers.update(prepared.extra_headers)
        if prepared.idempotency_key is not None:
            headers[IDEMPOTENCY_KEY_HEADER] = prepared.idempotency_key
        return headers

    def transport_failure(self, error: TransportError, prepared: PreparedRequest) -> AttemptOutcome:
        """Fill in request context a transport may not know about."""
        error.method = error.method or prepared.method
        error.host = error.host or prepared.host
        error.path = error.path or prepared.path
        return AttemptOutcome(error=error)

    def interpret(
        self,
        endpoint: Endpoint[T],
        prepared: PreparedRequest,
        response: TransportResponse,
    ) -> AttemptOutcome:
        """Classify an HTTP response into a typed result or an error."""
        status = response.status
        context: dict[str, Any] = {
            "method": prepared.method,
            "host": prepared.host,
            "path": prepared.path,
        }
        header_request_id = request_id_from_headers(response.headers)
        retry_after = parse_retry_after(response.header("Retry-After"))

        try:
            value = json.loads(response.body)
        except ValueError as e:
            value = None
            decode_failure: ValueError | None = e
        else:
            decode_failure = None

        service_error = service_error_from_value(value)
        if not response.is_success or service_error is not None:
            code = message = body_request_id = None
            if service_error is not None:
                code, message, body_request_id = service_error
            error = ErrorFactory.api_error(
                status=status,
                code=code,
                message=message,
                request_id=body_request_id or header_request_id,
                body_snippet=self._snippet(prepared, response.body),
                retry_after=retry_after,
                **context,
            )
            return AttemptOutcome(
                error=error,
                status=status,
                request_id=error.request_id,
                retry_after=retry_after,
            )

        request_id = request_id_from_value(value) or header_request_id
        if decode_failure is not None:
            return AttemptOutcome(
                error=DecodeError(
                    "response body is not valid JSON",
                    cause=decode_failure,
                    status_code=status,
                    request_id=request_id,
                    body_snippet=self._snippet(prepared, response.body),
                    **context,
                ),
                status=status,
                request_id=request_id,
            )

        try:
            result = endpoint.parse(value)
        except (ValueError, TypeError, KeyError) as e:
            return AttemptOutcome(
                error=DecodeError(
                    f"response does not match {prepared.action} schema: {e}",
                    cause=e,
                    status_code=status,
                    request_id=request_id,
                    body_snippet=self._snippet(prepared, response.body),
                    **context,
                ),
                status=status,
                request_id=request_id,
            )

        return AttemptOutcome(result=result, status=status, request_id=request_id)

    def should_retry(self, prepared: PreparedRequest, error: TencentCloudError, attempt: int) -> bool:
        """Retry only eligible calls, on retryable errors, within budget."""
        return (
            attempt < self._config.retry.max_retries
            and prepared.retry_eligible
            and error.retryable
        )

    def retry_delay(self, outcome: AttemptOutcome, next_attempt: int) -> float:
        """Server-supplied ``Retry-After`` wins over computed backoff.

        The hint is capped at ``RetryConfig.max_retry_after``.
        """
        hint = outcome.retry_after
        if hint is None and isinstance(outcome.error, RateLimitedError):
            hint = outcome.error.retry_after
        if hint is not None:
            return min(hint, self._config.retry.max_retry_after)
        return calculate_retry_delay(self._config.retry, next_attempt)

    def _snippet(self, prepared: PreparedRequest, body: str) -> str | None:
        if not prepared.capture_body_snippet:
            return None
        return body_snippet(body, self._config.body_snippet_max_bytes)

    def _log_attempt(self, prepared: PreparedRequest, attempt: int) -> None:
        self._logger.debug(
            "Sending request",
            service=prepared.service,
            action=prepared.action,
            method=prepared.method,
            host=prepared.host,
            attempt=attempt,
        )

    def _log_retry(
        self,
        prepared: PreparedRequest,
        error: TencentCloudError,
        attempt: int,
        delay: float,
    ) -> None:
        """Log retry attempt."""
        self._logger.warning(
            "Retrying request",
            service=prepared.service,
            action=prepared.action,
            attempt=attempt,
            delay=delay,
            error_kind=error.kind.value,
            status=error.status_code,
            request_id=error.request_id,
        )

    def _finish_success(
        self,
        prepared: PreparedRequest,
        outcome: AttemptOutcome,
        attempt: int,
        started: float,
    ) -> None:
        elapsed = time.monotonic() - started
        self._logger.info(
            "Request succeeded",
            service=prepared.service,
            action=prepared.action,
            status=outcome.status,
            request_id=outcome.request_id,
            retries=attempt,
            elapsed=elapsed,
        )
        get_metrics().record_success(
            prepared.service, prepared.action, outcome.status or 0, attempt, elapsed
        )

    def _finish_failure(
        self,
        service: str,
        action: str,
        error: TencentCloudError,
        attempt: int,
        started: float,
    ) -> None:
        elapsed = time.monotonic() - started
        self._logger.error(
            "Request failed",
            service=service,
            action=action,
            retries=attempt,
            elapsed=elapsed,
            **error.to_dict(),
        )
        get_metrics().record_error(service, action, error, attempt, elapsed)


class SyncRequestExecutor(_RequestExecutorBase):
    """Synchronous request executor with signing, classification and retry."""

    def __init__(
        self,
        credentials: Credentials,
        config: ClientConfig,
        transport: SyncTransport,
        *,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize sync request executor.

        Args:
            credentials: Credentials used to sign every attempt.
            config: Client configuration.
            transport: Blocking transport.
            clock: Optional wall clock returning unix seconds.
        """
        super().__init__(credentials, config, clock=clock)
        self._transport = transport

    @property
    def transport(self) -> SyncTransport:
        """Transport this executor sends through."""
        return self._transport

    def execute(self, endpoint: Endpoint[T], options: RequestOptions | None = None) -> T:
        """Execute one logical call, retrying as allowed.

        Args:
            endpoint: Action to invoke.
            options: Optional per-call overrides.

        Returns:
            The endpoint's typed result.

        Raises:
            TencentCloudError: The last classified error when the call fails.
        """
        started = time.monotonic()
        attempt = 0
        try:
            prepared = self.prepare(endpoint, options)
            with trace_operation("tencent_sdk.request", attributes=prepared.span_attributes()):
                while True:
                    outcome = self._execute_single(endpoint, prepared, attempt)
                    if outcome.error is None:
                        self._finish_success(prepared, outcome, attempt, started)
                        return outcome.result  # type: ignore[no-any-return]

                    if not self.should_retry(prepared, outcome.error, attempt):
                        raise outcome.error

                    attempt += 1
                    delay = self.retry_delay(outcome, attempt)
                    self._log_retry(prepared, outcome.error, attempt, delay)
                    if delay > 0:
                        time.sleep(delay)
        except TencentCloudError as e:
            self._finish_failure(endpoint.service, endpoint.action, e, attempt, started)
            raise

    def _execute_single(
        self,
        endpoint: Endpoint[T],
        prepared: PreparedRequest,
        attempt: int,
    ) -> AttemptOutcome:
        """Sign, send and classify one attempt."""
        headers = self.build_headers(prepared)
        self._log_attempt(prepared, attempt)
        with trace_operation(
            "http_request",
            attributes={"http.method": prepared.method, "http.url": prepared.url, "attempt": attempt},
        ):
            try:
                response = self._transport.send(
                    prepared.method, prepared.url, headers, prepared.body, prepared.timeout
                )
            except TransportError as e:
                return self.transport_failure(e, prepared)
        return self.interpret(endpoint, prepared, response)


class AsyncRequestExecutor(_RequestExecutorBase):
    """Asynchronous request executor with signing, classification and retry."""

    def __init__(
        self,
        credentials: Credentials,
        config: ClientConfig,
        transport: AsyncTransport,
        *,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize async request executor.

        Args:
            credentials: Credentials used to sign every attempt.
            config: Client configuration.
            transport: Non-blocking transport.
            clock: Optional wall clock returning unix seconds.
        """
        super().__init__(credentials, config, clock=clock)
        self._transport = transport

    @property
    def transport(self) -> AsyncTransport:
        """Transport this executor sends through."""
        return self._transport

    async def execute(self, endpoint: Endpoint[T], options: RequestOptions | None = None) -> T:
        """Execute one logical call, retrying as allowed.

        Args:
            endpoint: Action to invoke.
            options: Optional per-call overrides.

        Returns:
            The endpoint's typed result.

        Raises:
            TencentCloudError: The last classified error when the call fails.
        """
        started = time.monotonic()
        attempt = 0
        try:
            prepared = self.prepare(endpoint, options)
            with trace_operation("tencent_sdk.request", attributes=prepared.span_attributes()):
                while True:
                    outcome = await self._execute_single(endpoint, prepared, attempt)
                    if outcome.error is None:
                        self._finish_success(prepared, outcome, attempt, started)
                        return outcome.result  # type: ignore[no-any-return]

                    if not self.should_retry(prepared, outcome.error, attempt):
                        raise outcome.error

                    attempt += 1
                    delay = self.retry_delay(outcome, attempt)
                    self._log_retry(prepared, outcome.error, attempt, delay)
                    if delay > 0:
                        await asyncio.sleep(delay)
        except TencentCloudError as e:
            self._finish_failure(endpoint.service, endpoint.action, e, attempt, started)
            raise

    async def _execute_single(
        self,
        endpoint: Endpoint[T],
        prepared: PreparedRequest,
        attempt: int,
    ) -> AttemptOutcome:
        """Sign, send and classify one attempt."""
        headers = self.build_headers(prepared)
        self._log_attempt(prepared, attempt)
        with trace_operation(
            "http_request",
            attributes={"http.method": prepared.method, "http.url": prepared.url, "attempt": attempt},
        ):
            try:
                response = await self._transport.send(
                    prepared.method, prepared.url, headers, prepared.body, prepared.timeout
                )
            except TransportError as e:
                return self.transport_failure(e, prepared)
        return self.interpret(endpoint, prepared, response)
