"""Unit tests for the blocking request executor.

Covers the sign/send/classify/retry state machine against an in-memory
transport.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

import pytest

from support import (
    FIXED_TIMESTAMP,
    StubTransport,
    json_response,
    service_error,
    success,
)
from tencent_cloud_sdk.config import ClientConfig, EndpointMode, RequestOptions, RetryConfig
from tencent_cloud_sdk.core.http_executor import SyncRequestExecutor, parse_retry_after
from tencent_cloud_sdk.credentials import Credentials
from tencent_cloud_sdk.endpoint import Endpoint
from tencent_cloud_sdk.errors import (
    ApiError,
    ApiErrorCategory,
    AuthError,
    DecodeError,
    InvalidConfigError,
    NotFoundError,
    RateLimitedError,
    SigningError,
    TransportError,
)
from tencent_cloud_sdk.services.cvm import DescribeInstances, StartInstances
from tencent_cloud_sdk.services.dns import CreateRecord
from tencent_cloud_sdk.types import HttpMethod, TransportResponse

GET_SIGNATURE = "f9c21b14ea82a97c38421404c6b31b89c4cbd8f69eb9489c71c68ed113056d11"


@dataclass(frozen=True, kw_only=True)
class ListItems(Endpoint[Any]):
    service: ClassVar[str] = "test"
    action: ClassVar[str] = "ListItems"
    version: ClassVar[str] = "2020-01-01"
    method: ClassVar[HttpMethod] = "GET"
    path_segments: ClassVar[tuple[str, ...]] = ("v1", "items")

    region: str | None = None

    def query(self) -> list[tuple[str, str]]:
        return [("b", "1"), ("a", "z"), ("a", "a b")]

    def extra_headers(self) -> dict[str, str]:
        return {"X-Trace": "on"}


@dataclass(frozen=True, kw_only=True)
class Unserializable(Endpoint[Any]):
    service: ClassVar[str] = "test"
    action: ClassVar[str] = "DescribeThings"
    version: ClassVar[str] = "2020-01-01"

    def payload(self) -> Any:
        return {"When": object()}


@dataclass(frozen=True, kw_only=True)
class WithHeaders(Endpoint[Any]):
    service: ClassVar[str] = "test"
    action: ClassVar[str] = "DescribeThings"
    version: ClassVar[str] = "2020-01-01"

    headers: dict[str, str]

    def extra_headers(self) -> dict[str, str]:
        return self.headers


@dataclass(frozen=True, kw_only=True)
class BrokenBinding(Endpoint[Any]):
    service: ClassVar[str] = "test"
    action: ClassVar[str] = "DescribeThings"
    version: ClassVar[str] = "2020-01-01"

    fail_in: str

    def payload(self) -> Any:
        if self.fail_in == "payload":
            raise KeyError("Limit")
        return {}

    def extra_headers(self) -> dict[str, str]:
        if self.fail_in == "headers":
            raise RuntimeError("no trace context")
        return {}


def executor(
    credentials: Credentials,
    config: ClientConfig,
    transport: StubTransport,
    clock: Any = None,
) -> SyncRequestExecutor:
    return SyncRequestExecutor(credentials, config, transport, clock=clock)


class TestSuccess:
    """Tests for the happy path."""

    def test_decodes_typed_result(self, credentials: Credentials, client_config: ClientConfig) -> None:
        """A read action decodes into its response model."""
        transport = StubTransport(success("req-1", TotalCount=0, InstanceSet=[]))

        result = executor(credentials, client_config, transport).execute(DescribeInstances())

        assert result.request_id == "req-1"
        assert result.response.total_count == 0
        assert result.response.instance_set == []
        assert len(transport.calls) == 1

    def test_request_shape(self, credentials: Credentials, client_config: ClientConfig) -> None:
        """POST goes to the service host with a compact JSON body and signed headers."""
        transport = StubTransport(success())

        executor(credentials, client_config, transport).execute(
            DescribeInstances(region="ap-beijing", limit=1)
        )

        sent = transport.calls[0]
        assert sent.method == "POST"
        assert sent.url == "https://cvm.tencentcloudapi.com/"
        assert sent.body == b'{"Limit":1}'
        assert sent.timeout == 30.0
        assert sent.headers["X-TC-Action"] == "DescribeInstances"
        assert sent.headers["X-TC-Version"] == "2017-03-12"
        assert sent.headers["X-TC-Region"] == "ap-beijing"
        assert sent.headers["Host"] == "cvm.tencentcloudapi.com"
        assert sent.headers["Authorization"].startswith("TC3-HMAC-SHA256 Credential=")

    def test_default_region_fallback(self, credentials: Credentials, client_config: ClientConfig) -> None:
        transport = StubTransport(success())

        executor(credentials, client_config, transport).execute(DescribeInstances())

        assert transport.calls[0].headers["X-TC-Region"] == "ap-guangzhou"

    def test_no_region_at_all(self, credentials: Credentials) -> None:
        transport = StubTransport(success())

        executor(credentials, ClientConfig(), transport).execute(DescribeInstances())

        assert "X-TC-Region" not in transport.calls[0].headers

    def test_get_request_golden_signature(self, credentials: Credentials, fixed_clock: Any) -> None:
        """GET sends no body, a sorted query and reproduces the golden signature."""
        config = ClientConfig(
            base_url="https://test.example.com", endpoint_mode=EndpointMode.FIXED_HOST
        )
        transport = StubTransport(json_response(200, {"items": []}))

        result = executor(credentials, config, transport, fixed_clock).execute(ListItems())

        sent = transport.calls[0]
        assert result == {"items": []}
        assert sent.method == "GET"
        assert sent.body is None
        assert sent.url == "https://test.example.com/v1/items?a=a%20b&a=z&b=1"
        assert sent.headers["X-TC-Timestamp"] == str(FIXED_TIMESTAMP)
        assert sent.headers["Authorization"].endswith(f"Signature={GET_SIGNATURE}")
        assert sent.headers["X-Trace"] == "on"

    def test_per_call_timeout(self, credentials: Credentials, client_config: ClientConfig) -> None:
        transport = StubTransport(success())

        executor(credentials, client_config, transport).execute(
            DescribeInstances(), RequestOptions(timeout=2.5)
        )

        assert transport.calls[0].timeout == 2.5


class TestServiceErrors:
    """Tests for provider-reported failures."""

    def test_auth_failure(self, credentials: Credentials, client_config: ClientConfig) -> None:
        """An AuthFailure envelope becomes AuthError and is never retried."""
        transport = StubTransport(service_error("AuthFailure", "bad sig", request_id="req-2"))

        with pytest.raises(AuthError) as exc_info:
            executor(credentials, client_config, transport).execute(DescribeInstances())

        error = exc_info.value
        assert error.message == "bad sig"
        assert error.request_id == "req-2"
        assert error.code == "AuthFailure"
        assert error.host == "cvm.tencentcloudapi.com"
        assert error.path == "/"
        assert error.method == "POST"
        assert len(transport.calls) == 1

    def test_not_found_status(self, credentials: Credentials, client_config: ClientConfig) -> None:
        transport = StubTransport(json_response(404, "", {"X-Request-Id": "hdr-9"}))

        with pytest.raises(NotFoundError) as exc_info:
            executor(credentials, client_config, transport).execute(DescribeInstances())

        assert exc_info.value.status_code == 404
        assert exc_info.value.request_id == "hdr-9"

    def test_validation_error_not_retried(
        self, credentials: Credentials, client_config: ClientConfig
    ) -> None:
        transport = StubTransport(service_error("InvalidParameterValue", "bad limit"))

        with pytest.raises(ApiError) as exc_info:
            executor(credentials, client_config, transport).execute(DescribeInstances())

        assert exc_info.value.category is ApiErrorCategory.VALIDATION
        assert len(transport.calls) == 1

    def test_opaque_http_failure(self, credentials: Credentials) -> None:
        """A non-JSON error body is kept as a snippet; request id comes from headers."""
        transport = StubTransport(
            json_response(502, "<html>bad gateway</html>", {"X-TC-RequestId": "hdr-1"})
        )

        with pytest.raises(ApiError) as exc_info:
            executor(credentials, ClientConfig(), transport).execute(DescribeInstances())

        error = exc_info.value
        assert error.status_code == 502
        assert error.code is None
        assert error.category is ApiErrorCategory.INTERNAL
        assert error.request_id == "hdr-1"
        assert error.body_snippet == "<html>bad gateway</html>"

    def test_snippet_is_redacted(self, credentials: Credentials) -> None:
        body = {"Response": {"Error": {"Code": "InternalError", "Message": "m"}, "SecretKey": "s3cr3t"}}
        transport = StubTransport(json_response(500, body))

        with pytest.raises(ApiError) as exc_info:
            executor(credentials, ClientConfig(), transport).execute(DescribeInstances())

        assert exc_info.value.body_snippet is not None
        assert "s3cr3t" not in exc_info.value.body_snippet

    def test_snippet_capture_can_be_disabled(self, credentials: Credentials) -> None:
        transport = StubTransport(json_response(500, "oops"))

        with pytest.raises(ApiError) as exc_info:
            executor(credentials, ClientConfig(), transport).execute(
                DescribeInstances(), RequestOptions(capture_body_snippet=False)
            )

        assert exc_info.value.body_snippet is None


class TestDecodeErrors:
    """Tests for 2xx responses that cannot be decoded."""

    def test_invalid_json(self, credentials: Credentials, client_config: ClientConfig) -> None:
        """Decode failures carry status and snippet and are not retried."""
        transport = StubTransport(json_response(200, "not json", {"X-TC-RequestId": "hdr-2"}))

        with pytest.raises(DecodeError) as exc_info:
            executor(credentials, client_config, transport).execute(DescribeInstances())

        error = exc_info.value
        assert error.status_code == 200
        assert error.request_id == "hdr-2"
        assert error.body_snippet == "not json"
        assert error.host == "cvm.tencentcloudapi.com"
        assert len(transport.calls) == 1

    def test_schema_mismatch(self, credentials: Credentials, client_config: ClientConfig) -> None:
        transport = StubTransport(success("req-3", TotalCount="many"))

        with pytest.raises(DecodeError) as exc_info:
            executor(credentials, client_config, transport).execute(DescribeInstances())

        assert exc_info.value.request_id == "req-3"


class TestRetries:
    """Tests for retry eligibility, budget and delays."""

    def test_budget_is_bounded(self, credentials: Credentials, client_config: ClientConfig) -> None:
        """An always-failing idempotent call makes exactly max_retries + 1 attempts."""
        transport = StubTransport(json_response(503, ""))

        with pytest.raises(ApiError):
            executor(credentials, client_config, transport).execute(DescribeInstances())

        assert len(transport.calls) == 4

    def test_no_retries_by_default(self, credentials: Credentials) -> None:
        transport = StubTransport(json_response(503, ""))

        with pytest.raises(ApiError):
            executor(credentials, ClientConfig(), transport).execute(DescribeInstances())

        assert len(transport.calls) == 1

    def test_recovers_after_transient_failure(
        self, credentials: Credentials, client_config: ClientConfig
    ) -> None:
        transport = StubTransport(
            service_error("RequestLimitExceeded"),
            json_response(500, ""),
            success("req-ok"),
        )

        result = executor(credentials, client_config, transport).execute(DescribeInstances())

        assert result.request_id == "req-ok"
        assert len(transport.calls) == 3

    def test_non_idempotent_call_is_not_retried(
        self, credentials: Credentials, client_config: ClientConfig
    ) -> None:
        """A 429 on a mutation without an idempotency key surfaces immediately."""
        transport = StubTransport(json_response(429, ""), success())

        with pytest.raises(RateLimitedError):
            executor(credentials, client_config, transport).execute(
                StartInstances(region="ap-guangzhou", instance_ids=("ins-1",))
            )

        assert len(transport.calls) == 1

    def test_idempotency_key_makes_mutation_retryable(
        self, credentials: Credentials, client_config: ClientConfig
    ) -> None:
        transport = StubTransport(json_response(429, ""), success("req-7", RecordId=7))
        endpoint = CreateRecord(domain="example.com", sub_domain="_acme", value="token")

        result = executor(credentials, client_config, transport).execute(
            endpoint, RequestOptions(idempotency_key="create-1")
        )

        assert result.response.record_id == 7
        assert len(transport.calls) == 2
        assert all(call.headers["Idempotency-Key"] == "create-1" for call in transport.calls)

    def test_retry_after_zero_retries_immediately(
        self, credentials: Credentials, client_config: ClientConfig, sleeps: list[float]
    ) -> None:
        transport = StubTransport(json_response(429, "", {"Retry-After": "0"}), success())

        executor(credentials, client_config, transport).execute(DescribeInstances())

        assert len(transport.calls) == 2
        assert sleeps == []

    def test_retry_after_takes_precedence(
        self, credentials: Credentials, sleeps: list[float]
    ) -> None:
        config = ClientConfig(retry=RetryConfig(max_retries=1, base_delay=10.0))
        transport = StubTransport(json_response(429, "", {"Retry-After": "2"}), success())

        executor(credentials, config, transport).execute(DescribeInstances())

        assert sleeps == [2.0]

    def test_unrepresentable_retry_after_uses_backoff(
        self, credentials: Credentials, sleeps: list[float]
    ) -> None:
        """Delay-seconds beyond a 64-bit integer fall back to computed backoff."""
        config = ClientConfig(retry=RetryConfig(max_retries=1, base_delay=1.0))
        transport = StubTransport(
            json_response(429, "", {"Retry-After": "99999999999999999999"}), success()
        )

        result = executor(credentials, config, transport).execute(DescribeInstances())

        assert result.request_id == "req-ok"
        assert len(sleeps) == 1
        assert 0.5 <= sleeps[0] <= 1.5

    @pytest.mark.parametrize(
        "retry_after", ["18446744073709551615", "Fri, 31 Dec 9999 23:59:59 GMT"]
    )
    def test_far_future_retry_after_is_capped(
        self, credentials: Credentials, sleeps: list[float], retry_after: str
    ) -> None:
        config = ClientConfig(retry=RetryConfig(max_retries=1, base_delay=0.0, max_retry_after=5.0))
        transport = StubTransport(json_response(429, "", {"Retry-After": retry_after}), success())

        executor(credentials, config, transport).execute(DescribeInstances())

        assert sleeps == [5.0]
        assert len(transport.calls) == 2

    def test_past_http_date_retries_immediately(
        self, credentials: Credentials, client_config: ClientConfig, sleeps: list[float]
    ) -> None:
        transport = StubTransport(
            json_response(503, "", {"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"}),
            success(),
        )

        executor(credentials, client_config, transport).execute(DescribeInstances())

        assert len(transport.calls) == 2
        assert sleeps == []

    def test_backoff_used_without_hint(self, credentials: Credentials, sleeps: list[float]) -> None:
        config = ClientConfig(retry=RetryConfig(max_retries=2, base_delay=1.0))
        transport = StubTransport(json_response(503, ""))

        with pytest.raises(ApiError):
            executor(credentials, config, transport).execute(DescribeInstances())

        assert len(sleeps) == 2
        assert 0.5 <= sleeps[0] <= 1.5
        assert 1.0 <= sleeps[1] <= 3.0

    def test_fresh_timestamp_per_attempt(
        self, credentials: Credentials, client_config: ClientConfig
    ) -> None:
        ticks = iter([1_700_000_000.0, 1_700_000_005.0])
        transport = StubTransport(json_response(500, ""), success())

        executor(credentials, client_config, transport, lambda: next(ticks)).execute(
            DescribeInstances()
        )

        first, second = (call.headers for call in transport.calls)
        assert first["X-TC-Timestamp"] == "1700000000"
        assert second["X-TC-Timestamp"] == "1700000005"
        assert first["Authorization"] != second["Authorization"]


class TestTransportErrors:
    """Tests for failures without an HTTP response."""

    def test_transient_fault_is_retried(
        self, credentials: Credentials, client_config: ClientConfig
    ) -> None:
        transport = StubTransport(TransportError("connection reset", transient=True), success())

        result = executor(credentials, client_config, transport).execute(DescribeInstances())

        assert result.request_id == "req-ok"
        assert len(transport.calls) == 2

    def test_permanent_fault_surfaces(
        self, credentials: Credentials, client_config: ClientConfig
    ) -> None:
        """Non-transient faults surface at once, enriched with request context."""
        transport = StubTransport(TransportError("bad certificate", transient=False))

        with pytest.raises(TransportError) as exc_info:
            executor(credentials, client_config, transport).execute(DescribeInstances())

        assert len(transport.calls) == 1
        assert exc_info.value.host == "cvm.tencentcloudapi.com"
        assert exc_info.value.method == "POST"
        assert "cvm.tencentcloudapi.com" in str(exc_info.value)

    def test_exhausted_transient_faults(
        self, credentials: Credentials, client_config: ClientConfig
    ) -> None:
        transport = StubTransport(TransportError("timed out", transient=True))

        with pytest.raises(TransportError):
            executor(credentials, client_config, transport).execute(DescribeInstances())

        assert len(transport.calls) == 4


class TestLocalFailures:
    """Tests for failures raised before anything is sent."""

    def test_signing_failure(self, client_config: ClientConfig) -> None:
        transport = StubTransport(success())

        with pytest.raises(SigningError):
            executor(Credentials.create("id", ""), client_config, transport).execute(
                DescribeInstances()
            )

        assert transport.calls == []

    def test_unserializable_payload(self, credentials: Credentials, client_config: ClientConfig) -> None:
        transport = StubTransport(success())

        with pytest.raises(InvalidConfigError):
            executor(credentials, client_config, transport).execute(Unserializable())

        assert transport.calls == []

    @pytest.mark.parametrize(
        "headers",
        [
            {"X-Trace": "上海"},
            {"X-Trace": "a\r\nInjected: 1"},
            {"Authorization": "forged"},
            {"host": "evil.example.com"},
            {"Idempotency-Key": "k"},
        ],
    )
    def test_invalid_extra_headers(
        self, credentials: Credentials, client_config: ClientConfig, headers: dict[str, str]
    ) -> None:
        """Extra headers that cannot be sent or would replace SDK headers are rejected."""
        transport = StubTransport(success())

        with pytest.raises(InvalidConfigError) as exc_info:
            executor(credentials, client_config, transport).execute(WithHeaders(headers=headers))

        assert exc_info.value.field == "extra_headers"
        assert transport.calls == []

    def test_valid_extra_headers_are_sent(
        self, credentials: Credentials, client_config: ClientConfig
    ) -> None:
        transport = StubTransport(success())

        executor(credentials, client_config, transport).execute(
            WithHeaders(headers={"X-Trace": "abc"})
        )

        assert transport.calls[0].headers["X-Trace"] == "abc"

    @pytest.mark.parametrize(("fail_in", "cause"), [("payload", KeyError), ("headers", RuntimeError)])
    def test_binding_failures_are_typed(
        self,
        credentials: Credentials,
        client_config: ClientConfig,
        fail_in: str,
        cause: type[Exception],
    ) -> None:
        transport = StubTransport(success())

        with pytest.raises(InvalidConfigError) as exc_info:
            executor(credentials, client_config, transport).execute(BrokenBinding(fail_in=fail_in))

        assert isinstance(exc_info.value.__cause__, cause)
        assert transport.calls == []


class TestParseRetryAfter:
    """Tests for Retry-After parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, None),
            ("", None),
            ("0", 0.0),
            ("7", 7.0),
            ("soon", None),
            ("²", None),
            ("99999999999999999999", None),
            ("18446744073709551615", float(2**64 - 1)),
        ],
    )
    def test_values(self, value: str | None, expected: float | None) -> None:
        assert parse_retry_after(value) == expected

    def test_future_http_date(self) -> None:
        from datetime import UTC, datetime

        now = datetime(2015, 10, 21, 7, 27, 50, tzinfo=UTC)
        assert parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT", now=now) == 10.0

    def test_response_header_lookup(self) -> None:
        response = TransportResponse(status=429, headers={"retry-after": "3"})
        assert parse_retry_after(response.header("Retry-After")) == 3.0
