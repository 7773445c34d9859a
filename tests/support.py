"""In-memory transports and response builders shared by the test suite."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from tencent_cloud_sdk.types import TransportResponse

SECRET_ID = "AKIDz8krbsJ5yKBZQpn74WFkmLPx3EXAMPLE"
SECRET_KEY = "Gu5t9xGARNpq86cd98joQYCN3EXAMPLE"
FIXED_TIMESTAMP = 1551113065


@dataclass
class SentRequest:
    method: str
    url: str
    headers: dict[str, str]
    body: bytes | None
    timeout: float

    def json(self) -> Any:
        return json.loads(self.body or b"null")


def json_response(
    status: int,
    body: Any,
    headers: dict[str, str] | None = None,
) -> TransportResponse:
    return TransportResponse(
        status=status,
        headers=headers or {},
        body=body if isinstance(body, str) else json.dumps(body),
    )


def success(request_id: str = "req-ok", **fields: Any) -> TransportResponse:
    return json_response(200, {"Response": {**fields, "RequestId": request_id}})


def service_error(
    code: str,
    message: str = "failure",
    *,
    status: int = 200,
    request_id: str = "req-err",
    headers: dict[str, str] | None = None,
) -> TransportResponse:
    return json_response(
        status,
        {"Response": {"Error": {"Code": code, "Message": message}, "RequestId": request_id}},
        headers,
    )


class StubTransport:
    """Plays back scripted outcomes; the last one repeats forever."""

    def __init__(self, *outcomes: TransportResponse | BaseException) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[SentRequest] = []
        self.closed = False

    def _next(self, method: str, url: str, headers: dict[str, str], body: bytes | None, timeout: float) -> TransportResponse:
        self.calls.append(SentRequest(method, url, dict(headers), body, timeout))
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout: float,
    ) -> TransportResponse:
        return self._next(method, url, headers, body, timeout)

    def close(self) -> None:
        self.closed = True


class AsyncStubTransport(StubTransport):
    async def send(  # type: ignore[override]
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout: float,
    ) -> TransportResponse:
        return self._next(method, url, headers, body, timeout)

    async def aclose(self) -> None:
        self.closed = True
