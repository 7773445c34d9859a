"""HTTP transports for Tencent Cloud SDK.

One ``send`` contract implemented twice: a blocking transport over
``httpx.Client`` and a non-blocking one over ``httpx.AsyncClient``. The
request executor only sees the protocols, which is also the seam tests use
to inject a mock server.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import httpx

from .core.errors import ErrorFactory
from .errors import InvalidConfigError
from .types import TransportResponse

if TYPE_CHECKING:
    from .config import TransportConfig


@runtime_checkable
class SyncTransport(Protocol):
    """Blocking transport contract."""

    def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout: float,
    ) -> TransportResponse:
        """Send one request.

        Raises:
            TransportError: If no HTTP response was obtained.
        """
        ...

    def close(self) -> None:
        """Release connections."""
        ...


@runtime_checkable
class AsyncTransport(Protocol):
    """Non-blocking transport contract."""

    async def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout: float,
    ) -> TransportResponse:
        """Send one request.

        Raises:
            TransportError: If no HTTP response was obtained.
        """
        ...

    async def aclose(self) -> None:
        """Release connections."""
        ...


def _timeout(config: TransportConfig, timeout: float) -> httpx.Timeout:
    read = config.read_timeout if config.read_timeout is not None else timeout
    return httpx.Timeout(
        connect=min(config.connect_timeout, timeout),
        read=min(read, timeout),
        write=timeout,
        pool=timeout,
    )


def create_http_client(
    config: TransportConfig,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create configured sync HTTP client.

    Args:
        config: Transport configuration.
        transport: Optional low-level httpx transport (e.g. ``httpx.MockTransport``).

    Returns:
        Configured httpx.Client.

    Raises:
        InvalidConfigError: If the client cannot be constructed.
    """
    try:
        return httpx.Client(
            timeout=httpx.Timeout(config.connect_timeout),
            headers={
                "User-Agent": config.user_agent,
                "Accept": "application/json",
            },
            verify=not config.accept_invalid_certs,
            trust_env=not config.no_proxy,
            follow_redirects=False,
            transport=transport,
        )
    except (ValueError, TypeError, OSError) as e:
        raise InvalidConfigError("failed to build HTTP client", cause=e) from e


def create_async_http_client(
    config: TransportConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create configured async HTTP client.

    Args:
        config: Transport configuration.
        transport: Optional low-level httpx transport (e.g. ``httpx.MockTransport``).

    Returns:
        Configured httpx.AsyncClient.

    Raises:
        InvalidConfigError: If the client cannot be constructed.
    """
    try:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(config.connect_timeout),
            headers={
                "User-Agent": config.user_agent,
                "Accept": "application/json",
            },
            verify=not config.accept_invalid_certs,
            trust_env=not config.no_proxy,
            follow_redirects=False,
            transport=transport,
        )
    except (ValueError, TypeError, OSError) as e:
        raise InvalidConfigError("failed to build HTTP client", cause=e) from e


def _to_response(response: httpx.Response) -> TransportResponse:
    return TransportResponse(
        status=response.status_code,
        headers={key: value for key, value in response.headers.items()},
        body=response.text,
    )


class HttpxTransport:
    """Blocking transport backed by ``httpx.Client``."""

    def __init__(
        self,
        config: TransportConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = create_http_client(config, transport=transport)

    def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout: float,
    ) -> TransportResponse:
        try:
            response = self._client.request(
                method,
                url,
                headers=headers,
                content=body,
                timeout=_timeout(self._config, timeout),
            )
        except httpx.HTTPError as e:
            raise ErrorFactory.from_transport_exception(e, method=method, url=url) from e
        return _to_response(response)

    def close(self) -> None:
        self._client.close()


class AsyncHttpxTransport:
    """Non-blocking transport backed by ``httpx.AsyncClient``."""

    def __init__(
        self,
        config: TransportConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = create_async_http_client(config, transport=transport)

    async def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout: float,
    ) -> TransportResponse:
        try:
            response = await self._client.request(
                method,
                url,
                headers=headers,
                content=body,
                timeout=_timeout(self._config, timeout),
            )
        except httpx.HTTPError as e:
            raise ErrorFactory.from_transport_exception(e, method=method, url=url) from e
        return _to_response(response)

    async def aclose(self) -> None:
        await self._client.aclose()
