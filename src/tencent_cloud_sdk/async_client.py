"""Async Tencent Cloud client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self, TypeVar

from .config import ClientConfig
from .core.http_executor import AsyncRequestExecutor
from .http import AsyncHttpxTransport
from .services import (
    AsyncBillingService,
    AsyncCvmService,
    AsyncDnsService,
    AsyncTagService,
    AsyncVpcService,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from .config import RequestOptions
    from .credentials import Credentials
    from .endpoint import Endpoint
    from .http import AsyncTransport

T = TypeVar("T")


class AsyncTencentCloudClient:
    """Asyncio client sharing request preparation and classification with
    :class:`~tencent_cloud_sdk.client.TencentCloudClient`.
    """

    def __init__(
        self,
        credentials: Credentials,
        config: ClientConfig | None = None,
        *,
        transport: AsyncTransport | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize async client.

        Args:
            credentials: Credentials used to sign every request.
            config: Client configuration (defaults apply when omitted).
            transport: Optional transport replacing the httpx one.
            http_transport: Optional low-level httpx transport for the
                default transport (e.g. ``httpx.MockTransport``).
            clock: Optional wall clock used for signing timestamps.

        Raises:
            InvalidConfigError: If the HTTP transport cannot be built.
        """
        self.config = config or ClientConfig()
        self.credentials = credentials
        self._transport = transport or AsyncHttpxTransport(
            self.config.transport, transport=http_transport
        )
        self._executor = AsyncRequestExecutor(
            credentials, self.config, self._transport, clock=clock
        )

        self.cvm = AsyncCvmService(self._executor)
        self.billing = AsyncBillingService(self._executor)
        self.tag = AsyncTagService(self._executor)
        self.vpc = AsyncVpcService(self._executor)
        self.dnspod = AsyncDnsService(self._executor)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP transport."""
        await self._transport.aclose()

    async def execute(self, endpoint: Endpoint[T], options: RequestOptions | None = None) -> T:
        """Invoke any endpoint.

        Raises:
            TencentCloudError: Classified failure after retries are exhausted.
        """
        return await self._executor.execute(endpoint, options)
