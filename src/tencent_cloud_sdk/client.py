"""Synchronous Tencent Cloud client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self, TypeVar

from .config import ClientConfig
from .core.http_executor import SyncRequestExecutor
from .http import HttpxTransport
from .services import BillingService, CvmService, DnsService, TagService, VpcService

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from .config import RequestOptions
    from .credentials import Credentials
    from .endpoint import Endpoint
    from .http import SyncTransport

T = TypeVar("T")


class TencentCloudClient:
    """Blocking client: signs, sends, classifies and retries provider calls.

    Example:
        >>> with TencentCloudClient(Credentials.from_env()) as client:
        ...     result = client.cvm.describe_instances(region="ap-guangzhou")
        ...     print(result.request_id)
    """

    def __init__(
        self,
        credentials: Credentials,
        config: ClientConfig | None = None,
        *,
        transport: SyncTransport | None = None,
        http_transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize client.

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
        self._transport = transport or HttpxTransport(
            self.config.transport, transport=http_transport
        )
        self._executor = SyncRequestExecutor(
            credentials, self.config, self._transport, clock=clock
        )

        self.cvm = CvmService(self._executor)
        self.billing = BillingService(self._executor)
        self.tag = TagService(self._executor)
        self.vpc = VpcService(self._executor)
        self.dnspod = DnsService(self._executor)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP transport."""
        self._transport.close()

    def execute(self, endpoint: Endpoint[T], options: RequestOptions | None = None) -> T:
        """Invoke any endpoint.

        Raises:
            TencentCloudError: Classified failure after retries are exhausted.
        """
        return self._executor.execute(endpoint, options)
