"""Service facades: thin typed wrappers that build endpoints and execute them."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from ..config import RequestOptions
    from ..core.http_executor import AsyncRequestExecutor, SyncRequestExecutor
    from ..endpoint import Endpoint

T = TypeVar("T")


class ServiceFacade:
    """Base for blocking service facades."""

    def __init__(self, executor: SyncRequestExecutor) -> None:
        self._executor = executor

    def _call(self, endpoint: Endpoint[T], options: RequestOptions | None) -> T:
        return self._executor.execute(endpoint, options)


class AsyncServiceFacade:
    """Base for asyncio service facades."""

    def __init__(self, executor: AsyncRequestExecutor) -> None:
        self._executor = executor

    async def _call(self, endpoint: Endpoint[T], options: RequestOptions | None) -> T:
        return await self._executor.execute(endpoint, options)
