"""Tag service bindings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ..endpoint import Endpoint
from ..models import ActionResult, Envelope, compact_payload
from .base import AsyncServiceFacade, ServiceFacade

if TYPE_CHECKING:
    from ..config import RequestOptions

SERVICE = "tag"
VERSION = "2018-08-13"


class Project(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    project_id: int | None = Field(None, alias="ProjectId")
    project_name: str | None = Field(None, alias="ProjectName")
    create_time: str | None = Field(None, alias="CreateTime")
    describe: str | None = Field(None, alias="Describe")


class DescribeProjectsResult(ActionResult):
    total_count: int | None = Field(None, alias="TotalCount")
    project_set: list[Project] = Field(default_factory=list, alias="ProjectSet")


DescribeProjectsResponse = Envelope[DescribeProjectsResult]


@dataclass(frozen=True, kw_only=True)
class DescribeProjects(Endpoint[Any]):
    """List projects. Defaults to every project, first page of 1000."""

    service: ClassVar[str] = SERVICE
    action: ClassVar[str] = "DescribeProjects"
    version: ClassVar[str] = VERSION
    response_model: ClassVar[type[BaseModel]] = DescribeProjectsResponse

    region: str | None = None
    include_all: bool = True
    limit: int | None = 1000
    offset: int | None = 0

    def payload(self) -> dict[str, Any]:
        return compact_payload(
            AllList=1 if self.include_all else 0,
            Limit=self.limit,
            Offset=self.offset,
        )


class TagService(ServiceFacade):
    """Blocking tag facade (``client.tag``)."""

    def describe_projects(
        self,
        *,
        include_all: bool = True,
        limit: int | None = 1000,
        offset: int | None = 0,
        options: RequestOptions | None = None,
    ) -> Envelope[DescribeProjectsResult]:
        endpoint = DescribeProjects(include_all=include_all, limit=limit, offset=offset)
        return self._call(endpoint, options)


class AsyncTagService(AsyncServiceFacade):
    """Asyncio tag facade (``client.tag``)."""

    async def describe_projects(
        self,
        *,
        include_all: bool = True,
        limit: int | None = 1000,
        offset: int | None = 0,
        options: RequestOptions | None = None,
    ) -> Envelope[DescribeProjectsResult]:
        endpoint = DescribeProjects(include_all=include_all, limit=limit, offset=offset)
        return await self._call(endpoint, options)
