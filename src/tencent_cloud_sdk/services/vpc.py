"""Virtual Private Cloud (``vpc``) bindings."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ..endpoint import Endpoint
from ..models import ActionResult, Envelope, Filter, Tag, compact_payload
from .base import AsyncServiceFacade, ServiceFacade

if TYPE_CHECKING:
    from ..config import RequestOptions

SERVICE = "vpc"
VERSION = "2017-03-12"

_MODEL_CONFIG = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class VpcSummary(BaseModel):
    model_config = _MODEL_CONFIG

    vpc_id: str | None = Field(None, alias="VpcId")
    vpc_name: str | None = Field(None, alias="VpcName")
    cidr_block: str | None = Field(None, alias="CidrBlock")
    is_default: bool | None = Field(None, alias="IsDefault")
    enable_multicast: bool | None = Field(None, alias="EnableMulticast")
    created_time: str | None = Field(None, alias="CreatedTime")
    tag_set: list[Tag] = Field(default_factory=list, alias="TagSet")


class DescribeVpcsResult(ActionResult):
    total_count: int | None = Field(None, alias="TotalCount")
    vpc_set: list[VpcSummary] = Field(default_factory=list, alias="VpcSet")


DescribeVpcsResponse = Envelope[DescribeVpcsResult]


class SubnetSummary(BaseModel):
    model_config = _MODEL_CONFIG

    subnet_id: str | None = Field(None, alias="SubnetId")
    subnet_name: str | None = Field(None, alias="SubnetName")
    vpc_id: str | None = Field(None, alias="VpcId")
    cidr_block: str | None = Field(None, alias="CidrBlock")
    is_default: bool | None = Field(None, alias="IsDefault")
    zone: str | None = Field(None, alias="Zone")


class DescribeSubnetsResult(ActionResult):
    total_count: int | None = Field(None, alias="TotalCount")
    subnet_set: list[SubnetSummary] = Field(default_factory=list, alias="SubnetSet")


DescribeSubnetsResponse = Envelope[DescribeSubnetsResult]


class _VpcEndpoint(Endpoint[Any]):
    service: ClassVar[str] = SERVICE
    version: ClassVar[str] = VERSION


@dataclass(frozen=True, kw_only=True)
class DescribeVpcs(_VpcEndpoint):
    action: ClassVar[str] = "DescribeVpcs"
    response_model: ClassVar[type[BaseModel]] = DescribeVpcsResponse

    region: str | None = None
    vpc_ids: Sequence[str] = ()
    filters: Sequence[Filter] = ()
    limit: int | None = None
    offset: int | None = None

    def payload(self) -> dict[str, Any]:
        return compact_payload(
            VpcIds=list(self.vpc_ids) or None,
            Filters=list(self.filters) or None,
            Limit=self.limit,
            Offset=self.offset,
        )


@dataclass(frozen=True, kw_only=True)
class DescribeSubnets(_VpcEndpoint):
    action: ClassVar[str] = "DescribeSubnets"
    response_model: ClassVar[type[BaseModel]] = DescribeSubnetsResponse

    region: str | None = None
    subnet_ids: Sequence[str] = ()
    filters: Sequence[Filter] = ()
    vpc_id: str | None = None
    limit: int | None = None
    offset: int | None = None

    def payload(self) -> dict[str, Any]:
        return compact_payload(
            SubnetIds=list(self.subnet_ids) or None,
            Filters=list(self.filters) or None,
            VpcId=self.vpc_id,
            Limit=self.limit,
            Offset=self.offset,
        )


class VpcService(ServiceFacade):
    """Blocking VPC facade (``client.vpc``)."""

    def describe_vpcs(
        self,
        *,
        region: str | None = None,
        vpc_ids: Sequence[str] = (),
        filters: Sequence[Filter] = (),
        limit: int | None = None,
        offset: int | None = None,
        options: RequestOptions | None = None,
    ) -> Envelope[DescribeVpcsResult]:
        endpoint = DescribeVpcs(
            region=region,
            vpc_ids=tuple(vpc_ids),
            filters=tuple(filters),
            limit=limit,
            offset=offset,
        )
        return self._call(endpoint, options)

    def describe_subnets(
        self,
        *,
        region: str | None = None,
        subnet_ids: Sequence[str] = (),
        filters: Sequence[Filter] = (),
        vpc_id: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        options: RequestOptions | None = None,
    ) -> Envelope[DescribeSubnetsResult]:
        endpoint = DescribeSubnets(
            region=region,
            subnet_ids=tuple(subnet_ids),
            filters=tuple(filters),
            vpc_id=vpc_id,
            limit=limit,
            offset=offset,
        )
        return self._call(endpoint, options)


class AsyncVpcService(AsyncServiceFacade):
    """Asyncio VPC facade (``client.vpc``)."""

    async def describe_vpcs(
        self,
        *,
        region: str | None = None,
        vpc_ids: Sequence[str] = (),
        filters: Sequence[Filter] = (),
        limit: int | None = None,
        offset: int | None = None,
        options: RequestOptions | None = None,
    ) -> Envelope[DescribeVpcsResult]:
        endpoint = DescribeVpcs(
            region=region,
            vpc_ids=tuple(vpc_ids),
            filters=tuple(filters),
            limit=limit,
            offset=offset,
        )
        return await self._call(endpoint, options)

    async def describe_subnets(
        self,
        *,
        region: str | None = None,
        subnet_ids: Sequence[str] = (),
        filters: Sequence[Filter] = (),
        vpc_id: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        options: RequestOptions | None = None,
    ) -> Envelope[DescribeSubnetsResult]:
        endpoint = DescribeSubnets(
            region=region,
            subnet_ids=tuple(subnet_ids),
            filters=tuple(filters),
            vpc_id=vpc_id,
            limit=limit,
            offset=offset,
        )
        return await self._call(endpoint, options)
