"""Cloud Virtual Machine (``cvm``) bindings."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..endpoint import Endpoint
from ..models import ActionResponse, ActionResult, Envelope, Filter, compact_payload
from .base import AsyncServiceFacade, ServiceFacade

if TYPE_CHECKING:
    from ..config import RequestOptions

SERVICE = "cvm"
VERSION = "2017-03-12"

_MODEL_CONFIG = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class InstancePlacement(BaseModel):
    model_config = _MODEL_CONFIG

    zone: str | None = Field(None, alias="Zone")
    project_id: int | None = Field(None, alias="ProjectId")


class DiskSummary(BaseModel):
    model_config = _MODEL_CONFIG

    disk_type: str | None = Field(None, alias="DiskType")
    disk_size: int | None = Field(None, alias="DiskSize")


class InstanceSummary(BaseModel):
    """One entry of ``InstanceSet``."""

    model_config = _MODEL_CONFIG

    instance_id: str | None = Field(None, alias="InstanceId")
    instance_name: str | None = Field(None, alias="InstanceName")
    instance_state: str | None = Field(None, alias="InstanceState")
    instance_type: str | None = Field(None, alias="InstanceType")
    cpu: int | None = Field(None, validation_alias=AliasChoices("CPU", "Cpu"))
    memory: int | None = Field(None, alias="Memory")
    private_ip_addresses: list[str] | None = Field(None, alias="PrivateIpAddresses")
    public_ip_addresses: list[str] | None = Field(None, alias="PublicIpAddresses")
    placement: InstancePlacement | None = Field(None, alias="Placement")
    system_disk: DiskSummary | None = Field(None, alias="SystemDisk")
    data_disks: list[DiskSummary] | None = Field(None, alias="DataDisks")


class DescribeInstancesResult(ActionResult):
    total_count: int | None = Field(None, alias="TotalCount")
    instance_set: list[InstanceSummary] = Field(default_factory=list, alias="InstanceSet")


DescribeInstancesResponse = Envelope[DescribeInstancesResult]


class ImageSummary(BaseModel):
    model_config = _MODEL_CONFIG

    image_id: str | None = Field(None, alias="ImageId")
    image_name: str | None = Field(None, alias="ImageName")
    image_type: str | None = Field(None, alias="ImageType")
    created_time: str | None = Field(None, alias="CreatedTime")


class DescribeImagesResult(ActionResult):
    total_count: int | None = Field(None, alias="TotalCount")
    image_set: list[ImageSummary] = Field(default_factory=list, alias="ImageSet")


DescribeImagesResponse = Envelope[DescribeImagesResult]


class _CvmEndpoint(Endpoint[Any]):
    service: ClassVar[str] = SERVICE
    version: ClassVar[str] = VERSION


@dataclass(frozen=True, kw_only=True)
class DescribeInstances(_CvmEndpoint):
    """List instances, optionally filtered and paginated."""

    action: ClassVar[str] = "DescribeInstances"
    response_model: ClassVar[type[BaseModel]] = DescribeInstancesResponse

    region: str | None = None
    instance_ids: Sequence[str] = ()
    filters: Sequence[Filter] = ()
    limit: int | None = None
    offset: int | None = None

    def payload(self) -> dict[str, Any]:
        return compact_payload(
            InstanceIds=list(self.instance_ids) or None,
            Filters=list(self.filters) or None,
            Limit=self.limit,
            Offset=self.offset,
        )


@dataclass(frozen=True, kw_only=True)
class DescribeImages(_CvmEndpoint):
    """List images, optionally filtered and paginated."""

    action: ClassVar[str] = "DescribeImages"
    response_model: ClassVar[type[BaseModel]] = DescribeImagesResponse

    region: str | None = None
    image_ids: Sequence[str] = ()
    filters: Sequence[Filter] = ()
    limit: int | None = None
    offset: int | None = None

    def payload(self) -> dict[str, Any]:
        return compact_payload(
            ImageIds=list(self.image_ids) or None,
            Filters=list(self.filters) or None,
            Limit=self.limit,
            Offset=self.offset,
        )


@dataclass(frozen=True, kw_only=True)
class _InstanceLifecycle(_CvmEndpoint):
    """Lifecycle actions on a batch of instances in one region."""

    response_model: ClassVar[type[BaseModel]] = ActionResponse

    region: str | None = None
    instance_ids: Sequence[str] = ()

    def payload(self) -> dict[str, Any]:
        return {"InstanceIds": list(self.instance_ids)}


@dataclass(frozen=True, kw_only=True)
class StartInstances(_InstanceLifecycle):
    action: ClassVar[str] = "StartInstances"


@dataclass(frozen=True, kw_only=True)
class StopInstances(_InstanceLifecycle):
    action: ClassVar[str] = "StopInstances"

    stop_type: str | None = None

    def payload(self) -> dict[str, Any]:
        return compact_payload(InstanceIds=list(self.instance_ids), StopType=self.stop_type)


@dataclass(frozen=True, kw_only=True)
class RebootInstances(_InstanceLifecycle):
    action: ClassVar[str] = "RebootInstances"

    force_reboot: bool | None = None

    def payload(self) -> dict[str, Any]:
        return compact_payload(InstanceIds=list(self.instance_ids), ForceReboot=self.force_reboot)


@dataclass(frozen=True, kw_only=True)
class TerminateInstances(_InstanceLifecycle):
    action: ClassVar[str] = "TerminateInstances"


class CvmService(ServiceFacade):
    """Blocking CVM facade (``client.cvm``)."""

    def describe_instances(
        self,
        *,
        region: str | None = None,
        instance_ids: Sequence[str] = (),
        filters: Sequence[Filter] = (),
        limit: int | None = None,
        offset: int | None = None,
        options: RequestOptions | None = None,
    ) -> Envelope[DescribeInstancesResult]:
        endpoint = DescribeInstances(
            region=region,
            instance_ids=tuple(instance_ids),
            filters=tuple(filters),
            limit=limit,
            offset=offset,
        )
        return self._call(endpoint, options)

    def describe_images(
        self,
        *,
        region: str | None = None,
        image_ids: Sequence[str] = (),
        filters: Sequence[Filter] = (),
        limit: int | None = None,
        offset: int | None = None,
        options: RequestOptions | None = None,
    ) -> Envelope[DescribeImagesResult]:
        endpoint = DescribeImages(
            region=region,
            image_ids=tuple(image_ids),
            filters=tuple(filters),
            limit=limit,
            offset=offset,
        )
        return self._call(endpoint, options)

    def start_instances(
        self,
        region: str,
        instance_ids: Sequence[str],
        *,
        options: RequestOptions | None = None,
    ) -> ActionResponse:
        return self._call(StartInstances(region=region, instance_ids=tuple(instance_ids)), options)

    def stop_instances(
        self,
        region: str,
        instance_ids: Sequence[str],
        *,
        stop_type: str | None = None,
        options: RequestOptions | None = None,
    ) -> ActionResponse:
        endpoint = StopInstances(region=region, instance_ids=tuple(instance_ids), stop_type=stop_type)
        return self._call(endpoint, options)

    def reboot_instances(
        self,
        region: str,
        instance_ids: Sequence[str],
        *,
        force_reboot: bool | None = None,
        options: RequestOptions | None = None,
    ) -> ActionResponse:
        endpoint = RebootInstances(
            region=region, instance_ids=tuple(instance_ids), force_reboot=force_reboot
        )
        return self._call(endpoint, options)

    def terminate_instances(
        self,
        region: str,
        instance_ids: Sequence[str],
        *,
        options: RequestOptions | None = None,
    ) -> ActionResponse:
        return self._call(TerminateInstances(region=region, instance_ids=tuple(instance_ids)), options)


class AsyncCvmService(AsyncServiceFacade):
    """Asyncio CVM facade (``client.cvm``)."""

    async def describe_instances(
        self,
        *,
        region: str | None = None,
        instance_ids: Sequence[str] = (),
        filters: Sequence[Filter] = (),
        limit: int | None = None,
        offset: int | None = None,
        options: RequestOptions | None = None,
    ) -> Envelope[DescribeInstancesResult]:
        endpoint = DescribeInstances(
            region=region,
            instance_ids=tuple(instance_ids),
            filters=tuple(filters),
            limit=limit,
            offset=offset,
        )
        return await self._call(endpoint, options)

    async def describe_images(
        self,
        *,
        region: str | None = None,
        image_ids: Sequence[str] = (),
        filters: Sequence[Filter] = (),
        limit: int | None = None,
        offset: int | None = None,
        options: RequestOptions | None = None,
    ) -> Envelope[DescribeImagesResult]:
        endpoint = DescribeImages(
            region=region,
            image_ids=tuple(image_ids),
            filters=tuple(filters),
            limit=limit,
            offset=offset,
        )
        return await self._call(endpoint, options)

    async def start_instances(
        self,
        region: str,
        instance_ids: Sequence[str],
        *,
        options: RequestOptions | None = None,
    ) -> ActionResponse:
        endpoint = StartInstances(region=region, instance_ids=tuple(instance_ids))
        return await self._call(endpoint, options)

    async def stop_instances(
        self,
        region: str,
        instance_ids: Sequence[str],
        *,
        stop_type: str | None = None,
        options: RequestOptions | None = None,
    ) -> ActionResponse:
        endpoint = StopInstances(region=region, instance_ids=tuple(instance_ids), stop_type=stop_type)
        return await self._call(endpoint, options)

    async def reboot_instances(
        self,
        region: str,
        instance_ids: Sequence[str],
        *,
        force_reboot: bool | None = None,
        options: RequestOptions | None = None,
    ) -> ActionResponse:
        endpoint = RebootInstances(
            region=region, instance_ids=tuple(instance_ids), force_reboot=force_reboot
        )
        return await self._call(endpoint, options)

    async def terminate_instances(
        self,
        region: str,
        instance_ids: Sequence[str],
        *,
        options: RequestOptions | None = None,
    ) -> ActionResponse:
        endpoint = TerminateInstances(region=region, instance_ids=tuple(instance_ids))
        return await self._call(endpoint, options)
