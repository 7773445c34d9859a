"""DNSPod record bindings.

Record mutations are not idempotent: they are retried only when the caller
supplies an idempotency key in :class:`~tencent_cloud_sdk.config.RequestOptions`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, Field

from ..endpoint import Endpoint
from ..models import ActionResponse, ActionResult, Envelope, compact_payload
from .base import AsyncServiceFacade, ServiceFacade

if TYPE_CHECKING:
    from ..config import RequestOptions

SERVICE = "dnspod"
VERSION = "2021-03-23"

# DNSPod's name for the default resolution line.
DEFAULT_RECORD_LINE = "默认"


class RecordType(StrEnum):
    TXT = "TXT"
    A = "A"
    CNAME = "CNAME"


def normalize_record_line(line: str) -> str:
    """Map ``"default"`` (any case) to DNSPod's default line name."""
    return DEFAULT_RECORD_LINE if line.lower() == "default" else line


class CreateRecordResult(ActionResult):
    record_id: int | None = Field(None, alias="RecordId")


CreateRecordResponse = Envelope[CreateRecordResult]


@dataclass(frozen=True, kw_only=True)
class CreateRecord(Endpoint[Any]):
    service: ClassVar[str] = SERVICE
    action: ClassVar[str] = "CreateRecord"
    version: ClassVar[str] = VERSION
    response_model: ClassVar[type[BaseModel]] = CreateRecordResponse

    domain: str
    sub_domain: str
    value: str
    record_type: str = RecordType.TXT
    record_line: str = DEFAULT_RECORD_LINE
    domain_id: int | None = None
    record_line_id: str | None = None
    ttl: int | None = None
    status: str | None = None
    remark: str | None = None
    group_id: int | None = None
    region: str | None = None

    def payload(self) -> dict[str, Any]:
        return compact_payload(
            Domain=self.domain,
            SubDomain=self.sub_domain,
            RecordType=str(self.record_type).upper(),
            RecordLine=normalize_record_line(self.record_line),
            Value=self.value,
            DomainId=self.domain_id,
            RecordLineId=self.record_line_id,
            TTL=self.ttl,
            Status=self.status,
            Remark=self.remark,
            GroupId=self.group_id,
        )


@dataclass(frozen=True, kw_only=True)
class DeleteRecord(Endpoint[Any]):
    service: ClassVar[str] = SERVICE
    action: ClassVar[str] = "DeleteRecord"
    version: ClassVar[str] = VERSION
    response_model: ClassVar[type[BaseModel]] = ActionResponse

    domain: str
    record_id: int
    domain_id: int | None = None
    region: str | None = None

    def payload(self) -> dict[str, Any]:
        return compact_payload(Domain=self.domain, RecordId=self.record_id, DomainId=self.domain_id)


class DnsService(ServiceFacade):
    """Blocking DNSPod facade (``client.dnspod``)."""

    def create_record(
        self,
        domain: str,
        sub_domain: str,
        value: str,
        *,
        record_type: str = RecordType.TXT,
        record_line: str = DEFAULT_RECORD_LINE,
        ttl: int | None = None,
        remark: str | None = None,
        options: RequestOptions | None = None,
    ) -> Envelope[CreateRecordResult]:
        endpoint = CreateRecord(
            domain=domain,
            sub_domain=sub_domain,
            value=value,
            record_type=record_type,
            record_line=record_line,
            ttl=ttl,
            remark=remark,
        )
        return self._call(endpoint, options)

    def delete_record(
        self,
        domain: str,
        record_id: int,
        *,
        options: RequestOptions | None = None,
    ) -> ActionResponse:
        return self._call(DeleteRecord(domain=domain, record_id=record_id), options)


class AsyncDnsService(AsyncServiceFacade):
    """Asyncio DNSPod facade (``client.dnspod``)."""

    async def create_record(
        self,
        domain: str,
        sub_domain: str,
        value: str,
        *,
        record_type: str = RecordType.TXT,
        record_line: str = DEFAULT_RECORD_LINE,
        ttl: int | None = None,
        remark: str | None = None,
        options: RequestOptions | None = None,
    ) -> Envelope[CreateRecordResult]:
        endpoint = CreateRecord(
            domain=domain,
            sub_domain=sub_domain,
            value=value,
            record_type=record_type,
            record_line=record_line,
            ttl=ttl,
            remark=remark,
        )
        return await self._call(endpoint, options)

    async def delete_record(
        self,
        domain: str,
        record_id: int,
        *,
        options: RequestOptions | None = None,
    ) -> ActionResponse:
        return await self._call(DeleteRecord(domain=domain, record_id=record_id), options)
