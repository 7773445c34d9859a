"""Typed bindings for a subset of provider services."""

from .billing import AsyncBillingService, BillingService, DescribeAccountBalance
from .cvm import (
    AsyncCvmService,
    CvmService,
    DescribeImages,
    DescribeInstances,
    RebootInstances,
    StartInstances,
    StopInstances,
    TerminateInstances,
)
from .dns import AsyncDnsService, CreateRecord, DeleteRecord, DnsService, RecordType
from .tag import AsyncTagService, DescribeProjects, TagService
from .vpc import AsyncVpcService, DescribeSubnets, DescribeVpcs, VpcService

__all__ = [
    "AsyncBillingService",
    "AsyncCvmService",
    "AsyncDnsService",
    "AsyncTagService",
    "AsyncVpcService",
    "BillingService",
    "CreateRecord",
    "CvmService",
    "DeleteRecord",
    "DescribeAccountBalance",
    "DescribeImages",
    "DescribeInstances",
    "DescribeProjects",
    "DescribeSubnets",
    "DescribeVpcs",
    "DnsService",
    "RebootInstances",
    "RecordType",
    "StartInstances",
    "StopInstances",
    "TagService",
    "TerminateInstances",
    "VpcService",
]
