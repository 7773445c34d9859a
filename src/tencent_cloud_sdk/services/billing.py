"""Billing bindings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, Field

from ..endpoint import Endpoint
from ..models import ActionResult, Envelope
from .base import AsyncServiceFacade, ServiceFacade

if TYPE_CHECKING:
    from ..config import RequestOptions

SERVICE = "billing"
VERSION = "2018-07-09"


class AccountBalance(ActionResult):
    """Account balance; amounts are in cents."""

    uin: int | None = Field(None, alias="Uin")
    balance: float | None = Field(None, alias="Balance")
    real_balance: float | None = Field(None, alias="RealBalance")
    cash_account_balance: float | None = Field(None, alias="CashAccountBalance")
    income_into_account_balance: float | None = Field(None, alias="IncomeIntoAccountBalance")
    present_account_balance: float | None = Field(None, alias="PresentAccountBalance")
    freeze_amount: float | None = Field(None, alias="FreezeAmount")
    owe_amount: float | None = Field(None, alias="OweAmount")
    credit_amount: float | None = Field(None, alias="CreditAmount")
    credit_balance: float | None = Field(None, alias="CreditBalance")
    real_credit_balance: float | None = Field(None, alias="RealCreditBalance")


AccountBalanceResponse = Envelope[AccountBalance]


@dataclass(frozen=True, kw_only=True)
class DescribeAccountBalance(Endpoint[Any]):
    service: ClassVar[str] = SERVICE
    action: ClassVar[str] = "DescribeAccountBalance"
    version: ClassVar[str] = VERSION
    response_model: ClassVar[type[BaseModel]] = AccountBalanceResponse

    region: str | None = None


class BillingService(ServiceFacade):
    """Blocking billing facade (``client.billing``)."""

    def describe_account_balance(
        self,
        *,
        region: str | None = None,
        options: RequestOptions | None = None,
    ) -> Envelope[AccountBalance]:
        return self._call(DescribeAccountBalance(region=region), options)


class AsyncBillingService(AsyncServiceFacade):
    """Asyncio billing facade (``client.billing``)."""

    async def describe_account_balance(
        self,
        *,
        region: str | None = None,
        options: RequestOptions | None = None,
    ) -> Envelope[AccountBalance]:
        return await self._call(DescribeAccountBalance(region=region), options)
