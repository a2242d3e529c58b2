"""
FastAPI router: GET /dashboard/{address}.

Runs discover -> parse -> aggregate for one address through the configured
gateway and returns debts, monthly points and summary figures. Fail-soft:
a failed owned-objects query yields "Error" rows plus the error message
with status 200; only an invalid address is rejected.
"""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from backend_suisplit.api_server.deps import get_gateway
from backend_suisplit.config import Settings, get_settings
from backend_suisplit.ledger.models import EmptyPolicy
from backend_suisplit.ledger.pipeline import DashboardReporter
from backend_suisplit.sui_rpc.gateway import Gateway, require_address
from backend_suisplit.suisplit_logging import get_logger
from backend_suisplit.utils.wallet_utils import short_address

logger = get_logger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


class DebtRow(BaseModel):
    name: str
    amount: float


class MonthlyRow(BaseModel):
    month: str
    expenses: float
    income: float


class DashboardSummary(BaseModel):
    total_owed: float = Field(..., description="Sum of all participant debts")
    active_participants: int = Field(..., description="Distinct participants across groups")
    latest_month_expenses: float = Field(..., description="Expenses in the newest charted month")
    group_count: int = Field(..., description="Expense groups aggregated")


class DashboardResponse(BaseModel):
    """GET /api/dashboard/{address} response."""

    address: str
    debts: list[DebtRow] = Field(default_factory=list)
    monthly: list[MonthlyRow] = Field(default_factory=list)
    summary: DashboardSummary
    error: str | None = Field(None, description="Discovery failure message, if any")


@router.get("/{address}", response_model=DashboardResponse)
async def get_dashboard(
    address: str,
    gateway: Gateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
) -> DashboardResponse:
    t_total = time.perf_counter()
    address = require_address(address)
    reporter = DashboardReporter(
        gateway,
        expense_group_type=settings.expense_group_type,
        empty_policy=EmptyPolicy(settings.empty_policy),
        fetch_concurrency=settings.group_fetch_concurrency,
    )
    report = await reporter.report_for_address(address)
    logger.info(
        "dashboard_report_served",
        address=short_address(address),
        group_count=report.group_count,
        error=report.error,
        total_ms=round((time.perf_counter() - t_total) * 1000, 2),
    )
    return DashboardResponse(**report.to_dict())
