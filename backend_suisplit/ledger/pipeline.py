"""
Dashboard pipeline: session -> discover -> fetch -> parse -> aggregate.

One pass per refresh. A pass is keyed by the session snapshot it was
issued for; if the wallet disconnects or switches address before the pass
completes, its results are dropped instead of published. Per-group content
fetches run concurrently (bounded) since they are independent reads and
the aggregator treats the group set as unordered.

Nothing is cached: every refresh re-queries the gateway.
"""

from __future__ import annotations

import asyncio
import time
from datetime import date
from decimal import Decimal
from typing import Callable

from backend_suisplit.core.exceptions import SuiSplitError
from backend_suisplit.ledger.aggregator import MONTH_WINDOW, aggregate, error_report
from backend_suisplit.ledger.discovery import ObjectDiscoverer, is_expense_group
from backend_suisplit.ledger.models import DashboardReport, EmptyPolicy
from backend_suisplit.ledger.parser import parse_batch
from backend_suisplit.ledger.temporal import PositionalMonthKey, TemporalKeyStrategy, current_month_index
from backend_suisplit.sui_rpc.gateway import Gateway, mist_to_sui
from backend_suisplit.sui_rpc.models import ExpenseGroupObject, OnChainObject
from backend_suisplit.suisplit_logging import get_logger, pass_context
from backend_suisplit.utils.wallet_utils import short_address
from backend_suisplit.wallet.session import SessionSnapshot, WalletSession

logger = get_logger(__name__)

DEFAULT_FETCH_CONCURRENCY = 8
BALANCE_NOT_CONNECTED = "Not Connected"
BALANCE_ERROR = "Error"


class DashboardReporter:
    """
    Stateless report builder over a gateway.

    Used directly by the HTTP API for an arbitrary address, and by
    DashboardPipeline for the session's address.
    """

    def __init__(
        self,
        gateway: Gateway,
        *,
        expense_group_type: str,
        temporal_key: TemporalKeyStrategy | None = None,
        empty_policy: EmptyPolicy = EmptyPolicy.SENTINEL,
        fetch_concurrency: int = DEFAULT_FETCH_CONCURRENCY,
        window: int = MONTH_WINDOW,
        clock: Callable[[], date] = date.today,
    ) -> None:
        if fetch_concurrency <= 0:
            raise ValueError("fetch_concurrency must be positive")
        self._gateway = gateway
        self._discoverer = ObjectDiscoverer(gateway, expense_group_type=expense_group_type)
        self._temporal_key = temporal_key
        self._empty_policy = EmptyPolicy(empty_policy)
        self._fetch_concurrency = fetch_concurrency
        self._window = window
        self._clock = clock

    @property
    def discoverer(self) -> ObjectDiscoverer:
        return self._discoverer

    async def _fetch_content(self, groups: list[ExpenseGroupObject]) -> list[ExpenseGroupObject]:
        """Fill in content for listed groups that came without it; drop groups that fail."""
        semaphore = asyncio.Semaphore(self._fetch_concurrency)

        async def _load(group: ExpenseGroupObject) -> ExpenseGroupObject | None:
            if group.has_content:
                return group
            async with semaphore:
                try:
                    result = await self._gateway.get_object(group.object_id)
                except SuiSplitError as e:
                    logger.warning("dashboard_group_fetch_failed", object_id=group.object_id, error=e.message)
                    return None
            full = OnChainObject.from_rpc_item(result)
            if full is None or not is_expense_group(full, self._discoverer.expense_group_type):
                logger.warning("dashboard_group_fetch_empty", object_id=group.object_id)
                return None
            return full

        loaded = await asyncio.gather(*(_load(g) for g in groups))
        return [g for g in loaded if g is not None]

    async def report_for(self, snapshot: SessionSnapshot) -> DashboardReport:
        """Run one pass for a snapshot. Never raises for gateway problems."""
        current_month = current_month_index(self._clock())
        groups, error = await self._discoverer.discover_soft(snapshot)
        if error is not None:
            rows = error_report()
            return DashboardReport(
                address=snapshot.address,
                debts=rows.debts,
                monthly=rows.monthly,
                error=error.message,
                generated_at=time.time(),
            )

        groups = await self._fetch_content(groups)
        temporal_key = self._temporal_key or PositionalMonthKey(current_month)
        parsed = parse_batch(groups, temporal_key=temporal_key)
        rows = aggregate(
            parsed,
            current_month=current_month,
            empty_policy=self._empty_policy,
            window=self._window,
        )
        return DashboardReport(
            address=snapshot.address,
            debts=rows.debts,
            monthly=rows.monthly,
            group_count=len(parsed),
            generated_at=time.time(),
        )

    async def report_for_address(self, address: str) -> DashboardReport:
        return await self.report_for(SessionSnapshot(address=address, connected=True, generation=0))

    async def balance_for(self, address: str) -> Decimal:
        """SUI balance of an address, from MIST, rounded to cents. Raises SuiSplitError."""
        result = await self._gateway.get_balance(address)
        raw = result.get("totalBalance", "0") if isinstance(result, dict) else "0"
        return mist_to_sui(raw)


class DashboardPipeline:
    """
    Session-bound pipeline. ``latest`` holds the most recent report that
    was still current when it completed.
    """

    def __init__(self, session: WalletSession, reporter: DashboardReporter) -> None:
        self._session = session
        self._reporter = reporter
        self.latest: DashboardReport | None = None

    @property
    def session(self) -> WalletSession:
        return self._session

    async def refresh(self) -> DashboardReport | None:
        """
        Run a pass for the current session state.

        Returns the report, or None when the session changed while the pass
        was in flight (the stale results are discarded).
        """
        snapshot = self._session.snapshot()
        with pass_context(snapshot.address, snapshot.generation):
            report = await self._reporter.report_for(snapshot)
        if not self._session.is_current(snapshot):
            logger.info(
                "dashboard_pass_stale",
                issued_for=short_address(snapshot.address),
                current=short_address(self._session.address),
            )
            return None
        self.latest = report
        logger.info(
            "dashboard_pass_complete",
            address=short_address(snapshot.address),
            group_count=report.group_count,
            error=report.error,
        )
        return report

    async def fetch_balance(self) -> str:
        """Balance card text: amount in SUI, "Not Connected" or "Error"."""
        snapshot = self._session.snapshot()
        if not snapshot.connected:
            return BALANCE_NOT_CONNECTED
        try:
            balance = await self._reporter.balance_for(snapshot.address)
        except (SuiSplitError, ArithmeticError, ValueError) as e:
            logger.warning("dashboard_balance_failed", address=short_address(snapshot.address), error=str(e))
            return BALANCE_ERROR
        return f"{balance:.2f}"
