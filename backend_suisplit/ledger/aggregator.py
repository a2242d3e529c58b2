"""
Aggregator — parsed groups to the dashboard's debt and monthly views.

Debt rule: every expense is divided equally among the participants it
records, or among all of its group's participants when it records none.
Shares are summed per participant name across groups with exact rational
arithmetic and rounded to cents once, so the result does not depend on
group order. Income is always zero: the contract has no income field.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from fractions import Fraction
from typing import Iterable

from backend_suisplit.ledger.models import (
    ERROR_LABEL,
    NO_DATA_LABEL,
    ZERO,
    AggregateReport,
    EmptyPolicy,
    MonthlyExpensePoint,
    ParsedGroup,
    ParticipantDebt,
)
from backend_suisplit.ledger.temporal import MONTHS_PER_YEAR, current_month_index, month_label

# Fixed width of the dashboard trend chart
MONTH_WINDOW = 7
CENT = Decimal("0.01")
# Enough digits for cent-exact sums of many u64 amounts
MONEY_PRECISION = 60


def _to_cents(value: Fraction) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = max(MONEY_PRECISION, len(str(abs(value.numerator) // value.denominator)) + 4)
        return (Decimal(value.numerator) / Decimal(value.denominator)).quantize(CENT, rounding=ROUND_HALF_EVEN)


def attribute_debts(groups: Iterable[ParsedGroup]) -> list[ParticipantDebt]:
    """Per-name debt totals, largest first (ties by name)."""
    totals: dict[str, Fraction] = defaultdict(Fraction)
    for group in groups:
        by_index = {p.raw_index: p for p in group.participants}
        for p in group.participants:
            totals[p.name] += 0
        for expense in group.expenses:
            sharers = [by_index[i] for i in expense.participants if i in by_index]
            if not sharers:
                sharers = list(group.participants)
            if not sharers:
                continue
            share = Fraction(expense.amount) / len(sharers)
            for p in sharers:
                totals[p.name] += share
    debts = [ParticipantDebt(name=name, amount=_to_cents(total)) for name, total in totals.items()]
    debts.sort(key=lambda d: (-d.amount, d.name))
    return debts


def monthly_totals(
    groups: Iterable[ParsedGroup],
    *,
    current_month: int,
    window: int = MONTH_WINDOW,
) -> list[MonthlyExpensePoint]:
    """
    Expense totals for the ``window`` most recent months that have data,
    oldest first. Recency is measured backward from current_month with
    wrap-around, matching how month indices were assigned.
    """
    sums: dict[int, Decimal] = {}
    with localcontext() as ctx:
        ctx.prec = MONEY_PRECISION
        for group in groups:
            for expense in group.expenses:
                month = expense.month_index % MONTHS_PER_YEAR
                sums[month] = sums.get(month, ZERO) + expense.amount

    def age(month: int) -> int:
        return (current_month - month) % MONTHS_PER_YEAR

    recent = sorted(sums, key=age)[:window]
    recent.sort(key=age, reverse=True)
    return [
        MonthlyExpensePoint(month=month_label(m), expenses=sums[m], income=ZERO)
        for m in recent
    ]


def _placeholder_debts(label: str) -> tuple[ParticipantDebt, ...]:
    return (ParticipantDebt(name=label, amount=ZERO),)


def _placeholder_monthly(label: str) -> tuple[MonthlyExpensePoint, ...]:
    return (MonthlyExpensePoint(month=label, expenses=ZERO, income=ZERO),)


def aggregate(
    groups: Iterable[ParsedGroup],
    *,
    current_month: int | None = None,
    empty_policy: EmptyPolicy = EmptyPolicy.SENTINEL,
    window: int = MONTH_WINDOW,
) -> AggregateReport:
    """
    Combine parsed groups into debts and monthly points.

    Under EmptyPolicy.SENTINEL an empty list becomes a single "No Data" row
    with zero amounts; under EmptyPolicy.EMPTY it stays empty.
    """
    if window <= 0:
        raise ValueError("window must be positive")
    groups = list(groups)
    month = current_month_index() if current_month is None else current_month % MONTHS_PER_YEAR
    debts = tuple(attribute_debts(groups))
    monthly = tuple(monthly_totals(groups, current_month=month, window=window))
    if EmptyPolicy(empty_policy) is EmptyPolicy.SENTINEL:
        debts = debts or _placeholder_debts(NO_DATA_LABEL)
        monthly = monthly or _placeholder_monthly(NO_DATA_LABEL)
    return AggregateReport(debts=debts, monthly=monthly)


def error_report() -> AggregateReport:
    """Rows shown when a pass failed: one "Error" entry per view."""
    return AggregateReport(debts=_placeholder_debts(ERROR_LABEL), monthly=_placeholder_monthly(ERROR_LABEL))
