"""
Ledger domain models: what the parser produces and the aggregator reports.

All amounts are Decimal; to_dict() renders them as floats for JSON.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

NO_DATA_LABEL = "No Data"
ERROR_LABEL = "Error"
PLACEHOLDER_LABELS = frozenset({NO_DATA_LABEL, ERROR_LABEL})

ZERO = Decimal("0")


class EmptyPolicy(str, enum.Enum):
    """What the aggregator emits for a list with no rows."""

    SENTINEL = "sentinel"
    """A single "No Data" row with zero amounts."""
    EMPTY = "empty"
    """An empty list; presentation handles the empty chart itself."""


@dataclass(frozen=True)
class Participant:
    name: str
    raw_index: int
    address: str = ""


@dataclass(frozen=True)
class Expense:
    amount: Decimal
    month_index: int
    participants: tuple[int, ...] = ()
    """Raw indices of the participants sharing this expense; empty means the whole group."""


@dataclass(frozen=True)
class ParsedGroup:
    """Typed view of one expense-group object."""

    object_id: str
    participants: tuple[Participant, ...] = ()
    expenses: tuple[Expense, ...] = ()


@dataclass(frozen=True)
class ParticipantDebt:
    name: str
    amount: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "amount": float(self.amount)}


@dataclass(frozen=True)
class MonthlyExpensePoint:
    month: str
    expenses: Decimal
    income: Decimal = ZERO

    def to_dict(self) -> dict[str, Any]:
        return {"month": self.month, "expenses": float(self.expenses), "income": float(self.income)}


@dataclass(frozen=True)
class AggregateReport:
    debts: tuple[ParticipantDebt, ...] = ()
    monthly: tuple[MonthlyExpensePoint, ...] = ()


@dataclass(frozen=True)
class DashboardReport:
    """
    Result of one dashboard pass for one wallet address.

    ``error`` carries the user-facing message when discovery failed; the
    rows are then the "Error" placeholders.
    """

    address: str
    debts: tuple[ParticipantDebt, ...] = ()
    monthly: tuple[MonthlyExpensePoint, ...] = ()
    group_count: int = 0
    error: str | None = None
    generated_at: float = field(default=0.0, compare=False)

    @property
    def total_owed(self) -> Decimal:
        return sum((d.amount for d in self.debts), ZERO)

    @property
    def active_participants(self) -> int:
        return sum(1 for d in self.debts if d.name not in PLACEHOLDER_LABELS)

    @property
    def latest_month_expenses(self) -> Decimal:
        if not self.monthly:
            return ZERO
        return self.monthly[-1].expenses

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "debts": [d.to_dict() for d in self.debts],
            "monthly": [m.to_dict() for m in self.monthly],
            "summary": {
                "total_owed": float(self.total_owed),
                "active_participants": self.active_participants,
                "latest_month_expenses": float(self.latest_month_expenses),
                "group_count": self.group_count,
            },
            "error": self.error,
        }
