"""
Temporal keys — which calendar month an expense belongs to.

The current contract stores no timestamp, so the default strategy infers
the month from list position: the last expense is the current month and
earlier entries walk backward one month each. TimestampMonthKey is ready
for a contract version that records ``timestamp_ms``.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Mapping, Protocol

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
MONTHS_PER_YEAR = 12


def current_month_index(today: date | None = None) -> int:
    """0-based month of today (January = 0)."""
    return ((today or date.today()).month - 1) % MONTHS_PER_YEAR


def month_label(month_index: int) -> str:
    return MONTH_LABELS[month_index % MONTHS_PER_YEAR]


class TemporalKeyStrategy(Protocol):
    def month_index(self, position: int, length: int, fields: Mapping[str, Any]) -> int:
        """Month (0..11) for the expense at ``position`` of a list of ``length`` entries."""
        ...


class PositionalMonthKey:
    """
    month = (current_month - length + position + 1) mod 12.

    Without a pinned month the clock is read once, on first use, so every
    expense parsed through one key agrees on the current month.
    """

    def __init__(
        self,
        current_month: int | None = None,
        *,
        clock: Callable[[], date] = date.today,
    ) -> None:
        if current_month is not None and not 0 <= current_month < MONTHS_PER_YEAR:
            raise ValueError("current_month must be in [0, 11]")
        self._current_month = current_month
        self._clock = clock

    @property
    def current_month(self) -> int:
        if self._current_month is None:
            self._current_month = current_month_index(self._clock())
        return self._current_month

    def month_index(self, position: int, length: int, fields: Mapping[str, Any]) -> int:
        return (self.current_month - length + position + 1) % MONTHS_PER_YEAR


class TimestampMonthKey:
    """Month from an on-chain millisecond timestamp field; positional fallback when absent."""

    def __init__(
        self,
        field_name: str = "timestamp_ms",
        *,
        fallback: TemporalKeyStrategy | None = None,
    ) -> None:
        self.field_name = field_name
        self._fallback = fallback or PositionalMonthKey()

    def month_index(self, position: int, length: int, fields: Mapping[str, Any]) -> int:
        raw = fields.get(self.field_name)
        if raw is not None and not isinstance(raw, bool):
            try:
                millis = int(Decimal(str(raw)))
                moment = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
                return moment.month - 1
            except (InvalidOperation, ValueError, OverflowError, OSError):
                pass
        return self._fallback.month_index(position, length, fields)
