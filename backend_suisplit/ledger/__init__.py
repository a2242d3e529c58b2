"""
Ledger package — expense-group discovery, parsing and aggregation.

Pipeline per refresh: ObjectDiscoverer -> parse -> aggregate, driven by
DashboardPipeline for a wallet session or DashboardReporter for an address.
"""

from backend_suisplit.ledger.aggregator import aggregate, error_report
from backend_suisplit.ledger.discovery import ObjectDiscoverer
from backend_suisplit.ledger.models import (
    AggregateReport,
    DashboardReport,
    EmptyPolicy,
    Expense,
    MonthlyExpensePoint,
    ParsedGroup,
    Participant,
    ParticipantDebt,
)
from backend_suisplit.ledger.parser import parse, parse_batch
from backend_suisplit.ledger.pipeline import DashboardPipeline, DashboardReporter
from backend_suisplit.ledger.temporal import PositionalMonthKey, TimestampMonthKey

__all__ = [
    "AggregateReport",
    "DashboardPipeline",
    "DashboardReport",
    "DashboardReporter",
    "EmptyPolicy",
    "Expense",
    "MonthlyExpensePoint",
    "ObjectDiscoverer",
    "ParsedGroup",
    "Participant",
    "ParticipantDebt",
    "PositionalMonthKey",
    "TimestampMonthKey",
    "aggregate",
    "error_report",
    "parse",
    "parse_batch",
]
