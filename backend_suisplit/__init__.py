"""
Backend SuiSplit — on-chain ledger aggregation for a bill-splitting dashboard.

Connects a Sui wallet, discovers the ExpenseGroup objects it owns, parses
participants and expenses out of them and aggregates per-participant debts
and monthly expense totals. A FastAPI gateway relays JSON-RPC queries to a
Sui full node for the front end.
"""

__version__ = "0.1.0"
