#!/usr/bin/env python3
"""
SuiSplit dashboard report — one pipeline pass for a wallet, printed as JSON.

Connects a wallet session with a static capability (the address given on
the command line), runs discover -> parse -> aggregate through the
configured gateway and prints debts, monthly points, summary and balance.

Usage:
  py -m backend_suisplit.tools.dashboard_report --address 0x...
  py -m backend_suisplit.tools.dashboard_report --fixture   (bundled demo data)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import replace

from backend_suisplit.config import get_settings
from backend_suisplit.config.env import GATEWAY_FIXTURE
from backend_suisplit.core.exceptions import WalletConnectionError
from backend_suisplit.ledger.models import EmptyPolicy
from backend_suisplit.ledger.pipeline import DashboardPipeline, DashboardReporter
from backend_suisplit.sui_rpc.gateway import build_gateway
from backend_suisplit.suisplit_logging import get_logger
from backend_suisplit.wallet import StaticWalletCapability, WalletSession

logger = get_logger(__name__)

FIXTURE_DEMO_ADDRESS = "0x00000000000000000000000000000000000000000000000000000000c0ffee01"


def _log(msg: str) -> None:
    print(f"[dashboard_report] {msg}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print the SuiSplit dashboard report for a wallet.")
    parser.add_argument("--address", help="Sui wallet address (defaults to the fixture demo wallet with --fixture)")
    parser.add_argument("--fixture", action="store_true", help="Use the bundled fixture gateway instead of a live node")
    parser.add_argument(
        "--empty-policy",
        choices=[p.value for p in EmptyPolicy],
        help="Override SUISPLIT_EMPTY_POLICY",
    )
    return parser


async def run_report(address: str, *, fixture: bool = False, empty_policy: str | None = None) -> dict:
    """Connect, refresh once, disconnect. Returns the JSON-ready report."""
    settings = get_settings()
    if fixture:
        settings = replace(settings, gateway_mode=GATEWAY_FIXTURE)
    gateway = build_gateway(settings)
    session = WalletSession(
        StaticWalletCapability(address),
        connect_timeout_sec=settings.wallet_connect_timeout_sec,
        notifier=lambda level, message: _log(f"{level}: {message}"),
    )
    try:
        await session.connect()
        pipeline = DashboardPipeline(
            session,
            DashboardReporter(
                gateway,
                expense_group_type=settings.expense_group_type,
                empty_policy=EmptyPolicy(empty_policy or settings.empty_policy),
                fetch_concurrency=settings.group_fetch_concurrency,
            ),
        )
        report = await pipeline.refresh()
        balance = await pipeline.fetch_balance()
        out = report.to_dict() if report is not None else {"address": address, "error": "stale"}
        out["balance_sui"] = balance
        return out
    finally:
        session.close()
        await gateway.aclose()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    address = (args.address or (FIXTURE_DEMO_ADDRESS if args.fixture else "")).strip()
    if not address:
        _log("--address is required without --fixture")
        return 2
    try:
        out = asyncio.run(run_report(address, fixture=args.fixture, empty_policy=args.empty_policy))
    except WalletConnectionError as e:
        _log(f"wallet connection failed: {e}")
        return 1
    print(json.dumps(out, indent=2))
    return 0 if out.get("error") is None else 1


if __name__ == "__main__":
    raise SystemExit(main())
