"""
Environment variable loading and validation for SuiSplit.

- SUI_NETWORK: devnet | testnet | mainnet (default: devnet)
- SUI_RPC_URL: full node endpoint; overrides the network default
- SUISPLIT_PACKAGE_ID: published sui_split Move package address
- SUISPLIT_GATEWAY: real | fixture (default: real)
- SUISPLIT_FIXTURE_PATH: JSON fixture for the fixture gateway
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_suisplit/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

NETWORK_RPC_URLS = {
    "devnet": "https://fullnode.devnet.sui.io:443",
    "testnet": "https://fullnode.testnet.sui.io:443",
    "mainnet": "https://fullnode.mainnet.sui.io:443",
}

# Placeholder until the sui_split package is published; override with SUISPLIT_PACKAGE_ID.
DEFAULT_PACKAGE_ID = "0x123"
MOVE_MODULE = "sui_split"
EXPENSE_GROUP_STRUCT = "ExpenseGroup"

GATEWAY_REAL = "real"
GATEWAY_FIXTURE = "fixture"


def load_suisplit_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    load_dotenv(_ENV_PATH)


def get_sui_network() -> str:
    """
    Return SUI_NETWORK from env: devnet | testnet | mainnet.
    Unknown values fall back to devnet.
    """
    load_suisplit_env()
    raw = (os.getenv("SUI_NETWORK") or "devnet").strip().lower()
    if raw in NETWORK_RPC_URLS:
        return raw
    return "devnet"


def get_sui_rpc_url() -> str:
    """
    Resolve the Sui full node URL.
    Order: SUI_RPC_URL > network default.
    """
    load_suisplit_env()
    url = (os.getenv("SUI_RPC_URL") or "").strip()
    if url:
        return url
    return NETWORK_RPC_URLS[get_sui_network()]


def get_package_id() -> str:
    """Return SUISPLIT_PACKAGE_ID from env, or the placeholder default."""
    load_suisplit_env()
    return (os.getenv("SUISPLIT_PACKAGE_ID") or "").strip() or DEFAULT_PACKAGE_ID


def get_gateway_mode() -> str:
    """
    Return which gateway to build at startup: real (live node) or fixture.
    Set SUISPLIT_GATEWAY=fixture when no node is reachable.
    """
    load_suisplit_env()
    raw = (os.getenv("SUISPLIT_GATEWAY") or GATEWAY_REAL).strip().lower()
    if raw in ("fixture", "mock", "dummy"):
        return GATEWAY_FIXTURE
    return GATEWAY_REAL


def get_fixture_path() -> Path:
    """Return path to the fixture dataset used by the fixture gateway."""
    load_suisplit_env()
    raw = (os.getenv("SUISPLIT_FIXTURE_PATH") or "").strip()
    if raw:
        return Path(raw)
    return _BACKEND_DIR / "data" / "fixture" / "owned_objects.json"


def expense_group_type(package_id: str) -> str:
    """Fully-qualified Move type of the expense-group struct for a package."""
    return f"{package_id}::{MOVE_MODULE}::{EXPENSE_GROUP_STRUCT}"


def move_target(package_id: str, function: str) -> str:
    """MoveCall target string for a sui_split entry function."""
    return f"{package_id}::{MOVE_MODULE}::{function}"
