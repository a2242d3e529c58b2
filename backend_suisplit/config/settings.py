"""
Application settings and environment configuration.

Responsibilities:
- Load configuration from environment variables and the .env file (see env.py).
- Validate settings and provide defaults for optional ones.
- Expose one typed, immutable Settings object for the gateway, wallet
  session, ledger pipeline and API server.
"""

from __future__ import annotations

import functools
import os
from dataclasses import dataclass
from pathlib import Path

from backend_suisplit.config.env import (
    expense_group_type,
    get_fixture_path,
    get_gateway_mode,
    get_package_id,
    get_sui_network,
    get_sui_rpc_url,
    load_suisplit_env,
)

DEFAULT_FRONTEND_ORIGIN = "http://localhost:5173"


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    value = float(raw)
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return value


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    value = int(raw)
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return value


@dataclass(frozen=True)
class Settings:
    """Resolved configuration; build with get_settings()."""

    sui_network: str
    sui_rpc_url: str
    package_id: str
    gateway_mode: str
    fixture_path: Path
    frontend_origin: str = DEFAULT_FRONTEND_ORIGIN
    rpc_timeout_sec: float = 15.0
    wallet_connect_timeout_sec: float = 60.0
    owned_objects_page_limit: int = 50
    owned_objects_max_pages: int = 20
    group_fetch_concurrency: int = 8
    empty_policy: str = "sentinel"
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    log_level: str = "info"

    @property
    def expense_group_type(self) -> str:
        return expense_group_type(self.package_id)


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the current application settings.

    Cached for the life of the process; tests call get_settings.cache_clear()
    after changing the environment.
    """
    load_suisplit_env()
    empty_policy = (os.getenv("SUISPLIT_EMPTY_POLICY") or "sentinel").strip().lower()
    if empty_policy not in ("sentinel", "empty"):
        raise ValueError("SUISPLIT_EMPTY_POLICY must be 'sentinel' or 'empty'")
    return Settings(
        sui_network=get_sui_network(),
        sui_rpc_url=get_sui_rpc_url(),
        package_id=get_package_id(),
        gateway_mode=get_gateway_mode(),
        fixture_path=get_fixture_path(),
        frontend_origin=(os.getenv("SUISPLIT_FRONTEND_ORIGIN") or DEFAULT_FRONTEND_ORIGIN).strip(),
        rpc_timeout_sec=_env_float("SUISPLIT_RPC_TIMEOUT_SEC", 15.0),
        wallet_connect_timeout_sec=_env_float("SUISPLIT_WALLET_TIMEOUT_SEC", 60.0),
        owned_objects_page_limit=_env_int("SUISPLIT_OWNED_PAGE_LIMIT", 50),
        owned_objects_max_pages=_env_int("SUISPLIT_OWNED_MAX_PAGES", 20),
        group_fetch_concurrency=_env_int("SUISPLIT_GROUP_FETCH_CONCURRENCY", 8),
        empty_policy=empty_policy,
        api_host=(os.getenv("API_HOST") or "0.0.0.0").strip(),
        api_port=_env_int("API_PORT", 5000),
        log_level=(os.getenv("LOG_LEVEL") or "info").strip().lower(),
    )
