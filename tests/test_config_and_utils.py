"""
Tests for settings resolution and Sui address helpers.
"""

from __future__ import annotations

import pytest

from backend_suisplit.config import get_settings
from backend_suisplit.utils.wallet_utils import (
    is_valid_sui_address,
    normalize_sui_address,
    normalize_type_tag,
    short_address,
)


def test_default_settings():
    settings = get_settings()
    assert settings.gateway_mode == "fixture"
    assert settings.sui_network == "devnet"
    assert settings.sui_rpc_url == "https://fullnode.devnet.sui.io:443"
    assert settings.package_id == "0x123"
    assert settings.expense_group_type == "0x123::sui_split::ExpenseGroup"
    assert settings.frontend_origin == "http://localhost:5173"
    assert settings.empty_policy == "sentinel"
    assert settings.fixture_path.name == "owned_objects.json"


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("SUI_NETWORK", "testnet")
    monkeypatch.setenv("SUISPLIT_PACKAGE_ID", "0xfeed")
    monkeypatch.setenv("SUISPLIT_RPC_TIMEOUT_SEC", "2.5")
    monkeypatch.setenv("SUISPLIT_OWNED_PAGE_LIMIT", "10")
    monkeypatch.setenv("SUISPLIT_GATEWAY", "REAL")
    get_settings.cache_clear()
    settings = get_settings()
    assert settings.sui_rpc_url == "https://fullnode.testnet.sui.io:443"
    assert settings.expense_group_type == "0xfeed::sui_split::ExpenseGroup"
    assert settings.rpc_timeout_sec == 2.5
    assert settings.owned_objects_page_limit == 10
    assert settings.gateway_mode == "real"


def test_rpc_url_override_wins(monkeypatch):
    monkeypatch.setenv("SUI_NETWORK", "mainnet")
    monkeypatch.setenv("SUI_RPC_URL", "http://127.0.0.1:9000")
    get_settings.cache_clear()
    assert get_settings().sui_rpc_url == "http://127.0.0.1:9000"


def test_invalid_settings(monkeypatch):
    monkeypatch.setenv("SUISPLIT_EMPTY_POLICY", "sometimes")
    get_settings.cache_clear()
    with pytest.raises(ValueError, match="SUISPLIT_EMPTY_POLICY"):
        get_settings()
    monkeypatch.setenv("SUISPLIT_EMPTY_POLICY", "")
    monkeypatch.setenv("SUISPLIT_OWNED_MAX_PAGES", "0")
    get_settings.cache_clear()
    with pytest.raises(ValueError, match="SUISPLIT_OWNED_MAX_PAGES"):
        get_settings()


@pytest.mark.parametrize(
    "address,valid",
    [
        ("0x1", True),
        ("0xABC", True),
        ("0x" + "f" * 64, True),
        ("0x" + "f" * 65, False),
        ("0x", False),
        ("abc", False),
        ("0xzz", False),
        ("", False),
        (None, False),
    ],
)
def test_is_valid_sui_address(address, valid):
    assert is_valid_sui_address(address) is valid


def test_normalize_sui_address():
    assert normalize_sui_address("0xABC") == "0x" + "0" * 61 + "abc"
    with pytest.raises(ValueError):
        normalize_sui_address("nope")


def test_normalize_type_tag_pads_package():
    padded = "0x" + "123".rjust(64, "0") + "::sui_split::ExpenseGroup"
    assert normalize_type_tag("0x123::sui_split::ExpenseGroup") == padded
    assert normalize_type_tag(padded) == padded


def test_short_address():
    assert short_address("0x" + "a" * 64).startswith("0xaaaa")
    assert len(short_address("0x" + "a" * 64)) < 66
