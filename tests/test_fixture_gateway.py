"""
Tests for FixtureGateway: bundled data, call recording, simulated failures.
"""

from __future__ import annotations

import asyncio

import pytest

from backend_suisplit.core.exceptions import TransportError, ValidationError
from backend_suisplit.sui_rpc.fixture import FixtureGateway
from backend_suisplit.tools.dashboard_report import FIXTURE_DEMO_ADDRESS
from tests.helpers.sui_objects import WALLET, coin_item, group_item, object_id


def _run(coro):
    return asyncio.run(coro)


def test_bundled_fixture_lists_demo_wallet_objects(fixture_gateway):
    items = _run(fixture_gateway.get_owned_objects(FIXTURE_DEMO_ADDRESS))
    types = [i["data"]["type"] for i in items]
    assert types.count("0x123::sui_split::ExpenseGroup") == 2
    assert len(items) == 3


def test_short_and_padded_addresses_are_the_same_owner():
    gateway = FixtureGateway({WALLET: [coin_item(object_id(1))]})
    padded = "0x" + "abc".rjust(64, "0")
    assert len(_run(gateway.get_owned_objects(padded))) == 1
    assert len(_run(gateway.get_owned_objects(WALLET))) == 1


def test_unknown_owner_has_no_objects_and_zero_balance():
    gateway = FixtureGateway()
    assert _run(gateway.get_owned_objects(WALLET)) == []
    balance = _run(gateway.get_balance(WALLET))
    assert balance["totalBalance"] == "0"
    assert balance["coinObjectCount"] == 0


def test_get_object_known_and_unknown():
    item = group_item(object_id(7), ["Alice"], ["10"])
    gateway = FixtureGateway({WALLET: [item]})
    assert _run(gateway.get_object(object_id(7))) == item
    missing = _run(gateway.get_object("0x99"))
    assert missing == {"error": {"code": "notExists", "object_id": "0x99"}}


def test_returned_objects_are_copies():
    gateway = FixtureGateway({WALLET: [group_item(object_id(7), ["Alice"], ["10"])]})
    first = _run(gateway.get_object(object_id(7)))
    first["data"]["objectId"] = "mutated"
    assert _run(gateway.get_object(object_id(7)))["data"]["objectId"] == object_id(7)


def test_calls_are_recorded():
    gateway = FixtureGateway()
    _run(gateway.get_owned_objects(WALLET))
    _run(gateway.get_balance(WALLET))
    assert gateway.call_count == 2
    assert [c[0] for c in gateway.calls] == ["get_owned_objects", "get_balance"]


def test_fail_with_raises_on_every_call():
    gateway = FixtureGateway(fail_with=TransportError("node down"))
    with pytest.raises(TransportError, match="node down"):
        _run(gateway.get_owned_objects(WALLET))
    with pytest.raises(TransportError):
        _run(gateway.get_object("0x1"))


def test_owned_without_content_strips_content():
    gateway = FixtureGateway({WALLET: [group_item(object_id(7), ["Alice"], ["10"])]}, owned_without_content=True)
    listed = _run(gateway.get_owned_objects(WALLET))
    assert "content" not in listed[0]["data"]
    assert "content" in _run(gateway.get_object(object_id(7)))["data"]


def test_create_validates_input():
    gateway = FixtureGateway()
    with pytest.raises(ValidationError):
        _run(gateway.create_expense_group("0xabc", []))
    result = _run(gateway.create_expense_group("0xabc", ["0xdef"]))
    assert result["effects"]["status"]["status"] == "success"
    assert result["input"]["arguments"] == ["0xabc", ["0xdef"]]
