"""
Tests for the ledger parser and temporal keys.

The parser must never raise: malformed content degrades to empty lists
and zero amounts.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from backend_suisplit.ledger.parser import parse, parse_amount, parse_batch
from backend_suisplit.ledger.temporal import (
    PositionalMonthKey,
    TimestampMonthKey,
    current_month_index,
    month_label,
)
from backend_suisplit.sui_rpc.models import OnChainObject
from tests.helpers.sui_objects import GROUP_TYPE, expense, group_item, object_id, participant

OCT = 9


def _obj(item) -> OnChainObject:
    obj = OnChainObject.from_rpc_item(item)
    assert obj is not None
    return obj


def _raw_obj(fields) -> OnChainObject:
    return OnChainObject(object_id="0x1", type_tag=GROUP_TYPE, content={"fields": fields})


# -----------------------------------------------------------------------------
# participants
# -----------------------------------------------------------------------------


def test_participant_names_and_addresses():
    item = group_item(object_id(1), [participant("Alice", "0xa11ce"), participant(address="0xb0b")], [])
    group = parse(_obj(item), temporal_key=PositionalMonthKey(OCT))
    assert [p.name for p in group.participants] == ["Alice", "Participant 2"]
    assert [p.address for p in group.participants] == ["0xa11ce", "0xb0b"]
    assert [p.raw_index for p in group.participants] == [0, 1]


def test_bare_string_participants():
    fields = {"participants": ["Carol", "0xabc", ""], "expenses": []}
    group = parse(_raw_obj(fields))
    assert [p.name for p in group.participants] == ["Carol", "Participant 2", "Participant 3"]


def test_value_key_is_a_name():
    fields = {"participants": [{"fields": {"key": "0x1", "value": "Dora"}}], "expenses": []}
    assert parse(_raw_obj(fields)).participants[0].name == "Dora"


# -----------------------------------------------------------------------------
# amounts and months
# -----------------------------------------------------------------------------


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1200", Decimal("1200")),
        (" 15 ", Decimal("15")),
        (10, Decimal("10")),
        (10.0, Decimal("10")),
        (Decimal("3"), Decimal("3")),
        ("1e3", Decimal("1000")),
        ("18446744073709551615", Decimal("18446744073709551615")),
        ("18446744073709551616", None),
        ("100000000000000000000000000", None),
        ("1e999999", None),
        (2.5, None),
        ("12.75", None),
        (Decimal("3.25"), None),
        ("-5", None),
        ("abc", None),
        (None, None),
        (True, None),
        (float("nan"), None),
        ([1], None),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_unusable_amounts_become_zero():
    item = group_item(object_id(1), ["A"], ["ten", "-3", expense(None), "7"])
    group = parse(_obj(item), temporal_key=PositionalMonthKey(OCT))
    assert [e.amount for e in group.expenses] == [Decimal("0"), Decimal("0"), Decimal("0"), Decimal("7")]


def test_positional_months_end_at_current_month():
    item = group_item(object_id(1), ["A"], ["10", "15"])
    group = parse(_obj(item), temporal_key=PositionalMonthKey(OCT))
    assert [e.month_index for e in group.expenses] == [OCT - 1, OCT]


def test_positional_months_wrap_into_previous_year():
    item = group_item(object_id(1), ["A"], ["1", "2", "3"])
    group = parse(_obj(item), temporal_key=PositionalMonthKey(0))
    assert [month_label(e.month_index) for e in group.expenses] == ["Nov", "Dec", "Jan"]


def test_appending_an_expense_shifts_earlier_months_back_by_one():
    before = parse(_obj(group_item(object_id(1), ["A"], ["1", "2"])), temporal_key=PositionalMonthKey(3))
    after = parse(_obj(group_item(object_id(1), ["A"], ["1", "2", "3"])), temporal_key=PositionalMonthKey(3))
    assert after.expenses[-1].month_index == 3
    for old, new in zip(before.expenses, after.expenses):
        assert new.month_index == (old.month_index - 1) % 12


def test_timestamp_month_key_uses_timestamp_when_present():
    march = int(datetime(2024, 3, 15, tzinfo=timezone.utc).timestamp() * 1000)
    item = group_item(object_id(1), ["A"], [expense("5", timestamp_ms=str(march)), "6"])
    key = TimestampMonthKey(fallback=PositionalMonthKey(OCT))
    group = parse(_obj(item), temporal_key=key)
    assert group.expenses[0].month_index == 2
    assert group.expenses[1].month_index == OCT


def test_current_month_index():
    assert current_month_index(date(2026, 1, 31)) == 0
    assert current_month_index(date(2026, 12, 1)) == 11


def test_positional_key_rejects_out_of_range_month():
    with pytest.raises(ValueError):
        PositionalMonthKey(12)


def test_positional_key_reads_clock():
    key = PositionalMonthKey(clock=lambda: date(2026, 6, 1))
    assert key.month_index(0, 1, {}) == 5


# -----------------------------------------------------------------------------
# split resolution
# -----------------------------------------------------------------------------


def test_split_by_index_name_and_address():
    people = [participant("Alice", "0xa"), participant("Bob", "0xb"), participant("Cy", "0xc")]
    expenses = [
        expense("30", [0, 2]),
        expense("30", ["Bob"]),
        expense("30", ["0xC"]),
        expense("30", ["1", 7, "Nobody", True]),
        expense("30"),
    ]
    group = parse(_obj(group_item(object_id(1), people, expenses)), temporal_key=PositionalMonthKey(OCT))
    assert [e.participants for e in group.expenses] == [(0, 2), (1,), (2,), (1,), ()]


def test_split_among_key_is_accepted():
    fields = {"participants": ["A", "B"], "expenses": [{"amount": "4", "split_among": [1]}]}
    assert parse(_raw_obj(fields)).expenses[0].participants == (1,)


# -----------------------------------------------------------------------------
# malformed content
# -----------------------------------------------------------------------------


@pytest.mark.parametrize(
    "content",
    [
        {},
        {"fields": None},
        {"fields": "garbage"},
        {"fields": {"participants": 42, "expenses": "nope"}},
        {"fields": {"participants": {"fields": {"contents": None}}, "expenses": {"contents": {}}}},
        {"fields": {"participants": [None, 3, {"fields": 1}], "expenses": [None, 5, {"fields": []}]}},
    ],
)
def test_malformed_content_never_raises(content):
    obj = OnChainObject(object_id="0xbad", type_tag=GROUP_TYPE, content=content)
    group = parse(obj, temporal_key=PositionalMonthKey(OCT))
    assert group.object_id == "0xbad"
    for e in group.expenses:
        assert e.amount == Decimal("0")


def test_missing_expenses_gives_empty_list():
    group = parse(_raw_obj({"participants": ["A"]}))
    assert group.expenses == ()
    assert len(group.participants) == 1


def test_bare_contents_wrapper_is_accepted():
    fields = {"participants": {"contents": ["A"]}, "expenses": {"contents": [{"amount": 9}]}}
    group = parse(_raw_obj(fields))
    assert group.expenses[0].amount == Decimal("9")


def test_parse_batch_shares_temporal_key():
    items = [
        group_item(object_id(1), ["A"], ["1"]),
        group_item(object_id(2), ["B"], ["2", "3"]),
    ]
    groups = parse_batch([_obj(i) for i in items], temporal_key=PositionalMonthKey(OCT))
    assert [g.object_id for g in groups] == [object_id(1), object_id(2)]
    assert groups[0].expenses[-1].month_index == groups[1].expenses[-1].month_index == OCT


def test_from_rpc_item_rejects_non_objects():
    assert OnChainObject.from_rpc_item(None) is None
    assert OnChainObject.from_rpc_item({"error": {"code": "notExists"}}) is None
    assert OnChainObject.from_rpc_item({"data": {"objectId": ""}}) is None


def test_oversized_amount_defaults_to_zero_and_keeps_the_rest():
    item = group_item(object_id(1), ["Mallory"], ["100000000000000000000000000", "4"])
    group = parse(_obj(item), temporal_key=PositionalMonthKey(OCT))
    assert [p.name for p in group.participants] == ["Mallory"]
    assert [e.amount for e in group.expenses] == [Decimal("0"), Decimal("4")]


def test_non_ascii_digit_split_label_skips_only_that_label():
    """A superscript digit passes str.isdigit() but is not an index; the group must still parse."""
    item = group_item(object_id(1), ["Alice", "Bob"], ["10", expense("20", ["²", "Bob"])])
    group = parse(_obj(item), temporal_key=PositionalMonthKey(OCT))
    assert [p.name for p in group.participants] == ["Alice", "Bob"]
    assert [e.amount for e in group.expenses] == [Decimal("10"), Decimal("20")]
    assert group.expenses[1].participants == (1,)


def test_unknown_split_labels_fall_back_to_whole_group():
    item = group_item(object_id(1), ["Alice", "Bob"], [expense("20", ["²"])])
    group = parse(_obj(item), temporal_key=PositionalMonthKey(OCT))
    assert group.expenses[0].participants == ()


def test_positional_key_reads_clock_once():
    """A month rollover mid-parse must not split one group across two current months."""
    days = iter([date(2026, 10, 31), date(2026, 11, 1)])
    key = PositionalMonthKey(clock=lambda: next(days))
    item = group_item(object_id(1), ["A"], ["1", "2", "3"])
    group = parse(_obj(item), temporal_key=key)
    assert [e.month_index for e in group.expenses] == [OCT - 2, OCT - 1, OCT]
    assert key.current_month == OCT
