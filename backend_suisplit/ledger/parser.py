"""
Ledger parser — expense-group object content to typed participants and expenses.

Purely structural and synchronous; no I/O. The contract's content is
loosely typed, so every nested access tolerates a missing key or a wrong
shape by substituting an empty list / zero amount and logging a
``ledger_parse_default`` event. One malformed group never aborts the others.

Expected shape (Sui moveObject content)::

    fields.participants.fields.contents = [{"fields": {"key": "0x..", "name": "Alice"}}, ...]
    fields.expenses.fields.contents     = [{"fields": {"amount": "1200", "participants": [0, 1]}}, ...]

Bare lists in place of the ``fields.contents`` wrapper are accepted too.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from backend_suisplit.ledger.models import ZERO, Expense, ParsedGroup, Participant
from backend_suisplit.ledger.temporal import PositionalMonthKey, TemporalKeyStrategy
from backend_suisplit.sui_rpc.models import OnChainObject
from backend_suisplit.suisplit_logging import get_logger
from backend_suisplit.utils.wallet_utils import is_valid_sui_address

logger = get_logger(__name__)

_NAME_KEYS = ("name", "value")
_ADDRESS_KEYS = ("key", "address", "addr")
_SPLIT_KEYS = ("participants", "split_among")

# Move amounts are u64
U64_MAX = 2**64 - 1


def _parse_default(object_id: str, field: str, reason: str) -> None:
    logger.debug("ledger_parse_default", object_id=object_id, field=field, reason=reason)


def _entry_fields(entry: Any) -> Mapping[str, Any]:
    """Struct fields of a vector element: entry.fields when wrapped, else the entry itself."""
    if not isinstance(entry, Mapping):
        return {}
    inner = entry.get("fields")
    if isinstance(inner, Mapping):
        return inner
    return entry


def _contents(fields: Mapping[str, Any], key: str, object_id: str) -> list[Any]:
    value = fields.get(key)
    if value is None:
        _parse_default(object_id, key, "missing")
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, Mapping):
        wrapped = value.get("fields")
        if isinstance(wrapped, Mapping) and isinstance(wrapped.get("contents"), list):
            return wrapped["contents"]
        if isinstance(value.get("contents"), list):
            return value["contents"]
    _parse_default(object_id, key, "unexpected shape")
    return []


def parse_amount(value: Any) -> Decimal | None:
    """
    Decimal from a u64 string, int, float or Decimal.

    None when the value cannot be a Move u64: unparseable, negative,
    fractional or above 2**64 - 1.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            return None
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not amount.is_finite() or amount < 0 or amount > U64_MAX:
        return None
    if amount != amount.to_integral_value():
        return None
    return Decimal(int(amount))


def _parse_participant(entry: Any, index: int) -> Participant:
    default_name = f"Participant {index + 1}"
    if isinstance(entry, str):
        entry = entry.strip()
        if is_valid_sui_address(entry):
            return Participant(name=default_name, raw_index=index, address=entry)
        return Participant(name=entry or default_name, raw_index=index)

    fields = _entry_fields(entry)
    name = ""
    for key in _NAME_KEYS:
        candidate = fields.get(key)
        if isinstance(candidate, str) and candidate.strip():
            name = candidate.strip()
            break
    address = ""
    for key in _ADDRESS_KEYS:
        candidate = fields.get(key)
        if isinstance(candidate, str) and is_valid_sui_address(candidate):
            address = candidate.strip()
            break
    return Participant(name=name or default_name, raw_index=index, address=address)


def _resolve_split(
    raw: Any,
    participants: tuple[Participant, ...],
    object_id: str,
) -> tuple[int, ...]:
    """Participant indices an expense is split among; accepts indices, names or addresses."""
    if not isinstance(raw, list):
        return ()
    by_label: dict[str, int] = {}
    for p in participants:
        by_label.setdefault(p.name, p.raw_index)
        if p.address:
            by_label.setdefault(p.address.lower(), p.raw_index)
    resolved: set[int] = set()
    for item in raw:
        if isinstance(item, bool):
            continue
        if isinstance(item, int) and 0 <= item < len(participants):
            resolved.add(item)
        elif isinstance(item, str) and item.strip().isdecimal() and int(item) < len(participants):
            resolved.add(int(item))
        elif isinstance(item, str) and (item in by_label or item.lower() in by_label):
            resolved.add(by_label.get(item, by_label.get(item.lower(), -1)))
        else:
            _parse_default(object_id, "expense.participants", f"unknown participant {item!r}")
    return tuple(sorted(i for i in resolved if i >= 0))


def _parse_group_fields(
    obj: OnChainObject,
    temporal_key: TemporalKeyStrategy,
) -> ParsedGroup:
    fields = obj.fields
    if not fields:
        _parse_default(obj.object_id, "content.fields", "missing")
        return ParsedGroup(object_id=obj.object_id)

    participants = tuple(
        _parse_participant(entry, i)
        for i, entry in enumerate(_contents(fields, "participants", obj.object_id))
    )

    raw_expenses = _contents(fields, "expenses", obj.object_id)
    length = len(raw_expenses)
    expenses: list[Expense] = []
    for i, entry in enumerate(raw_expenses):
        entry_fields = _entry_fields(entry)
        amount = parse_amount(entry_fields.get("amount"))
        if amount is None:
            _parse_default(obj.object_id, "expense.amount", f"unusable value at {i}")
            amount = ZERO
        split: tuple[int, ...] = ()
        for key in _SPLIT_KEYS:
            if key in entry_fields:
                split = _resolve_split(entry_fields[key], participants, obj.object_id)
                break
        expenses.append(
            Expense(
                amount=amount,
                month_index=temporal_key.month_index(i, length, entry_fields),
                participants=split,
            )
        )
    return ParsedGroup(object_id=obj.object_id, participants=participants, expenses=tuple(expenses))


def parse(obj: OnChainObject, *, temporal_key: TemporalKeyStrategy | None = None) -> ParsedGroup:
    """
    Extract participants and expenses from one expense-group object.

    Never raises: anything unusable becomes an empty list or a zero amount.
    """
    key = temporal_key or PositionalMonthKey()
    try:
        return _parse_group_fields(obj, key)
    except Exception as e:
        logger.exception("ledger_parse_failed", object_id=obj.object_id, error=str(e))
        return ParsedGroup(object_id=obj.object_id)


def parse_batch(
    objects: list[OnChainObject],
    *,
    temporal_key: TemporalKeyStrategy | None = None,
) -> list[ParsedGroup]:
    """Parse several objects with one temporal key so they agree on the current month."""
    key = temporal_key or PositionalMonthKey()
    return [parse(obj, temporal_key=key) for obj in objects]
