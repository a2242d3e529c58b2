"""Sui address and type-tag helpers."""

from __future__ import annotations

import re

from backend_suisplit.suisplit_logging.logger import short_hex

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{1,64}$")
SUI_ADDRESS_HEX_LEN = 64


def is_valid_sui_address(value: str) -> bool:
    """Return True if value is a syntactically valid Sui address (0x + 1..64 hex digits)."""
    if not isinstance(value, str):
        return False
    return bool(_ADDRESS_RE.match(value.strip()))


def normalize_sui_address(value: str) -> str:
    """Lowercase and left-pad an address to the canonical 64 hex digits. Raises ValueError if invalid."""
    value = value.strip()
    if not is_valid_sui_address(value):
        raise ValueError(f"Invalid Sui address: {value!r}")
    return "0x" + value[2:].lower().zfill(SUI_ADDRESS_HEX_LEN)


def normalize_type_tag(type_tag: str) -> str:
    """
    Canonicalize the leading package address of a Move type tag.

    "0x123::sui_split::ExpenseGroup" and "0x000...0123::sui_split::ExpenseGroup"
    name the same type; only the first address is rewritten, generic
    arguments are left as they are.
    """
    if not isinstance(type_tag, str):
        return ""
    head, sep, rest = type_tag.strip().partition("::")
    if not sep or not is_valid_sui_address(head):
        return type_tag.strip()
    return normalize_sui_address(head) + sep + rest


def short_address(address: str) -> str:
    """0x1234...abcd form for logs and labels."""
    return short_hex(address)
