"""
Data models for Sui RPC output.

Read-only snapshots of on-chain objects as returned by sui_getObject and
suix_getOwnedObjects. Content stays a loosely-typed mapping; the ledger
parser is responsible for interpreting it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class OnChainObject:
    """
    One Sui object snapshot. Identity is object_id.

    Built from the ``{"data": {"objectId", "type", "content": {...}}}`` shape
    the node returns for both single-object and owned-object queries.
    """

    object_id: str
    type_tag: str
    content: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_rpc_item(cls, item: Any) -> "OnChainObject | None":
        """Build from one RPC object response; None when the item carries no object data."""
        if not isinstance(item, Mapping):
            return None
        data = item.get("data")
        if not isinstance(data, Mapping):
            return None
        object_id = data.get("objectId")
        if not isinstance(object_id, str) or not object_id:
            return None
        content = data.get("content")
        if not isinstance(content, Mapping):
            content = {}
        type_tag = data.get("type") or content.get("type") or ""
        return cls(object_id=object_id, type_tag=str(type_tag), content=content)

    @property
    def fields(self) -> Mapping[str, Any]:
        """Move struct fields, or an empty mapping when content was not requested or is malformed."""
        fields = self.content.get("fields")
        return fields if isinstance(fields, Mapping) else {}

    @property
    def has_content(self) -> bool:
        return bool(self.fields)


# An ExpenseGroupObject is an OnChainObject whose type_tag matched the
# expense-group contract type; the discoverer is the only producer.
ExpenseGroupObject = OnChainObject
