"""
Fixture gateway — the Gateway interface over in-memory data, no network.

Used when SUISPLIT_GATEWAY=fixture (no node reachable, local demos) and by
tests. Responses mimic the node's result shapes so the rest of the pipeline
cannot tell the difference. Every invocation is recorded in ``calls``.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Iterable, Mapping

from backend_suisplit.config.env import move_target
from backend_suisplit.core.exceptions import SuiSplitError
from backend_suisplit.sui_rpc.gateway import (
    SUI_COIN_TYPE,
    require_address,
    require_id,
    validate_create_request,
)
from backend_suisplit.suisplit_logging import get_logger
from backend_suisplit.utils.wallet_utils import normalize_sui_address

logger = get_logger(__name__)

_SUCCESS_EFFECTS = {"status": {"status": "success"}}


class FixtureGateway:
    """
    Gateway over fixture data.

    Args:
        owners: address -> list of object responses ({"data": {...}}) it owns.
        balances: address -> total balance in MIST.
        package_id: package used for dry-run targets.
        fail_with: when set, every call raises this error (simulates a down node).
        owned_without_content: list owned objects without ``content`` so callers
            must fetch each one with get_object.
    """

    def __init__(
        self,
        owners: Mapping[str, Iterable[Mapping[str, Any]]] | None = None,
        *,
        balances: Mapping[str, int | str] | None = None,
        package_id: str = "0x123",
        fail_with: SuiSplitError | None = None,
        owned_without_content: bool = False,
    ) -> None:
        self._owners: dict[str, list[dict[str, Any]]] = {}
        self._objects: dict[str, dict[str, Any]] = {}
        for address, items in (owners or {}).items():
            stored = [copy.deepcopy(dict(item)) for item in items]
            self._owners[normalize_sui_address(address)] = stored
            for item in stored:
                object_id = (item.get("data") or {}).get("objectId")
                if object_id:
                    self._objects[object_id] = item
        self._balances = {
            normalize_sui_address(addr): str(amount) for addr, amount in (balances or {}).items()
        }
        self._package_id = package_id
        self.fail_with = fail_with
        self.owned_without_content = owned_without_content
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    @classmethod
    def from_file(cls, path: Path, **kwargs: Any) -> "FixtureGateway":
        """Load {"owners": {...}, "balances": {...}} from a JSON file."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return cls(data.get("owners") or {}, balances=data.get("balances") or {}, **kwargs)

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if self.fail_with is not None:
            raise self.fail_with

    async def get_object(self, object_id: str) -> Any:
        self._record("get_object", object_id)
        object_id = require_id(object_id, "object id")
        item = self._objects.get(object_id)
        if item is None:
            return {"error": {"code": "notExists", "object_id": object_id}}
        return copy.deepcopy(item)

    async def query_expense_group(self, group_id: str) -> Any:
        self._record("query_expense_group", group_id)
        group_id = require_id(group_id, "group id")
        return {
            "effects": dict(_SUCCESS_EFFECTS),
            "input": {"target": move_target(self._package_id, "get_expense_group"), "arguments": [group_id]},
            "object": copy.deepcopy(self._objects.get(group_id)),
        }

    async def create_expense_group(self, creator: Any, participants: Any) -> Any:
        self._record("create_expense_group", creator, participants)
        creator, participants = validate_create_request(creator, participants)
        return {
            "effects": dict(_SUCCESS_EFFECTS),
            "input": {
                "target": move_target(self._package_id, "create_expense_group"),
                "arguments": [creator, participants],
            },
        }

    async def get_owned_objects(self, address: str) -> list[dict[str, Any]]:
        self._record("get_owned_objects", address)
        address = normalize_sui_address(require_address(address))
        items = copy.deepcopy(self._owners.get(address, []))
        if self.owned_without_content:
            for item in items:
                (item.get("data") or {}).pop("content", None)
        return items

    async def get_balance(self, address: str, coin_type: str = SUI_COIN_TYPE) -> Any:
        self._record("get_balance", address, coin_type)
        address = normalize_sui_address(require_address(address))
        return {
            "coinType": coin_type,
            "coinObjectCount": 1 if address in self._balances else 0,
            "totalBalance": self._balances.get(address, "0"),
            "lockedBalance": {},
        }

    async def aclose(self) -> None:
        logger.debug("fixture_gateway_closed", call_count=self.call_count)
