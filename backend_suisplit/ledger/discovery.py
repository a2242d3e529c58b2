"""
Object discoverer — which expense groups does a wallet own?

One owned-objects query per pass, then an exact match of each object's
type tag against the expense-group contract type. Received order is kept;
callers must treat the result as a set.
"""

from __future__ import annotations

from backend_suisplit.core.exceptions import DiscoveryError, SuiSplitError
from backend_suisplit.sui_rpc.gateway import Gateway
from backend_suisplit.sui_rpc.models import ExpenseGroupObject, OnChainObject
from backend_suisplit.suisplit_logging import bind_address, get_logger
from backend_suisplit.utils.wallet_utils import normalize_type_tag
from backend_suisplit.wallet.session import SessionSnapshot

logger = get_logger(__name__)


def is_expense_group(obj: OnChainObject, expense_group_type: str) -> bool:
    """Exact type match, with both package addresses in canonical 64-hex form."""
    return normalize_type_tag(obj.type_tag) == normalize_type_tag(expense_group_type)


class ObjectDiscoverer:
    def __init__(self, gateway: Gateway, *, expense_group_type: str) -> None:
        if not expense_group_type.strip():
            raise ValueError("expense_group_type must be non-empty")
        self._gateway = gateway
        self._type = expense_group_type.strip()

    @property
    def expense_group_type(self) -> str:
        return self._type

    async def discover(self, snapshot: SessionSnapshot) -> list[ExpenseGroupObject]:
        """
        Expense-group objects owned by the snapshot's address.

        A disconnected snapshot yields [] without touching the gateway.
        Gateway failures raise DiscoveryError.
        """
        if not snapshot.connected or not snapshot.address:
            return []
        address = snapshot.address
        log = bind_address(logger, address)
        try:
            items = await self._gateway.get_owned_objects(address)
        except SuiSplitError as e:
            log.warning("discovery_failed", error=e.message)
            raise DiscoveryError(e.message, address=address) from e

        groups: list[ExpenseGroupObject] = []
        for item in items:
            obj = OnChainObject.from_rpc_item(item)
            if obj is not None and is_expense_group(obj, self._type):
                groups.append(obj)
        log.info(
            "discovery_complete",
            owned_count=len(items),
            group_count=len(groups),
        )
        return groups

    async def discover_soft(
        self, snapshot: SessionSnapshot
    ) -> tuple[list[ExpenseGroupObject], DiscoveryError | None]:
        """Fail-soft variant: ([], error) instead of raising."""
        try:
            return await self.discover(snapshot), None
        except DiscoveryError as e:
            return [], e
