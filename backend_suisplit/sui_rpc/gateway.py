"""
RPC gateway — the query operations the dashboard and HTTP API need.

Each operation is a pass-through to one JSON-RPC method on the configured
node. Reads and dry-run simulations only, so every call is idempotent and
safe to retry; nothing is cached. Input is validated locally before any
network round trip.
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal
from typing import Any, Protocol, Sequence

from backend_suisplit.config.env import GATEWAY_FIXTURE, move_target
from backend_suisplit.config.settings import Settings
from backend_suisplit.core.exceptions import UpstreamRpcError, ValidationError
from backend_suisplit.suisplit_logging import get_logger
from backend_suisplit.sui_rpc.client import SuiRpcClient
from backend_suisplit.utils.wallet_utils import is_valid_sui_address, short_address

logger = get_logger(__name__)

SUI_COIN_TYPE = "0x2::sui::SUI"
MIST_PER_SUI = 1_000_000_000

CREATE_INPUT_ERROR = "Invalid input: creator and participants are required"

METHOD_GET_OBJECT = "sui_getObject"
METHOD_DRY_RUN = "sui_dryRunTransactionBlock"
METHOD_OWNED_OBJECTS = "suix_getOwnedObjects"
METHOD_GET_BALANCE = "suix_getBalance"

OBJECT_OPTIONS = {"showType": True, "showContent": True}


def mist_to_sui(total_balance: Any) -> Decimal:
    """MIST amount (u64 string or int) to SUI, rounded to cents. Raises ArithmeticError if unparseable."""
    mist = Decimal(str(total_balance if total_balance is not None else "0").strip() or "0")
    return (mist / MIST_PER_SUI).quantize(Decimal("0.01"), rounding=ROUND_HALF_EVEN)


class Gateway(Protocol):
    """Structural interface shared by the live node gateway and the fixture gateway."""

    async def get_object(self, object_id: str) -> Any: ...

    async def query_expense_group(self, group_id: str) -> Any: ...

    async def create_expense_group(self, creator: Any, participants: Any) -> Any: ...

    async def get_owned_objects(self, address: str) -> list[dict[str, Any]]: ...

    async def get_balance(self, address: str, coin_type: str = SUI_COIN_TYPE) -> Any: ...

    async def aclose(self) -> None: ...


def require_id(value: Any, label: str) -> str:
    """Return the stripped id or raise ValidationError when empty."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid input: {label} is required")
    return value.strip()


def require_address(value: Any) -> str:
    address = require_id(value, "address")
    if not is_valid_sui_address(address):
        raise ValidationError(f"Invalid Sui address: {address}")
    return address


def validate_create_request(creator: Any, participants: Any) -> tuple[str, list[str]]:
    """
    Check a create-expense-group request: non-empty creator string and a
    non-empty list of participant strings. Raises ValidationError otherwise.
    """
    if not isinstance(creator, str) or not creator.strip():
        raise ValidationError(CREATE_INPUT_ERROR)
    if not isinstance(participants, list) or not participants:
        raise ValidationError(CREATE_INPUT_ERROR)
    if not all(isinstance(p, str) and p.strip() for p in participants):
        raise ValidationError(CREATE_INPUT_ERROR)
    return creator.strip(), [p.strip() for p in participants]


def move_call_block(target: str, arguments: Sequence[Any]) -> dict[str, Any]:
    """Transaction block simulating a single MoveCall."""
    return {
        "kind": "TransactionKind",
        "transactions": [
            {
                "kind": "MoveCall",
                "target": target,
                "arguments": list(arguments),
                "typeArguments": [],
            }
        ],
    }


class SuiGateway:
    """Gateway backed by a live Sui full node."""

    def __init__(
        self,
        rpc: SuiRpcClient,
        *,
        package_id: str,
        page_limit: int = 50,
        max_pages: int = 20,
    ) -> None:
        if page_limit <= 0 or max_pages <= 0:
            raise ValueError("page_limit and max_pages must be positive")
        self._rpc = rpc
        self._package_id = package_id
        self._page_limit = page_limit
        self._max_pages = max_pages

    async def get_object(self, object_id: str) -> Any:
        object_id = require_id(object_id, "object id")
        return await self._rpc.call(METHOD_GET_OBJECT, [object_id, dict(OBJECT_OPTIONS)])

    async def query_expense_group(self, group_id: str) -> Any:
        group_id = require_id(group_id, "group id")
        block = move_call_block(move_target(self._package_id, "get_expense_group"), [group_id])
        return await self._rpc.call(METHOD_DRY_RUN, [block])

    async def create_expense_group(self, creator: Any, participants: Any) -> Any:
        creator, participants = validate_create_request(creator, participants)
        block = move_call_block(
            move_target(self._package_id, "create_expense_group"),
            [creator, participants],
        )
        logger.info(
            "gateway_create_expense_group",
            creator=short_address(creator),
            participant_count=len(participants),
        )
        return await self._rpc.call(METHOD_DRY_RUN, [block])

    async def get_owned_objects(self, address: str) -> list[dict[str, Any]]:
        """All objects owned by address, in the order the node pages them out."""
        address = require_address(address)
        query = {"filter": None, "options": dict(OBJECT_OPTIONS)}
        items: list[dict[str, Any]] = []
        cursor: str | None = None
        for _ in range(self._max_pages):
            result = await self._rpc.call(
                METHOD_OWNED_OBJECTS, [address, query, cursor, self._page_limit]
            )
            if not isinstance(result, dict):
                raise UpstreamRpcError(f"Malformed {METHOD_OWNED_OBJECTS} result")
            page = result.get("data") or []
            items.extend(item for item in page if isinstance(item, dict))
            cursor = result.get("nextCursor")
            if not result.get("hasNextPage") or not cursor:
                break
        else:
            logger.warning(
                "gateway_owned_objects_truncated",
                address=short_address(address),
                max_pages=self._max_pages,
                object_count=len(items),
            )
        return items

    async def get_balance(self, address: str, coin_type: str = SUI_COIN_TYPE) -> Any:
        address = require_address(address)
        return await self._rpc.call(METHOD_GET_BALANCE, [address, coin_type])

    async def aclose(self) -> None:
        await self._rpc.aclose()


def build_gateway(settings: Settings, **client_kwargs: Any) -> Gateway:
    """
    Select the gateway at startup: fixture data or the configured live node.

    client_kwargs are forwarded to SuiRpcClient (e.g. transport= in tests).
    """
    if settings.gateway_mode == GATEWAY_FIXTURE:
        from backend_suisplit.sui_rpc.fixture import FixtureGateway

        logger.info("gateway_selected", mode="fixture", path=str(settings.fixture_path))
        return FixtureGateway.from_file(settings.fixture_path, package_id=settings.package_id)

    logger.info("gateway_selected", mode="real", rpc_url=settings.sui_rpc_url)
    rpc = SuiRpcClient(
        settings.sui_rpc_url,
        timeout_sec=settings.rpc_timeout_sec,
        **client_kwargs,
    )
    return SuiGateway(
        rpc,
        package_id=settings.package_id,
        page_limit=settings.owned_objects_page_limit,
        max_pages=settings.owned_objects_max_pages,
    )
