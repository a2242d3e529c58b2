"""
FastAPI server — query relay between the dashboard and a Sui full node.

Forwards object, expense-group, owned-objects and balance queries to the
configured node (or the fixture gateway) and normalizes every failure to
``500 {"error": message}``. No authentication: this is a read relay, not a
custodial signer. Config via env (see backend_suisplit.config).
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from backend_suisplit import __version__
from backend_suisplit.api_server.dashboard import router as dashboard_router
from backend_suisplit.api_server.deps import get_gateway
from backend_suisplit.api_server.middleware import add_cors, add_request_logging
from backend_suisplit.config import get_settings
from backend_suisplit.core.exceptions import SuiSplitError, UpstreamRpcError, ValidationError
from backend_suisplit.sui_rpc.gateway import CREATE_INPUT_ERROR, Gateway, build_gateway, mist_to_sui
from backend_suisplit.suisplit_logging import get_logger

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Response models
# -----------------------------------------------------------------------------

class PingResponse(BaseModel):
    """GET /api/test response."""

    message: str


class CreateExpenseGroupResponse(BaseModel):
    """POST /api/create-expense-group response: dry-run result from the node."""

    success: bool = True
    result: Any = Field(None, description="Upstream dry-run result, verbatim")


class BalanceResponse(BaseModel):
    """GET /api/balance/{address} response."""

    address: str
    total_balance: str = Field(..., description="Raw balance in MIST")
    balance_sui: float = Field(..., description="Balance in SUI, 2 decimals")


class HealthResponse(BaseModel):
    status: str
    gateway: str


# -----------------------------------------------------------------------------
# Lifespan: one gateway (and its HTTP connection pool) per app
# -----------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the gateway selected by settings on startup; close it on shutdown."""
    settings = get_settings()
    if getattr(app.state, "gateway", None) is None:
        app.state.gateway = build_gateway(settings)
    logger.info(
        "api_started",
        gateway=settings.gateway_mode,
        network=settings.sui_network,
        package_id=settings.package_id,
    )
    yield
    gateway = app.state.gateway
    app.state.gateway = None
    await gateway.aclose()
    logger.info("api_stopped")


# -----------------------------------------------------------------------------
# App and routes
# -----------------------------------------------------------------------------

app = FastAPI(
    title="Backend SuiSplit API",
    description="JSON-RPC relay and expense-group dashboard aggregation over a Sui full node.",
    version=__version__,
    lifespan=lifespan,
)

add_cors(app, get_settings().frontend_origin)
add_request_logging(app)

app.include_router(dashboard_router, prefix="/api", tags=["Dashboard"])


@app.get("/api/test", response_model=PingResponse)
def api_test() -> PingResponse:
    """Connectivity check used by the dashboard's "Ping Backend" button."""
    return PingResponse(message="SuiSplit backend is working!")


@app.get("/api/object/{object_id}")
async def get_object(object_id: str, gateway: Gateway = Depends(get_gateway)) -> Any:
    """Return the node's sui_getObject result verbatim."""
    return await gateway.get_object(object_id)


@app.get("/api/expense-group/{group_id}")
async def get_expense_group(group_id: str, gateway: Gateway = Depends(get_gateway)) -> Any:
    """Return the dry-run result of the contract's get_expense_group read, verbatim."""
    return await gateway.query_expense_group(group_id)


@app.post("/api/create-expense-group", response_model=CreateExpenseGroupResponse)
async def create_expense_group(
    request: Request,
    gateway: Gateway = Depends(get_gateway),
) -> CreateExpenseGroupResponse:
    """
    Simulate creating an expense group. Body: {"creator": str, "participants": [str, ...]}.

    The body is read by hand so that any malformed input yields the same
    ``{"error": ...}`` contract as upstream failures.
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        raise ValidationError(CREATE_INPUT_ERROR)
    result = await gateway.create_expense_group(payload.get("creator"), payload.get("participants"))
    return CreateExpenseGroupResponse(success=True, result=result)


@app.get("/api/owned-objects/{address}")
async def get_owned_objects(address: str, gateway: Gateway = Depends(get_gateway)) -> list[dict[str, Any]]:
    """All objects owned by an address (every page), verbatim."""
    return await gateway.get_owned_objects(address)


@app.get("/api/balance/{address}", response_model=BalanceResponse)
async def get_balance(address: str, gateway: Gateway = Depends(get_gateway)) -> BalanceResponse:
    """SUI balance for an address."""
    result = await gateway.get_balance(address)
    total = str(result.get("totalBalance") or "0") if isinstance(result, dict) else "0"
    try:
        balance = mist_to_sui(total)
    except ArithmeticError as e:
        raise UpstreamRpcError(f"Malformed balance from node: {total}") from e
    return BalanceResponse(address=address, total_balance=total, balance_sui=float(balance))


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Liveness probe: API is up."""
    return HealthResponse(status="ok", gateway=get_settings().gateway_mode)


@app.exception_handler(SuiSplitError)
def suisplit_error_handler(request: Request, exc: SuiSplitError) -> JSONResponse:
    """Normalized error contract: 500 {"error": message} for every SuiSplit failure."""
    logger.warning(
        "api_request_failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=exc.message,
    )
    return JSONResponse(status_code=500, content={"error": exc.message})
