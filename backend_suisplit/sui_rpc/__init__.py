"""
Sui RPC package — JSON-RPC client, gateway operations and object models.

SuiGateway talks to a live full node; FixtureGateway serves the same
interface from in-memory data. build_gateway() picks one from settings.
"""

from backend_suisplit.sui_rpc.client import SuiRpcClient
from backend_suisplit.sui_rpc.fixture import FixtureGateway
from backend_suisplit.sui_rpc.gateway import Gateway, SuiGateway, build_gateway
from backend_suisplit.sui_rpc.models import ExpenseGroupObject, OnChainObject

__all__ = [
    "ExpenseGroupObject",
    "FixtureGateway",
    "Gateway",
    "OnChainObject",
    "SuiGateway",
    "SuiRpcClient",
    "build_gateway",
]
