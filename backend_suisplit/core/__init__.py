"""
Core utilities — exceptions shared by the gateway, wallet session, ledger and API server.
"""

from backend_suisplit.core.exceptions import (
    DiscoveryError,
    SuiSplitError,
    TransportError,
    UpstreamRpcError,
    ValidationError,
    WalletConnectionError,
)

__all__ = [
    "DiscoveryError",
    "SuiSplitError",
    "TransportError",
    "UpstreamRpcError",
    "ValidationError",
    "WalletConnectionError",
]
