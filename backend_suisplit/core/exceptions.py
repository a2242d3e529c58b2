"""
Application-level exceptions.

Every failure the gateway, wallet session or discoverer can report derives
from SuiSplitError, so the API layer can render one normalized
``{"error": message}`` body. Malformed on-chain fields are not errors: the
ledger parser substitutes defaults and logs ``ledger_parse_default``.
"""

from __future__ import annotations


class SuiSplitError(Exception):
    """Base class for all SuiSplit errors. ``message`` is safe to show to users."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(SuiSplitError):
    """Bad caller input; raised before any network call is attempted."""


class TransportError(SuiSplitError):
    """Network failure reaching the upstream node (timeout, DNS, refused, bad HTTP status)."""


class UpstreamRpcError(SuiSplitError):
    """The node answered with a JSON-RPC error envelope."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class WalletConnectionError(SuiSplitError):
    """Wallet capability unavailable, rejected by the user, timed out or returned a bad address."""


class DiscoveryError(SuiSplitError):
    """The owned-objects query for a wallet failed."""

    def __init__(self, message: str, address: str = "") -> None:
        super().__init__(message)
        self.address = address
