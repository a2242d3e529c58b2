"""
Wallet package — session state machine and wallet capabilities.
"""

from backend_suisplit.wallet.capability import (
    RejectingWalletCapability,
    StaticWalletCapability,
    WalletCapability,
)
from backend_suisplit.wallet.session import SessionSnapshot, SessionState, WalletSession

__all__ = [
    "RejectingWalletCapability",
    "SessionSnapshot",
    "SessionState",
    "StaticWalletCapability",
    "WalletCapability",
    "WalletSession",
]
