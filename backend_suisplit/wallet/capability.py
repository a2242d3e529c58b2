"""
Wallet capabilities — where a session gets its address from.

Signing and key management live in the user's wallet, outside this
service; a capability only has to hand back the connected account address
(possibly after user interaction).
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from backend_suisplit.core.exceptions import WalletConnectionError


class WalletCapability(Protocol):
    async def request_address(self) -> str:
        """Ask the wallet for its active account address. May wait on the user."""
        ...


class StaticWalletCapability:
    """Always approves with a fixed address; for fixture mode, the CLI and tests."""

    def __init__(self, address: str, *, delay_sec: float = 0.0) -> None:
        self.address = address
        self.delay_sec = delay_sec

    async def request_address(self) -> str:
        if self.delay_sec > 0:
            await asyncio.sleep(self.delay_sec)
        return self.address


class RejectingWalletCapability:
    """Wallet that refuses every request (user rejected, extension missing)."""

    def __init__(self, reason: str = "User rejected the connection request") -> None:
        self.reason = reason

    async def request_address(self) -> str:
        raise WalletConnectionError(self.reason)
