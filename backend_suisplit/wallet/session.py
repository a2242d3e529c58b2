"""
Wallet session — connection state for one dashboard user.

Two states: Disconnected (initial) and Connected{address}. Only connect()
and disconnect() mutate it. Every transition bumps ``generation`` so an
in-flight dashboard pass can tell whether the snapshot it was issued for is
still current. State is in memory only; there is no automatic reconnect.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass
from typing import Callable

from backend_suisplit.core.exceptions import WalletConnectionError
from backend_suisplit.suisplit_logging import get_logger
from backend_suisplit.utils.wallet_utils import is_valid_sui_address, short_address
from backend_suisplit.wallet.capability import WalletCapability

logger = get_logger(__name__)

DEFAULT_CONNECT_TIMEOUT_SEC = 60.0

# notifier(level, message): toast-style user notices ("success" | "error")
Notifier = Callable[[str, str], None]
Listener = Callable[["SessionSnapshot"], None]


class SessionState(str, enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of the session handed to the discoverer and pipeline."""

    address: str
    connected: bool
    generation: int

    @property
    def state(self) -> SessionState:
        return SessionState.CONNECTED if self.connected else SessionState.DISCONNECTED


def _log_notice(level: str, message: str) -> None:
    logger.info("wallet_notice", level=level, notice=message)


class WalletSession:
    """
    Explicit session object: create on app start, close() on shutdown.

    connect() awaits the wallet capability (which may wait on the user) and
    never blocks other coroutines. Listeners are called synchronously with a
    fresh snapshot after each transition.
    """

    def __init__(
        self,
        capability: WalletCapability,
        *,
        connect_timeout_sec: float = DEFAULT_CONNECT_TIMEOUT_SEC,
        notifier: Notifier | None = None,
    ) -> None:
        if connect_timeout_sec <= 0:
            raise ValueError("connect_timeout_sec must be positive")
        self._capability = capability
        self._connect_timeout_sec = connect_timeout_sec
        self._notify = notifier or _log_notice
        self._address = ""
        self._connected = False
        self._generation = 0
        self._listeners: list[Listener] = []
        self._connect_lock = asyncio.Lock()
        self._closed = False

    @property
    def address(self) -> str:
        return self._address

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def state(self) -> SessionState:
        return SessionState.CONNECTED if self._connected else SessionState.DISCONNECTED

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(self._address, self._connected, self._generation)

    def is_current(self, snapshot: SessionSnapshot) -> bool:
        """True while no transition has happened since snapshot was taken."""
        return snapshot.generation == self._generation

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a state-change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def connect(self) -> str:
        """
        Disconnected -> Connected{address}.

        Returns the connected address. On rejection, timeout, an unavailable
        capability or a malformed address the session stays Disconnected and
        WalletConnectionError is raised. A disconnect() or close() issued while
        the wallet is still answering cancels the connection the same way.
        """
        if self._closed:
            raise WalletConnectionError("Wallet session is closed")
        async with self._connect_lock:
            if self._connected:
                return self._address
            generation = self._generation
            try:
                address = await asyncio.wait_for(
                    self._capability.request_address(),
                    timeout=self._connect_timeout_sec,
                )
            except asyncio.TimeoutError as e:
                self._fail("Wallet connection timed out")
                raise WalletConnectionError("Wallet connection timed out") from e
            except WalletConnectionError as e:
                self._fail(e.message)
                raise
            except Exception as e:
                self._fail(str(e))
                raise WalletConnectionError(f"Wallet unavailable: {e}") from e

            if self._generation != generation:
                logger.info("wallet_connect_cancelled", generation=self._generation)
                raise WalletConnectionError("Wallet connection cancelled")

            address = (address or "").strip() if isinstance(address, str) else ""
            if not is_valid_sui_address(address):
                self._fail("invalid address")
                raise WalletConnectionError("Wallet returned an invalid Sui address")

            self._address = address
            self._connected = True
            self._generation += 1
        logger.info("wallet_connected", address=short_address(address), generation=self._generation)
        self._notify("success", "Wallet connected successfully")
        self._emit()
        return address

    def disconnect(self) -> None:
        """Connected{*} -> Disconnected. Always succeeds; no network call."""
        was_connected = self._connected
        self._address = ""
        self._connected = False
        self._generation += 1
        if was_connected:
            logger.info("wallet_disconnected", generation=self._generation)
            self._notify("success", "Wallet disconnected")
        self._emit()

    def close(self) -> None:
        """Dispose the session: disconnect and drop all listeners."""
        if self._closed:
            return
        self.disconnect()
        self._listeners.clear()
        self._closed = True
        logger.info("wallet_session_closed")

    def _fail(self, reason: str) -> None:
        logger.warning("wallet_connect_failed", reason=reason)
        self._notify("error", "Failed to connect wallet")

    def _emit(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.exception("wallet_listener_failed", error=str(e))
