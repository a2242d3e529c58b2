"""
Sui JSON-RPC client — one upstream full node over HTTP.

Builds JSON-RPC 2.0 envelopes, posts them with httpx and translates every
failure into the SuiSplit error taxonomy:

- transport problems (timeout, DNS, refused connection, non-2xx status,
  non-JSON body) raise TransportError;
- an ``error`` member in the response envelope raises UpstreamRpcError.

Stateless apart from the pooled HTTP connection; never caches.
"""

from __future__ import annotations

import itertools
from typing import Any

import httpx

from backend_suisplit.core.exceptions import TransportError, UpstreamRpcError
from backend_suisplit.suisplit_logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 15.0


class SuiRpcClient:
    """
    Async JSON-RPC client bound to a single Sui full node.

    Owns its httpx.AsyncClient unless one is passed in. Close with aclose()
    or use as an async context manager.
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            rpc_url: Full node HTTP endpoint (e.g. https://fullnode.devnet.sui.io:443).
            timeout_sec: Bound on every request; expiry is a TransportError.
            client: Optional shared httpx.AsyncClient (not closed by aclose()).
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests.
        """
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        if timeout_sec <= 0:
            raise ValueError("timeout_sec must be positive")
        self._rpc_url = rpc_url.strip()
        self._timeout_sec = timeout_sec
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_sec),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )
        self._ids = itertools.count(1)

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    def build_body(self, method: str, params: list[Any]) -> dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }

    async def call(self, method: str, params: list[Any]) -> Any:
        """Perform one JSON-RPC call and return its ``result``; raise on transport or RPC error."""
        body = self.build_body(method, params)
        logger.debug("sui_rpc_call", method=method, request_id=body["id"])
        try:
            resp = await self._client.post(self._rpc_url, json=body)
            resp.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning("sui_rpc_timeout", method=method, timeout_sec=self._timeout_sec)
            raise TransportError(
                f"Sui RPC timed out after {self._timeout_sec:g}s calling {method}"
            ) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("sui_rpc_http_status", method=method, status_code=status)
            raise TransportError(f"Sui RPC returned HTTP {status} calling {method}") from e
        except httpx.HTTPError as e:
            logger.warning("sui_rpc_transport_error", method=method, error=str(e))
            raise TransportError(f"Sui RPC unreachable calling {method}: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise TransportError(f"Sui RPC returned a non-JSON body calling {method}") from e
        if not isinstance(data, dict):
            raise TransportError(f"Sui RPC returned an invalid envelope calling {method}")

        err = data.get("error")
        if err is not None:
            if isinstance(err, dict):
                message = str(err.get("message") or err)
                code = err.get("code")
            else:
                message, code = str(err), None
            logger.warning("sui_rpc_error", method=method, code=code, error=message)
            raise UpstreamRpcError(message, code=code if isinstance(code, int) else None)
        if "result" not in data:
            raise UpstreamRpcError(f"Sui RPC returned no result for {method}")
        return data["result"]

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "SuiRpcClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()
