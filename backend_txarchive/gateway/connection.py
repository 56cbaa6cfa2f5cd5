"""
Solana RPC connection — JSON-RPC over httpx and bootstrap with retry.

Responsibilities:
- Wrap one httpx.AsyncClient bound to an RPC URL and commitment level.
- Expose the three calls the fetcher needs: getLatestBlockhash (liveness),
  getSignaturesForAddress and getTransaction.
- connect(): open and validate a connection, retrying a fixed number of
  times with a fixed delay before raising ConnectivityError.
"""

from __future__ import annotations

import asyncio
import itertools
from typing import Any, Awaitable, Callable

import httpx

from backend_txarchive.config.env import mask_rpc_url
from backend_txarchive.core.exceptions import ConnectivityError, RpcError
from backend_txarchive.gateway.models import SignatureInfo
from backend_txarchive.txarchive_logging import get_logger

logger = get_logger(__name__)

DEFAULT_COMMITMENT = "confirmed"
DEFAULT_TIMEOUT_SEC = 30.0
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY_SEC = 2.0
DEFAULT_SIGNATURES_LIMIT = 10


class RpcConnection:
    """
    An open session to a Solana JSON-RPC endpoint.

    Holds one httpx.AsyncClient for its lifetime. Methods raise RpcError when
    the node answers with a JSON-RPC error and let httpx.HTTPError propagate
    for transport failures.
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        commitment: str = DEFAULT_COMMITMENT,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        self._rpc_url = rpc_url.strip()
        self._commitment = commitment
        self._ids = itertools.count(1)
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_sec),
            transport=transport,
        )

    async def _call(self, method: str, params: list[Any]) -> Any:
        """Perform one JSON-RPC call; raise on transport or RPC error."""
        body = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        resp = await self._client.post(self._rpc_url, json=body)
        resp.raise_for_status()
        data = resp.json()
        if "error" in data:
            err = data["error"] or {}
            if isinstance(err, dict):
                raise RpcError(method, err.get("code"), str(err.get("message", err)))
            raise RpcError(method, None, str(err))
        return data.get("result")

    async def get_latest_blockhash(self) -> dict[str, Any]:
        """Liveness check. Returns {"blockhash": ..., "lastValidBlockHeight": ...}."""
        result = await self._call("getLatestBlockhash", [{"commitment": self._commitment}])
        if not isinstance(result, dict) or "value" not in result:
            raise RpcError("getLatestBlockhash", None, "malformed result")
        return result["value"]

    async def get_signatures_for_address(
        self, address: str, limit: int = DEFAULT_SIGNATURES_LIMIT
    ) -> list[SignatureInfo]:
        """Most recent signatures for address, newest first (RPC order)."""
        result = await self._call(
            "getSignaturesForAddress",
            [address, {"limit": limit, "commitment": self._commitment}],
        )
        if not isinstance(result, list):
            raise RpcError("getSignaturesForAddress", None, "malformed result")
        return [SignatureInfo.from_rpc_item(item) for item in result[:limit]]

    async def get_transaction(self, signature: str) -> dict[str, Any] | None:
        """Full transaction for signature, or None when the node does not know it."""
        return await self._call(
            "getTransaction",
            [
                signature,
                {
                    "encoding": "json",
                    "commitment": self._commitment,
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        )

    async def aclose(self) -> None:
        await self._client.aclose()


async def connect(
    rpc_url: str,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    *,
    retry_delay_sec: float = DEFAULT_RETRY_DELAY_SEC,
    commitment: str = DEFAULT_COMMITMENT,
    timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    transport: httpx.AsyncBaseTransport | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> RpcConnection:
    """
    Open a connection and validate it with getLatestBlockhash.

    Tries up to max_attempts times, waiting a fixed retry_delay_sec between
    attempts (no wait after the last one). Raises ConnectivityError chained
    to the last failure when every attempt fails.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    masked_url = mask_rpc_url(rpc_url)
    last_error: Exception | None = None
    for attempt in range(1, max_attempts + 1):
        conn = RpcConnection(
            rpc_url,
            commitment=commitment,
            timeout_sec=timeout_sec,
            transport=transport,
        )
        try:
            await conn.get_latest_blockhash()
        except Exception as e:
            last_error = e
            await conn.aclose()
            logger.warning(
                "gateway_connect_attempt_failed",
                rpc_url=masked_url,
                attempt=attempt,
                max_attempts=max_attempts,
                error=str(e),
            )
            if attempt < max_attempts:
                await sleep(retry_delay_sec)
            continue
        logger.info("gateway_connected", rpc_url=masked_url, attempt=attempt)
        return conn

    logger.error("gateway_connect_give_up", rpc_url=masked_url, attempts=max_attempts)
    raise ConnectivityError(masked_url, max_attempts) from last_error
