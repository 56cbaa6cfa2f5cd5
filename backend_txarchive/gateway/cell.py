"""
Lazily-initialized shared RPC connection.

ConnectionCell owns the single RpcConnection of an application. The first
get() bootstraps it through connect(); later calls return the same handle.
A failed bootstrap leaves the cell empty, so the next request tries again.
Once set, the handle is reused as-is until aclose().
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from backend_txarchive.gateway.connection import RpcConnection
from backend_txarchive.txarchive_logging import get_logger

logger = get_logger(__name__)

Connector = Callable[[], Awaitable[RpcConnection]]


class ConnectionCell:
    """Once-initialized holder for an RpcConnection."""

    def __init__(self, connector: Connector) -> None:
        self._connector = connector
        self._conn: RpcConnection | None = None
        self._lock = asyncio.Lock()

    @property
    def is_set(self) -> bool:
        return self._conn is not None

    async def get(self) -> RpcConnection:
        if self._conn is not None:
            return self._conn
        async with self._lock:
            # Another request may have finished the bootstrap while we waited
            if self._conn is None:
                logger.info("gateway_bootstrap_started")
                self._conn = await self._connector()
            return self._conn

    async def aclose(self) -> None:
        async with self._lock:
            conn, self._conn = self._conn, None
        if conn is not None:
            await conn.aclose()
            logger.info("gateway_connection_closed")
