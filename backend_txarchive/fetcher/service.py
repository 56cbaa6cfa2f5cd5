"""
Transaction fetcher — wallet address in, snapshot file and records out.

Pipeline per request:
  validate address -> shared connection -> getSignaturesForAddress (<= limit)
  -> getTransaction for each signature (bounded concurrency)
  -> keep resolved records in signature order -> write snapshot -> return.

Only per-signature failures are tolerated; they become failed Resolutions.
Everything else propagates to the caller.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from solders.pubkey import Pubkey

from backend_txarchive.core.exceptions import InvalidAddressError, ResolutionError
from backend_txarchive.fetcher.storage import ResponseStore
from backend_txarchive.gateway.cell import ConnectionCell
from backend_txarchive.gateway.connection import RpcConnection
from backend_txarchive.gateway.models import Resolution, SignatureInfo
from backend_txarchive.txarchive_logging import get_logger, short_wallet

logger = get_logger(__name__)

DEFAULT_SIGNATURE_LIMIT = 10
DEFAULT_MAX_CONCURRENCY = 10


def parse_address(raw: str) -> Pubkey:
    """Parse a base58 wallet address. Raises InvalidAddressError on malformed input."""
    value = (raw or "").strip()
    if not value:
        raise InvalidAddressError(raw)
    try:
        return Pubkey.from_string(value)
    except Exception as e:
        raise InvalidAddressError(raw) from e


@dataclass
class FetchResult:
    """Snapshot of one request: file written and the records it contains."""

    address: str
    filename: str
    records: list[dict[str, Any]]
    resolutions: list[Resolution] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.resolutions if not r.ok)


class TransactionFetcher:
    """Fetches, filters and persists the latest transactions of a wallet."""

    def __init__(
        self,
        connection: ConnectionCell,
        store: ResponseStore,
        *,
        signature_limit: int = DEFAULT_SIGNATURE_LIMIT,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        if not (1 <= signature_limit <= 1000):
            raise ValueError("signature_limit must be between 1 and 1000")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._connection = connection
        self._store = store
        self._signature_limit = signature_limit
        self._max_concurrency = max_concurrency

    async def fetch(self, account_id: str) -> FetchResult:
        pubkey = parse_address(account_id)
        address = str(pubkey)

        conn = await self._connection.get()
        signatures = await conn.get_signatures_for_address(address, limit=self._signature_limit)
        logger.info(
            "fetch_signatures_listed",
            wallet_id=short_wallet(address),
            signature_count=len(signatures),
        )

        resolutions = await self._resolve_all(conn, signatures)
        records = [r.record for r in resolutions if r.ok and r.record is not None]

        loop = asyncio.get_running_loop()
        filename = await loop.run_in_executor(None, self._store.write, address, records)

        result = FetchResult(
            address=address,
            filename=filename,
            records=records,
            resolutions=resolutions,
        )
        logger.info(
            "fetch_completed",
            wallet_id=short_wallet(address),
            filename=filename,
            record_count=len(records),
            failed_count=result.failed_count,
        )
        return result

    async def _resolve_all(
        self, conn: RpcConnection, signatures: list[SignatureInfo]
    ) -> list[Resolution]:
        """Resolve every signature; gather keeps the input order."""
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(info: SignatureInfo) -> Resolution:
            async with semaphore:
                return await self._resolve_one(conn, info.signature)

        return list(await asyncio.gather(*(_bounded(info) for info in signatures)))

    async def _resolve_one(self, conn: RpcConnection, signature: str) -> Resolution:
        try:
            record = await conn.get_transaction(signature)
        except Exception as e:
            err = ResolutionError(signature, str(e))
            logger.warning(
                "fetch_transaction_failed",
                signature=signature,
                error_type=type(e).__name__,
                error=err.reason,
            )
            return Resolution.failed(signature, err.reason)
        if record is None:
            logger.debug("fetch_transaction_not_found", signature=signature)
            return Resolution.not_found(signature)
        return Resolution.resolved(signature, record)
