"""
Snapshot files: one pretty-printed JSON array per request.

Files are named <address>_<unix_millis>.json and are never read back or pruned.
"""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Callable

from backend_txarchive.core.exceptions import PersistenceError
from backend_txarchive.txarchive_logging import get_logger, short_wallet

logger = get_logger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class ResponseStore:
    """Writes transaction snapshots under a fixed output directory (created on demand)."""

    def __init__(self, directory: str | Path, *, clock_ms: Callable[[], int] = _now_ms) -> None:
        self._directory = Path(directory)
        self._clock_ms = clock_ms

    def filename_for(self, address: str, timestamp_ms: int) -> str:
        return f"{address}_{timestamp_ms}.json"

    def write(self, address: str, records: list[dict[str, Any]]) -> str:
        """Serialize records to a new file and return its name (not the full path)."""
        filename = self.filename_for(address, self._clock_ms())
        path = self._directory / filename
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(str(path), str(e)) from e
        logger.info(
            "snapshot_written",
            wallet_id=short_wallet(address),
            path=str(path),
            record_count=len(records),
        )
        return filename
