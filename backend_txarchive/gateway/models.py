"""
Data models for gateway output.

SignatureInfo is one getSignaturesForAddress item; Resolution is the tagged
outcome of resolving one signature into a full transaction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

RESOLVED = "resolved"
NOT_FOUND = "not_found"
FAILED = "failed"


@dataclass(frozen=True)
class SignatureInfo:
    """
    Normalized transaction signature info from getSignaturesForAddress.

    Mirrors the Solana RPC response fields.
    """

    signature: str
    slot: int
    err: Any  # None if success; dict from RPC if the transaction failed on-chain
    block_time: int | None  # Unix timestamp; None if not available
    memo: str | None
    confirmation_status: str | None  # processed | confirmed | finalized

    @classmethod
    def from_rpc_item(cls, item: dict[str, Any]) -> "SignatureInfo":
        """Build from a single getSignaturesForAddress result item."""
        return cls(
            signature=item["signature"],
            slot=int(item["slot"]),
            err=item.get("err"),
            block_time=item.get("blockTime"),
            memo=item.get("memo"),
            confirmation_status=item.get("confirmationStatus"),
        )


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of resolving one signature.

    status is RESOLVED (record set), NOT_FOUND (RPC returned null) or
    FAILED (reason holds the error). Only RESOLVED entries end up in a snapshot.
    """

    signature: str
    status: str
    record: dict[str, Any] | None = None
    reason: str | None = None

    @classmethod
    def resolved(cls, signature: str, record: dict[str, Any]) -> "Resolution":
        return cls(signature=signature, status=RESOLVED, record=record)

    @classmethod
    def not_found(cls, signature: str) -> "Resolution":
        return cls(signature=signature, status=NOT_FOUND, reason="transaction not found")

    @classmethod
    def failed(cls, signature: str, reason: str) -> "Resolution":
        return cls(signature=signature, status=FAILED, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status == RESOLVED
