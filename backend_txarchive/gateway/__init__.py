"""
Solana RPC gateway package.

Opens and validates the connection to a Solana JSON-RPC node (with a fixed
retry budget) and keeps one shared handle per application.
"""

from backend_txarchive.gateway.cell import ConnectionCell
from backend_txarchive.gateway.connection import RpcConnection, connect
from backend_txarchive.gateway.models import Resolution, SignatureInfo

__all__ = [
    "ConnectionCell",
    "Resolution",
    "RpcConnection",
    "SignatureInfo",
    "connect",
]
