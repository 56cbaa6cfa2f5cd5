"""
Pytest fixtures for TxArchive tests.

RPC traffic goes to FakeRpcNode through httpx.MockTransport; snapshots are
written under tmp_path.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from backend_txarchive.config import Settings

# Valid Solana pubkeys (base58, 32 bytes)
VALID_WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"
VALID_WALLET_2 = "7F1WzVNQ1Qpurqxxdyv3UrFQR3uoNepULVW9A4bAJ5nZ"

RPC_URL = "https://rpc.test.invalid"


def make_tx(signature: str, slot: int) -> dict[str, Any]:
    """getTransaction-like payload (encoding=json)."""
    return {
        "slot": slot,
        "blockTime": 1_700_000_000 + slot,
        "meta": {"err": None, "fee": 5000, "preBalances": [10], "postBalances": [5]},
        "transaction": {
            "signatures": [signature],
            "message": {"accountKeys": [VALID_WALLET], "instructions": []},
        },
        "version": 0,
    }


class FakeRpcNode:
    """
    Minimal Solana JSON-RPC node.

    signatures: items returned by getSignaturesForAddress (newest first).
    transactions: signature -> payload (None means "not found").
    failing: signatures whose getTransaction answers with a JSON-RPC error.
    down_for: number of upcoming requests that fail with a connection error.
    delays: signature -> seconds to wait before answering getTransaction.
    """

    def __init__(self) -> None:
        self.signatures: list[dict[str, Any]] = []
        self.transactions: dict[str, dict[str, Any] | None] = {}
        self.failing: set[str] = set()
        self.down_for = 0
        self.delays: dict[str, float] = {}
        self.calls: list[tuple[str, list[Any]]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def add_transactions(self, count: int) -> list[str]:
        sigs = [f"sig{i}" for i in range(count)]
        for i, sig in enumerate(sigs):
            slot = 1000 - i
            self.signatures.append(
                {
                    "signature": sig,
                    "slot": slot,
                    "err": None,
                    "blockTime": 1_700_000_000 + slot,
                    "memo": None,
                    "confirmationStatus": "finalized",
                }
            )
            self.transactions[sig] = make_tx(sig, slot)
        return sigs

    def methods(self) -> list[str]:
        return [m for m, _ in self.calls]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method, params = body["method"], body.get("params", [])
        self.calls.append((method, params))
        if self.down_for > 0:
            self.down_for -= 1
            raise httpx.ConnectError("connection refused", request=request)

        if method == "getLatestBlockhash":
            result: Any = {
                "context": {"slot": 1},
                "value": {"blockhash": "EkSnNWid2cvwEVnVx9aBqawnmiCNiDgp3gUdkDPTKN1N", "lastValidBlockHeight": 100},
            }
        elif method == "getSignaturesForAddress":
            result = self.signatures[: params[1]["limit"]]
        elif method == "getTransaction":
            sig = params[0]
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            try:
                await asyncio.sleep(self.delays.get(sig, 0))
            finally:
                self.in_flight -= 1
            if sig in self.failing:
                return httpx.Response(
                    200,
                    json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32005, "message": "Node is behind"}},
                )
            result = self.transactions.get(sig)
        else:
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32601, "message": "Method not found"}},
            )
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


@pytest.fixture
def rpc_node() -> FakeRpcNode:
    return FakeRpcNode()


@pytest.fixture
def responses_dir(tmp_path):
    return tmp_path / "responses"


@pytest.fixture
def settings(responses_dir) -> Settings:
    """Test settings: fake RPC URL, temp output dir, no wait between connect attempts."""
    return Settings(
        rpc_url=RPC_URL,
        connect_retry_delay_sec=0.0,
        responses_dir=responses_dir,
    )


@pytest.fixture
def client(settings, rpc_node):
    """FastAPI TestClient wired to the fake RPC node."""
    from fastapi.testclient import TestClient

    from backend_txarchive.api_server.server import create_app

    app = create_app(settings, transport=rpc_node.transport())
    with TestClient(app) as test_client:
        yield test_client
