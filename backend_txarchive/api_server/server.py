"""
FastAPI server — wallet transaction snapshots.

Exposes GET /transactions/{address}: fetches the wallet's latest transactions
from Solana RPC, writes them to a snapshot file and returns them. Every
failure is reported to the client as the same generic 500; the log carries
the actual error type.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from functools import partial
from typing import Any

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from backend_txarchive import __version__
from backend_txarchive.api_server.middleware import FixedWindowRateLimiter, RateLimitMiddleware
from backend_txarchive.config import Settings, get_settings
from backend_txarchive.fetcher import ResponseStore, TransactionFetcher
from backend_txarchive.gateway import ConnectionCell, connect
from backend_txarchive.txarchive_logging import configure_logging, get_logger, short_wallet

logger = get_logger(__name__)

INTERNAL_ERROR_BODY = {"error": "Internal server error"}


# -----------------------------------------------------------------------------
# Response models
# -----------------------------------------------------------------------------

class TransactionsResponse(BaseModel):
    """GET /transactions/{address} response: snapshot file name and its records."""

    message: str = Field(..., description="Where the snapshot was saved")
    transactions: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Resolved transactions, newest first, identical to the snapshot file",
    )


class ErrorResponse(BaseModel):
    error: str


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------

def get_fetcher(request: Request) -> TransactionFetcher:
    """Dependency: the app-scoped fetcher built in create_app()."""
    return request.app.state.fetcher


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------

def create_app(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Build the ASGI app with its own connection cell, snapshot store and rate limiter.

    transport is handed to httpx (tests pass httpx.MockTransport).
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)

    connector = partial(
        connect,
        settings.rpc_url,
        settings.connect_max_attempts,
        retry_delay_sec=settings.connect_retry_delay_sec,
        commitment=settings.commitment,
        timeout_sec=settings.rpc_timeout_sec,
        transport=transport,
    )
    cell = ConnectionCell(connector)
    fetcher = TransactionFetcher(
        cell,
        ResponseStore(settings.responses_dir),
        signature_limit=settings.signature_limit,
        max_concurrency=settings.max_concurrency,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "api_started",
            responses_dir=str(settings.responses_dir),
            rate_limit_max=settings.rate_limit_max,
            rate_limit_window_sec=settings.rate_limit_window_sec,
        )
        yield
        await cell.aclose()
        logger.info("api_stopped")

    app = FastAPI(
        title="Backend TxArchive API",
        description="Fetch and archive the latest Solana transactions of a wallet.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.connection = cell
    app.state.fetcher = fetcher
    app.state.rate_limiter = FixedWindowRateLimiter(
        settings.rate_limit_max,
        settings.rate_limit_window_sec,
    )
    app.add_middleware(RateLimitMiddleware, limiter=app.state.rate_limiter)

    app.add_api_route(
        "/transactions/{address}",
        get_transactions,
        methods=["GET"],
        response_model=TransactionsResponse,
        responses={500: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
    )
    app.add_api_route("/health", health, methods=["GET"])
    return app


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------

async def get_transactions(
    address: str,
    fetcher: TransactionFetcher = Depends(get_fetcher),
):
    """
    Fetch the wallet's latest transactions, save them to a snapshot file and return them.

    Invalid address, RPC and filesystem failures all return 500 with a generic body.
    """
    try:
        result = await fetcher.fetch(address)
    except Exception as e:
        logger.exception(
            "transactions_request_failed",
            wallet_id=short_wallet(address),
            error_type=type(e).__name__,
            error=str(e),
        )
        return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)

    return TransactionsResponse(
        message=f"Transactions saved to file: {result.filename}",
        transactions=result.records,
    )


def health() -> dict[str, str]:
    """Liveness check: API is up (does not touch the RPC node)."""
    return {"status": "ok"}
