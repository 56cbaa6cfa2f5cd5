"""
Main entrypoint: FastAPI server for wallet transaction snapshots.

Env (or .env): SOLANA_RPC_URL, RESPONSES_DIR, API_HOST, API_PORT, RATE_LIMIT_MAX,
RATE_LIMIT_WINDOW_SEC, LOG_LEVEL, LOG_FORMAT, etc. (see backend_txarchive.config).

Equivalent: uvicorn backend_txarchive.api_server.app:app --host 0.0.0.0 --port 3000
"""

from backend_txarchive.txarchive_logging import configure_logging, get_logger

logger = get_logger("main")


def main() -> None:
    """Load settings, configure logging and run the API server in the main thread."""
    from backend_txarchive.config import get_settings
    from backend_txarchive.config.env import mask_rpc_url
    from backend_txarchive.api_server.server import create_app
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    app = create_app(settings)

    logger.info(
        "main_server_starting",
        host=settings.api_host,
        port=settings.api_port,
        rpc_url=mask_rpc_url(settings.rpc_url),
    )
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
