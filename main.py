"""
Main entrypoint: SuiSplit API server (FastAPI + uvicorn).

The gateway (live node or fixture) is chosen from settings when the app
starts and closed on shutdown. On SIGINT/SIGTERM uvicorn shuts down and the
process exits.

Env: SUI_NETWORK, SUI_RPC_URL, SUISPLIT_PACKAGE_ID, SUISPLIT_GATEWAY, API_HOST, API_PORT, etc.

Equivalent: uvicorn backend_suisplit.api_server.app:app --host 0.0.0.0 --port 5000
"""

# Configure structured JSON logging before other imports that may log
from backend_suisplit.suisplit_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Run the FastAPI server in the main thread."""
    from backend_suisplit.config import get_settings

    settings = get_settings()

    from backend_suisplit.api_server.app import app
    import uvicorn

    logger.info(
        "main_server_starting",
        host=settings.api_host,
        port=settings.api_port,
        gateway=settings.gateway_mode,
        rpc_url=settings.sui_rpc_url,
    )
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level)


if __name__ == "__main__":
    main()
