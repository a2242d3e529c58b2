"""
HTTP middleware — CORS for the front end and request logging with timing.
"""

from __future__ import annotations

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from backend_suisplit.suisplit_logging import get_logger

logger = get_logger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE"]
CORS_HEADERS = ["Content-Type", "Authorization"]


def add_cors(app: FastAPI, frontend_origin: str) -> None:
    """Allow cross-origin calls from the configured dashboard origin only."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[frontend_origin],
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )


def add_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def _log_request(request: Request, call_next):
        t_start = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "api_request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            total_ms=round((time.perf_counter() - t_start) * 1000, 2),
        )
        return response
