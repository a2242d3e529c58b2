"""
Request dependencies shared by the API routers.
"""

from __future__ import annotations

from fastapi import Request

from backend_suisplit.sui_rpc.gateway import Gateway


def get_gateway(request: Request) -> Gateway:
    """Dependency: the app-scoped gateway built in the lifespan handler."""
    return request.app.state.gateway
