"""
Pytest fixtures for SuiSplit tests. Every test runs against the fixture
gateway with default settings; nothing reaches a real Sui node.
"""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def suisplit_env(monkeypatch):
    """
    Force fixture-gateway settings and drop overrides that a local .env may carry.
    Clears the settings cache before and after each test.
    """
    from backend_suisplit.config import get_settings

    monkeypatch.setenv("SUISPLIT_GATEWAY", "fixture")
    for name in (
        "SUI_RPC_URL",
        "SUI_NETWORK",
        "SUISPLIT_PACKAGE_ID",
        "SUISPLIT_EMPTY_POLICY",
        "SUISPLIT_FIXTURE_PATH",
        "SUISPLIT_FRONTEND_ORIGIN",
    ):
        monkeypatch.setenv(name, "")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fixture_gateway():
    """FixtureGateway over the bundled demo data."""
    from backend_suisplit.config import get_settings
    from backend_suisplit.sui_rpc.fixture import FixtureGateway

    return FixtureGateway.from_file(get_settings().fixture_path)


@pytest.fixture
def client():
    """FastAPI TestClient with lifespan, so the app builds its fixture gateway."""
    from fastapi.testclient import TestClient

    from backend_suisplit.api_server.server import app

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
