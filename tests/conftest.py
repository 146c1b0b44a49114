"""
Shared pytest fixtures available to every test file automatically.
No imports needed in test files: pytest discovers this by convention.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app import cache
from app.deps import get_auth_client, get_current_user, get_optional_user
from app.routers import account, auth, booking, dashboard, notification, view

from .factories import make_admin, make_client, make_super_admin

ROUTERS = (auth, account, booking, notification, dashboard, view)


# ---------------------------------------------------------------------------
# Default no-op mocks: prevent real Redis / HTTP calls in tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    mock = MagicMock()
    mock.get = AsyncMock(return_value=None)
    mock.setex = AsyncMock(return_value=True)
    mock.delete = AsyncMock(return_value=1)
    monkeypatch.setattr(cache, "_redis", mock)
    return mock


@pytest.fixture()
def anyio_backend():
    return "asyncio"


def _noop_auth_client():
    mock = MagicMock()
    mock.sign_up = AsyncMock(return_value={})
    mock.sign_in = AsyncMock(return_value={})
    return mock


# ---------------------------------------------------------------------------
# App builder: used by all client fixtures
# ---------------------------------------------------------------------------


def bare_app() -> FastAPI:
    app = FastAPI()
    for module in ROUTERS:
        app.include_router(module.router)
    return app


def build_app(current_user, auth_client=None) -> FastAPI:
    """
    Fresh FastAPI app with caller resolution overridden to return
    `current_user` unconditionally. Role guards still run on top of it.

    Pass `auth_client` to inject a custom auth-service mock.
    """
    app = bare_app()

    async def _user():
        return current_user

    app.dependency_overrides[get_current_user] = _user
    app.dependency_overrides[get_optional_user] = _user

    ac = auth_client if auth_client is not None else _noop_auth_client()
    app.dependency_overrides[get_auth_client] = lambda: ac

    return app


# ---------------------------------------------------------------------------
# Reusable client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def client_api():
    return TestClient(build_app(make_client()), raise_server_exceptions=True)


@pytest.fixture()
def admin_api():
    return TestClient(build_app(make_admin()), raise_server_exceptions=True)


@pytest.fixture()
def super_admin_api():
    return TestClient(build_app(make_super_admin()), raise_server_exceptions=True)


@pytest.fixture()
def anon_app():
    """
    Bare app with NO dependency overrides.
    Use this when you want real identity/role deps to run so you can assert 401/403/422.
    """
    return bare_app()


@pytest.fixture()
def client_factory():
    def _make(current_user, auth_client=None) -> TestClient:
        return TestClient(
            build_app(current_user, auth_client=auth_client),
            raise_server_exceptions=True,
        )

    return _make
