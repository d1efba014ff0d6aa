"""
Pytest fixtures for AgentMart tests.

This module provides:
- Backend clients wired to an in-process mock transport
- Ready-made user and admin sessions
- Rate limiting switched off
"""

import os
from collections.abc import Callable

os.environ.setdefault("ENVIRONMENT", "test")

import httpx
import pytest

from agentmart.backend import BackendClient
from agentmart.middleware.rate_limit import limiter
from agentmart.models import Role
from agentmart.session import UserSession
from tests.factories import make_session

BACKEND_URL = "https://project.supabase.co"
Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def disable_rate_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(limiter, "enabled", False)


@pytest.fixture
def make_backend() -> Callable[..., BackendClient]:
    """Build a BackendClient whose requests are answered by ``handler``."""

    def _make(handler: Handler, service_role_key: str | None = None) -> BackendClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return BackendClient(
            BACKEND_URL,
            "anon-key",
            service_role_key=service_role_key,
            http_client=http_client,
        )

    return _make


@pytest.fixture
def user_session() -> UserSession:
    return make_session()


@pytest.fixture
def admin_session() -> UserSession:
    return make_session(role=Role.ADMIN, user_id="admin-1")
