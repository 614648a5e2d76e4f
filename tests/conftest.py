"""
tests/conftest.py -- Shared test fixtures for InternHub integration tests.

This module provides:
  - make_settings(): immutable Settings pointing at an isolated in-memory DB
  - api_client: TestClient over create_app() with an Admin and a User token

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.
The named URI format (file:name?mode=memory&cache=shared&uri=true) shares
one in-memory instance across all connections in the same process.

Settings are built directly and passed to create_app(); get_settings() is
never called, so the tests never read a real .env file or SECRET_KEY.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from dataclasses import dataclass

# Set DEBUG before any core import so a stray get_settings() call
# auto-generates SECRET_KEY instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.limiter import limiter
from api.main import create_app
from auth.models import Role, User
from core.config import Settings

TEST_SECRET_KEY = "test-secret-key-0123456789abcdef0123456789"
TEST_ADMIN_KEY = "test-admin-registration-key"

ADMIN_EMAIL = "admin@internhub.org"
ADMIN_PASSWORD = "Adminpass1!"
USER_EMAIL = "student@internhub.org"
USER_PASSWORD = "Studentpass1!"

# Off by default: counters would otherwise leak between test modules that
# share one client address. test_error_handling.py switches it back on.
limiter.enabled = False


def make_settings(db_suffix: str) -> Settings:
    """Build Settings for one isolated in-memory database.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state (e.g. 'api', 'health').
    """
    return Settings(
        debug=True,
        secret_key=TEST_SECRET_KEY,
        database_url=f"sqlite:///file:test_internhub_{db_suffix}?mode=memory&cache=shared&uri=true",
        admin_secret_key=TEST_ADMIN_KEY,
        bcrypt_rounds=4,
    )


@dataclass
class ApiContext:
    """Handles yielded by the api_client fixture."""

    client: TestClient
    admin_token: str
    admin_id: int
    user_token: str
    user_id: int

    def headers(self, token: str | None) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"} if token else {}

    @property
    def admin(self) -> dict[str, str]:
        return self.headers(self.admin_token)

    @property
    def user(self) -> dict[str, str]:
        return self.headers(self.user_token)


def _register(app, email: str, password: str, username: str, role: Role) -> tuple[int, str]:
    """Register through the real AuthService and mint a token for the new account."""
    user = User(email=email, username=username, mobile_number="0123456789", role=role.value)
    secret = TEST_ADMIN_KEY if role is Role.admin else None
    app.state.auth_service.register(user, password, role.value, secret)
    stored = app.state.user_store.get_by_email(email)
    return stored.id, app.state.token_issuer.issue(stored)


# ---------------------------------------------------------------------------
# Module-scoped fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client(request) -> Generator[ApiContext, None, None]:
    """Yield an ApiContext wired to a fresh app and database.

    The TestClient context runs the real lifespan, so stores and services are
    built exactly as in production. An Admin and a regular User are
    registered once the app has started. base_url must be an allowed host or
    TrustedHostMiddleware rejects every request with 400.
    """
    app = create_app(make_settings(request.module.__name__.rsplit(".", 1)[-1]))

    with TestClient(app, base_url="http://localhost", raise_server_exceptions=True) as client:
        admin_id, admin_token = _register(app, ADMIN_EMAIL, ADMIN_PASSWORD, "admin", Role.admin)
        user_id, user_token = _register(app, USER_EMAIL, USER_PASSWORD, "student", Role.user)
        yield ApiContext(
            client=client,
            admin_token=admin_token,
            admin_id=admin_id,
            user_token=user_token,
            user_id=user_id,
        )
