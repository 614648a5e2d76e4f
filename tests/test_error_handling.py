"""
tests/test_error_handling.py -- Rate limiting and the catch-all error envelope.

Covers:
  - POST /api/v1/login answers 429 with Retry-After once the per-IP limit is spent
  - unexpected exceptions become a generic 500 that never echoes the exception

The limiter is shared process-wide and disabled in conftest.py; the fixture
below switches it on for this module only and clears its counters around
each test.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.limiter import limiter
from api.main import create_app
from core.config import Settings


@pytest.fixture
def limiter_on():
    limiter.reset()
    limiter.enabled = True
    yield
    limiter.enabled = False
    limiter.reset()


def test_login_rate_limit(api_client, limiter_on):
    """Ten attempts per minute are answered; the eleventh is refused."""
    client = api_client.client
    body = {"email": "student@internhub.org", "password": "Wrongpass1!"}

    for _ in range(10):
        assert client.post("/api/v1/login", json=body).status_code == 400

    resp = client.post("/api/v1/login", json=body)

    assert resp.status_code == 429
    assert resp.json()["error"]["code"] == "rate_limited"
    assert resp.headers["Retry-After"] == "60"


def test_rate_limit_applies_to_correct_credentials_too(api_client, limiter_on):
    client = api_client.client
    for _ in range(10):
        client.post("/api/v1/login", json={"email": "nobody@x.com", "password": "Abcdef123@"})

    resp = client.post("/api/v1/login", json={"email": "student@internhub.org", "password": "Studentpass1!"})
    assert resp.status_code == 429


def test_other_routes_are_not_limited(api_client, limiter_on):
    for _ in range(15):
        assert api_client.client.get("/api/v1/health").status_code == 200


def test_unhandled_exception_returns_generic_500():
    settings = Settings(
        debug=True,
        secret_key="e" * 40,
        database_url="sqlite:///file:test_internhub_errors?mode=memory&cache=shared&uri=true",
        bcrypt_rounds=4,
    )
    app = create_app(settings)

    @app.get("/api/v1/explode")
    def explode():
        raise RuntimeError("password=hunter2 leaked from a driver")

    with TestClient(app, base_url="http://localhost", raise_server_exceptions=False) as client:
        resp = client.get("/api/v1/explode")

    assert resp.status_code == 500
    assert resp.json() == {
        "error": {"code": "internal_error", "message": "An unexpected error occurred.", "detail": None}
    }
    assert "hunter2" not in resp.text
