"""Tests for the create-admin command in main.py.

Covers:
- input is validated like POST /api/v1/register before anything is written
- a valid run stores an Admin with a bcrypt hash
- a second run for the same email is refused
"""

import pytest

from auth.store import UserStore
from core.config import get_settings
from main import main

VALID = ["--email", "ops@internhub.org", "--username", "ops", "--mobile", "0123456789", "--password", "Opspass12!"]


@pytest.fixture
def db_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path}/cli.db"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


def _users(url: str) -> UserStore:
    return UserStore(url)


@pytest.mark.parametrize(
    "field,value",
    [
        ("--email", "a@b..c"),
        ("--mobile", "12345"),
        ("--password", "weakpass"),
        ("--password", "Abcdef1@" + "€" * 30),
    ],
)
def test_invalid_input_is_rejected(db_url, capsys, field, value):
    argv = list(VALID)
    argv[argv.index(field) + 1] = value

    assert main(["create-admin", *argv]) == 1
    assert "[!]" in capsys.readouterr().out

    store = _users(db_url)
    try:
        assert store.count_users() == 0
    finally:
        store.close()


def test_creates_admin(db_url):
    assert main(["create-admin", *VALID]) == 0

    store = _users(db_url)
    try:
        user = store.get_by_email("ops@internhub.org")
    finally:
        store.close()
    assert user.role == "Admin"
    assert user.hashed_password.startswith("$2b$04$")


def test_existing_email_is_refused(db_url, capsys):
    assert main(["create-admin", *VALID]) == 0
    assert main(["create-admin", *VALID]) == 1
    assert "User already exists" in capsys.readouterr().out
