"""
auth/service.py -- Registration and login orchestration.

AuthService sits between the API routes and UserStore/TokenIssuer. It returns
tagged results (core.results) rather than raising, so routes can branch on
the outcome type.

Security:
  Login runs bcrypt whether or not the email exists. An unknown email is
  checked against a dummy hash computed once at construction, so response
  time does not reveal which addresses have accounts. Both failure paths
  return the same message.

  Admin registration is gated on Settings.admin_secret_key, compared in
  constant time. An empty configured key disables admin self-registration.

Layer rule: no imports from api/ or internships/.
"""

from __future__ import annotations

import hmac
import logging

from sqlalchemy.exc import IntegrityError

from auth.models import Role, User
from auth.store import UserStore
from auth.tokens import TokenIssuer, hash_password, verify_password
from core.config import Settings
from core.results import Conflict, Ok, Result, Unauthorized

logger = logging.getLogger("internhub.auth")

USER_EXISTS = "User already exists"
INVALID_CREDENTIALS = "Invalid email or password"
INVALID_ADMIN_KEY = "Invalid admin secret key"
REGISTERED = "User created successfully!"


class AuthService:
    def __init__(self, store: UserStore, issuer: TokenIssuer, settings: Settings) -> None:
        self._store = store
        self._issuer = issuer
        self._rounds = settings.bcrypt_rounds
        self._admin_secret_key = settings.admin_secret_key
        self._dummy_hash = hash_password("internhub_timing_dummy", self._rounds)

    def register(self, user: User, password: str, role: str, secret_key: str | None = None) -> Result[str]:
        """Create an account with the given role.

        Returns Ok(message), Conflict when the email is taken, or Unauthorized
        when an Admin registration does not present the configured secret key.
        """
        if role == Role.admin.value and not self._admin_key_matches(secret_key):
            logger.warning("Admin registration rejected for %s", user.email)
            return Unauthorized(INVALID_ADMIN_KEY)

        if self._store.get_by_email(user.email) is not None:
            logger.info("Registration conflict for %s", user.email)
            return Conflict(USER_EXISTS)

        user.hashed_password = hash_password(password, self._rounds)
        user.role = role
        try:
            user.id = self._store.create_user(user)
        except IntegrityError:
            # A concurrent registration committed the same email first.
            logger.info("Registration conflict for %s (constraint)", user.email)
            return Conflict(USER_EXISTS)

        logger.info("Registered user %d with role %s", user.id, role)
        return Ok(REGISTERED)

    def login(self, email: str, password: str) -> Result[str]:
        """Verify credentials and return Ok(token) or Unauthorized."""
        user = self._store.get_by_email(email)
        if user is None:
            # Equalize timing -- do NOT return before running bcrypt
            verify_password(password, self._dummy_hash)
            return Unauthorized(INVALID_CREDENTIALS)
        if not verify_password(password, user.hashed_password or ""):
            return Unauthorized(INVALID_CREDENTIALS)

        logger.info("Login succeeded for user %d", user.id)
        return Ok(self._issuer.issue(user))

    def _admin_key_matches(self, presented: str | None) -> bool:
        if not self._admin_secret_key or not presented:
            return False
        return hmac.compare_digest(presented.encode("utf-8"), self._admin_secret_key.encode("utf-8"))
