"""
auth/tokens.py -- JWT issuing/verification and password hashing.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with Settings.secret_key and
       carry user_id, email, username, role, issuer, audience and a fixed
       one-hour expiry. Verification checks all of them and returns None on any
       failure -- the route layer turns that into a 401.

  Passwords: bcrypt directly (no passlib wrapper). The cost factor comes from
       Settings.bcrypt_rounds so tests can run at the minimum cost while
       production keeps verification around 100ms.

  No revocation: logout is a client-side discard of the token.

Layer rule: no imports from api/ or internships/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from auth.models import TokenClaims, User
from core.config import Settings

logger = logging.getLogger("internhub.auth")

_ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(hours=1)

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def hash_password(plain: str, rounds: int = 11) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    bcrypt refuses input longer than 72 bytes. The API layer rejects such
    passwords during validation, before they reach this function.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False


# ---------------------------------------------------------------------------
# Token issuer
# ---------------------------------------------------------------------------


class TokenIssuer:
    """Creates and validates signed access tokens.

    Built once at startup from the immutable Settings. Tokens signed with a
    different key, past their expiry, or minted for another issuer/audience
    fail verification.
    """

    def __init__(self, settings: Settings) -> None:
        self._key = settings.secret_key
        self._issuer = settings.jwt_issuer
        self._audience = settings.jwt_audience

    def issue(self, user: User, now: datetime | None = None) -> str:
        """Encode a signed JWT asserting the user's identity and role.

        Args:
            user: A persisted user (id must be set).
            now:  Issuance instant. Defaults to the current UTC time.
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user.id),
            "user_id": user.id,
            "email": user.email,
            "username": user.username,
            "role": user.role,
            "iss": self._issuer,
            "aud": self._audience,
            "iat": issued_at,
            "exp": issued_at + TOKEN_LIFETIME,
        }
        return jwt.encode(payload, self._key, algorithm=_ALGORITHM)

    def verify(self, token: str) -> TokenClaims | None:
        """Decode and verify a JWT. Returns the claims or None on any failure."""
        try:
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[_ALGORITHM],
                audience=self._audience,
                issuer=self._issuer,
            )
        except JWTError as exc:
            logger.debug("Rejected token: %s", exc)
            return None
        try:
            return TokenClaims(
                user_id=int(payload["user_id"]),
                email=payload["email"],
                username=payload["username"],
                role=payload["role"],
            )
        except (KeyError, TypeError, ValueError):
            return None
