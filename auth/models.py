"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in internships/models.py -- dataclasses own domain shape; stores and services
do the work.

Layer rule: no imports from api/ or internships/.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Roles seeded into the roles table at store startup."""

    admin = "Admin"
    user = "User"


@dataclass
class User:
    """A registered account.

    hashed_password is the bcrypt digest; the plaintext is never stored.
    The admin registration secret key is checked by AuthService and is not
    part of the persisted record.
    """

    email: str
    username: str
    mobile_number: str
    role: str  # "Admin" | "User"
    id: int | None = None
    hashed_password: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class TokenClaims:
    """Identity asserted by a verified access token."""

    user_id: int
    email: str
    username: str
    role: str
