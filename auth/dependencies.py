"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Requests authenticate with an `Authorization: Bearer <token>` header carrying
a JWT issued by POST /api/v1/login. The token issuer on app.state verifies
signature, issuer, audience and expiry.

try_get_current_user() is the soft variant (returns None on failure).
get_current_user() wraps it and raises HTTP 401 if unauthenticated.
require_admin() wraps get_current_user() and raises HTTP 403 if not Admin.
require_owner_or_admin() is called inside routes once the record is loaded.

Layer rule: no imports from internships/.
  auth/dependencies.py may import from fastapi (for HTTPException/Request)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.models import Role, TokenClaims
from auth.tokens import TokenIssuer


def try_get_current_user(request: Request) -> TokenClaims | None:
    """Return the verified token claims, or None. Never raises."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    issuer: TokenIssuer = request.app.state.token_issuer
    return issuer.verify(auth_header[7:])


def get_current_user(request: Request) -> TokenClaims:
    """Require authentication. Raises HTTP 401 if the request is not authenticated.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: TokenClaims = Depends(get_current_user)): ...
    """
    claims = try_get_current_user(request)
    if claims is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Authentication required."},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims


def require_admin(request: Request) -> TokenClaims:
    """Require the Admin role. Raises HTTP 401 if unauthenticated, HTTP 403 if not Admin."""
    claims = get_current_user(request)
    if claims.role != Role.admin.value:
        raise HTTPException(
            status_code=403,
            detail={"code": "forbidden", "message": "Admin access required."},
        )
    return claims


def require_owner_or_admin(claims: TokenClaims, owner_id: int, message: str) -> None:
    """Raise HTTP 403 unless the caller is Admin or owns the record (owner_id)."""
    if claims.role != Role.admin.value and claims.user_id != owner_id:
        raise HTTPException(
            status_code=403,
            detail={"code": "forbidden", "message": message},
        )
