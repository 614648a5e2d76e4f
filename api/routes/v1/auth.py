"""
api/routes/v1/auth.py -- Registration, login, and identity endpoints.

Routes:
  POST /api/v1/register  -- create an account (Admin requires the secret key)
  POST /api/v1/login     -- password login; returns a bearer JWT
  GET  /api/v1/me        -- claims of the current token (requires auth)

Security:
  POST /login is rate-limited to 10 requests/minute per IP.
  Wrong password and unknown email return the same message.
  Cache-Control: no-store on login responses.
  There is no logout endpoint: tokens are not revocable, clients discard them.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.limiter import LOGIN_LIMIT, limiter
from api.models import LoginRequest, LoginResponse, MeResponse, MessageResponse, RegisterRequest
from api.results import unwrap
from auth.dependencies import get_current_user
from auth.models import TokenClaims, User
from auth.service import AuthService
from auth.tokens import TOKEN_LIFETIME

# Auth policy:
# - POST /api/v1/register: public
# - POST /api/v1/login:    public
# - GET  /api/v1/me:       requires auth (get_current_user)
router = APIRouter()


@router.post("/register", response_model=MessageResponse)
def register(request: Request, body: RegisterRequest) -> MessageResponse:
    """Register a new account with the requested role.

    400 when the email is already registered, or when an Admin registration
    does not carry the configured secret key.
    """
    auth_service: AuthService = request.app.state.auth_service
    user = User(
        email=body.email,
        username=body.username,
        mobile_number=body.mobile_number,
        role=body.user_role.value,
    )
    message = unwrap(auth_service.register(user, body.password, body.user_role.value, body.secret_key))
    return MessageResponse(message=message)


@router.post("/login", response_model=LoginResponse)
# Below the route decorator so the registered endpoint is the rate-limited wrapper.
@limiter.limit(LOGIN_LIMIT)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; return a bearer token."""
    auth_service: AuthService = request.app.state.auth_service
    token = unwrap(auth_service.login(body.email, body.password))
    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(
            token=token,
            expires_in=int(TOKEN_LIFETIME.total_seconds()),
        ).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.get("/me", response_model=MeResponse)
def me(current_user: TokenClaims = Depends(get_current_user)) -> MeResponse:
    """Return the identity asserted by the caller's token."""
    return MeResponse(
        user_id=current_user.user_id,
        email=current_user.email,
        username=current_user.username,
        role=current_user.role,
    )
