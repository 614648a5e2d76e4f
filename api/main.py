"""
api/main.py -- FastAPI application factory for InternHub.

create_app(settings) builds a fully wired app from one immutable Settings
object. asgi.py calls it with get_settings() for production; tests call it
with their own Settings pointing at an in-memory database.

Run with:  uvicorn asgi:app --reload
           python main.py serve

Middleware stack (outermost to innermost):
  1. TrustedHostMiddleware -- rejects requests with unexpected Host headers
  2. CORSMiddleware        -- adds CORS headers for allowed browser origins
  3. SlowAPIMiddleware     -- enforces per-route rate limits from api.limiter

Lifespan handles startup (stores, token issuer, services) and shutdown
(dispose DB engines) symmetrically.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.openapi.docs import get_redoc_html, get_swagger_ui_html
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from api.limiter import limiter
from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.v1.applications import router as applications_router
from api.routes.v1.auth import router as auth_router
from api.routes.v1.feedback import router as feedback_router
from api.routes.v1.internships import router as internships_router
from auth.dependencies import get_current_user
from auth.models import TokenClaims
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenIssuer
from core.config import Settings
from internships.service import ApplicationService, FeedbackService, InternshipService
from internships.store import InternshipStore

VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("internhub.api")


def _make_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Build stores and services from settings; dispose engines on shutdown.

        Startup order matters: stores first (they create tables and seed
        roles), then the token issuer, then the services that use both.
        """
        logger.info("InternHub API starting up")
        app.state.settings = settings
        app.state.user_store = UserStore(settings.database_url)
        app.state.internship_store = InternshipStore(settings.database_url)
        logger.info("Database initialized (roles=%s)", ", ".join(app.state.user_store.list_roles()))

        app.state.token_issuer = TokenIssuer(settings)
        app.state.auth_service = AuthService(app.state.user_store, app.state.token_issuer, settings)
        app.state.internship_service = InternshipService(app.state.internship_store)
        app.state.application_service = ApplicationService(app.state.internship_store)
        app.state.feedback_service = FeedbackService(app.state.internship_store)
        logger.info("Services initialized")

        yield

        app.state.internship_store.close()
        app.state.user_store.close()
        logger.info("InternHub API shutdown complete")

    return lifespan


def create_app(settings: Settings) -> FastAPI:
    """Assemble the FastAPI application around the given settings."""
    app = FastAPI(
        title="InternHub API",
        description="Internship listings, applications, and feedback.",
        version=VERSION,
        lifespan=_make_lifespan(settings),
        # Built-in /docs and /redoc are replaced below by auth-protected routes.
        docs_url=None,
        redoc_url=None,
    )

    # -----------------------------------------------------------------------
    # Middleware stack -- register in the order requests should meet them
    # -----------------------------------------------------------------------

    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=3600,
    )
    app.add_middleware(SlowAPIMiddleware)
    # SlowAPI looks for app.state.limiter by convention.
    app.state.limiter = limiter

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d %.1fms %s",
            request.method,
            request.url.path,
            response.status_code,
            ms,
            request.client.host if request.client else "unknown",
        )
        return response

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------

    app.include_router(auth_router, prefix="/api/v1", tags=["Auth"])
    app.include_router(internships_router, prefix="/api/v1", tags=["Internships"])
    app.include_router(applications_router, prefix="/api/v1", tags=["Internship Applications"])
    app.include_router(feedback_router, prefix="/api/v1", tags=["Feedback"])

    @app.get("/docs", include_in_schema=False)
    async def docs(user: TokenClaims = Depends(get_current_user)):
        """Swagger UI -- requires authentication."""
        return get_swagger_ui_html(openapi_url="/openapi.json", title="InternHub API")

    @app.get("/redoc", include_in_schema=False)
    async def redoc(user: TokenClaims = Depends(get_current_user)):
        """ReDoc UI -- requires authentication."""
        return get_redoc_html(openapi_url="/openapi.json", title="InternHub API")

    @app.get("/api/v1/health", tags=["Health"])
    def health(request: Request) -> HealthResponse:
        """Liveness plus a database round-trip. No auth, no rate limit."""
        components = {"app": "ok", "database": "ok"}
        try:
            with request.app.state.user_store.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("Health check database query failed")
            components["database"] = "error"
        status = "healthy" if components["database"] == "ok" else "degraded"
        return HealthResponse(status=status, version=VERSION, components=components)

    _register_exception_handlers(app)
    return app


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        """Return 429 with a structured error when a rate limit is exceeded."""
        # Window length of the limit that tripped, e.g. 60 for "10/minute".
        retry_after = exc.limit.limit.get_expiry() if exc.limit is not None else 60
        response = JSONResponse(
            status_code=429,
            content=ErrorResponse(
                error=ErrorDetail(
                    code="rate_limited",
                    message="Too many requests.",
                    detail=str(exc),
                )
            ).model_dump(),
        )
        response.headers["Retry-After"] = str(retry_after)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Return 400 when the request body or path/query params fail validation.

        Validation runs before any route body, so no service is ever called
        with a rejected payload.
        """
        logger.warning("Invalid request payload on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                error=ErrorDetail(
                    code="validation_error",
                    message="Invalid request payload",
                    detail=str(exc.errors()),
                )
            ).model_dump(),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """Return a structured error for all FastAPI/Starlette HTTP exceptions.

        Route handlers raise HTTPException with detail=ErrorDetail(...).model_dump()
        (a dict). When detail is already a structured dict, use it directly as the
        error field rather than stringifying it.
        """
        if isinstance(exc.detail, dict):
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": exc.detail},
                headers=exc.headers,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=ErrorDetail(
                    code=f"http_{exc.status_code}",
                    message=str(exc.detail),
                )
            ).model_dump(),
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler for unexpected server errors.

        The exception is logged with its traceback; the client receives only a
        generic message.
        """
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error=ErrorDetail(
                    code="internal_error",
                    message="An unexpected error occurred.",
                )
            ).model_dump(),
        )
