"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for InternHub happen here. No module should
call os.getenv() or os.environ.get() directly.

Design patterns used:
  Immutable settings object: Settings is frozen. It is built once by the
      process entry point (asgi.py / main.py) and handed to create_app(),
      which threads it into the stores, the token issuer and the services.
      Nothing below the entry point calls get_settings().

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. secret_key -> SECRET_KEY). Type coercion and validation are built in.

  Field validator on secret_key: fields validate in declaration order, so
      `debug` is already resolved when secret_key is checked. Dev mode
      generates a key with a warning; production mode refuses to start
      without one.

Security notes:
  SECRET_KEY shorter than 32 chars is rejected outright. HS256 signing
  relies on key entropy -- a short key weakens every issued token.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/, or internships/.
"""

import logging
import secrets
from functools import lru_cache

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("internhub.config")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields except SECRET_KEY have defaults so Settings(debug=True) can be
    instantiated in test environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    # Empty string is the sentinel for "not configured". validate_default makes
    # the validator below run even when SECRET_KEY is absent.
    secret_key: str = Field(default="", validate_default=True, repr=False)

    # ------------------------------------------------------------------
    # Database
    # ------------------------------------------------------------------

    database_url: str = "sqlite:///internhub.db"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    jwt_issuer: str = "internhub"
    jwt_audience: str = "internhub-clients"
    # Empty string disables admin self-registration entirely.
    admin_secret_key: str = Field(default="", repr=False)
    # 11 rounds keeps a single verification around 100ms on current hardware.
    bcrypt_rounds: int = Field(default=11, ge=4, le=31)

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    allowed_hosts: list[str] = Field(default_factory=lambda: ["localhost", "127.0.0.1", "*.localhost"])
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost", "http://localhost:3000", "http://127.0.0.1"]
    )

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, value: str, info: ValidationInfo) -> str:
        """Enforce the SECRET_KEY policy.

        Dev mode (DEBUG=true): auto-generate a random key with a warning.
            Tokens will not survive restart -- acceptable for local dev.

        Production mode: refuse to start if SECRET_KEY is missing.

        Both modes: reject keys shorter than 32 characters.
        """
        if not value:
            if info.data.get("debug"):
                logger.warning("Using auto-generated SECRET_KEY. Tokens will not persist across restarts.")
                return secrets.token_hex(32)
            raise ValueError(
                "SECRET_KEY is required in production mode. "
                "Set SECRET_KEY in your environment or .env file. "
                "To run in development mode, set DEBUG=true."
            )
        if len(value) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")
        return value


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide Settings instance.

    Only entry points (asgi.py, main.py) call this. In tests, build
    Settings(...) directly and pass it to create_app().
    """
    return Settings()
