"""
Application configuration.

Loads settings from environment variables (and an optional .env file).
The signing secret, token lifetime and database URL have no defaults:
the app refuses to start without them.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from tasklist.core.errors import ConfigError
from tasklist.core.utils import parse_duration


MEMORY_DATABASE_URL = "memory://"

# HMAC algorithms only: tokens are signed with the shared JWT_SECRET_KEY
JWT_ALGORITHMS = ("HS256", "HS384", "HS512")


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # ==========================================================================
    # API Server
    # ==========================================================================

    api_host: str = "0.0.0.0"
    api_port: int = 5000
    api_prefix: str = "/api"
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # ==========================================================================
    # Database
    # ==========================================================================

    # "memory://" for the in-memory stores, otherwise a SQLAlchemy URL
    database_url: str = ""

    # ==========================================================================
    # Authentication
    # ==========================================================================

    jwt_secret_key: str = ""
    jwt_algorithm: str = "HS256"
    jwt_expires_in: str = ""  # "3600", "15m", "24h", "7d"

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    sentry_dsn: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def use_memory_storage(self) -> bool:
        return self.database_url == MEMORY_DATABASE_URL

    @property
    def jwt_expires_delta(self) -> timedelta:
        """Token lifetime. Raises ConfigError if unset or unparsable."""
        if not self.jwt_expires_in:
            raise ConfigError("JWT_EXPIRES_IN is not configured")
        try:
            return parse_duration(self.jwt_expires_in)
        except ValueError as e:
            raise ConfigError(f"JWT_EXPIRES_IN is invalid: {e}") from e

    def validate_required(self) -> None:
        """
        Check the settings the service cannot run without.

        Raises ConfigError naming every missing value.
        """
        missing = [
            env_name
            for env_name, value in (
                ("JWT_SECRET_KEY", self.jwt_secret_key),
                ("JWT_EXPIRES_IN", self.jwt_expires_in),
                ("DATABASE_URL", self.database_url),
            )
            if not value
        ]
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

        if self.jwt_algorithm not in JWT_ALGORITHMS:
            raise ConfigError(
                f"JWT_ALGORITHM must be one of {', '.join(JWT_ALGORITHMS)}, got {self.jwt_algorithm!r}"
            )

        # Parses the lifetime, raising on bad values
        self.jwt_expires_delta


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
