"""Settings for the league data-access layer, read with pydantic-settings.

Configuration is loaded from environment variables. Optionally, point
`ENV_FILE` at a local env file during development.
"""

import os
from enum import Enum

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url


class AppEnvironment(str, Enum):
    """Application environment values."""

    LOCAL = "local"
    TEST = "test"
    PROD = "prod"


# Query options that configure the SQLAlchemy pool rather than the driver.
# Passing them through to asyncpg/aiosqlite connect() fails.
_ENGINE_ONLY_QUERY_OPTIONS = frozenset(
    {"pool_size", "max_overflow", "pool_timeout", "pool_recycle", "pool_pre_ping", "echo"}
)

_ASYNC_DRIVERS = {
    "postgresql": "postgresql+asyncpg",
    "postgres": "postgresql+asyncpg",
    "postgresql+psycopg": "postgresql+asyncpg",
    "postgresql+asyncpg": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
    "sqlite+aiosqlite": "sqlite+aiosqlite",
}


class Settings(BaseSettings):
    """
    Store connection and logging settings.

    Every field maps to the upper-cased environment variable of the same
    name; DATABASE_URL has no default.
    """

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE") or None, env_prefix="", extra="ignore"
    )

    # Application
    app_env: AppEnvironment = AppEnvironment.LOCAL
    app_name: str = "league-data"
    app_log_level: str = "INFO"

    # Observability
    observability_structured_logs: bool = True

    # Database
    database_url: str

    # Connection pool configuration (ignored for SQLite)
    db_pool_size: int = 20
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    @field_validator("app_env", mode="before")
    @classmethod
    def validate_app_env(cls, v: str | AppEnvironment) -> AppEnvironment:
        """Validate and parse app_env to AppEnvironment enum."""
        if isinstance(v, AppEnvironment):
            return v
        try:
            return AppEnvironment(v.lower())
        except ValueError:
            raise ValueError(
                f"app_env must be one of {[e.value for e in AppEnvironment]}, got '{v}'"
            )

    @field_validator("app_log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"app_log_level is not a valid logging level: '{v}'")
        return level

    @property
    def is_sqlite(self) -> bool:
        """True when the configured store is SQLite."""
        return make_url(self.database_url).get_backend_name() == "sqlite"

    @property
    def async_url(self) -> str:
        """
        Database URL rewritten for the async driver.

        postgresql:// becomes postgresql+asyncpg:// and sqlite:// becomes
        sqlite+aiosqlite://. Engine-only query options are stripped.
        """
        url = make_url(self.database_url)
        url = url.set(drivername=_ASYNC_DRIVERS.get(url.drivername, url.drivername))
        url = url.difference_update_query(_ENGINE_ONLY_QUERY_OPTIONS)
        return url.render_as_string(hide_password=False)

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Reject configurations that must never reach production."""
        if self.app_env == AppEnvironment.PROD:
            if not self.database_url.startswith(("postgresql", "postgres")):
                raise ValueError("DATABASE_URL must use a PostgreSQL scheme in production")
            if self.db_echo:
                raise ValueError("DB_ECHO must be disabled in production")

        return self


settings = Settings()
