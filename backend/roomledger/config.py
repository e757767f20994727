"""
RoomLedger Backend — Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
Why:   The connection string is the only value the service cannot run without;
       loading it through a validated settings object makes its absence a
       startup failure instead of a failure on the first query.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
When:  Loaded once at module import time.

Connection string sources (first one set wins):
    DATABASE_URL, NETLIFY_DATABASE_URL

    Hosted Postgres providers hand out URLs like
        postgres://user:pw@host/db?sslmode=require
    asyncpg understands neither the bare scheme nor `sslmode`, so the URL is
    normalized to
        postgresql+asyncpg://user:pw@host/db?ssl=require
"""

from typing import List
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

_ASYNC_SCHEME = "postgresql+asyncpg"
_PLAIN_SCHEMES = {"postgres", "postgresql"}
# libpq-only options that asyncpg.connect() rejects
_UNSUPPORTED_PARAMS = {"channel_binding"}


def normalize_database_url(url: str) -> str:
    """
    Rewrite a plain Postgres URL into one the async SQLAlchemy engine accepts.

    Non-Postgres URLs (e.g. sqlite+aiosqlite used by the test suite) are
    returned unchanged apart from surrounding whitespace.
    """
    url = url.strip()
    parts = urlsplit(url)
    scheme = parts.scheme
    if scheme in _PLAIN_SCHEMES:
        scheme = _ASYNC_SCHEME
    if scheme != _ASYNC_SCHEME:
        return url

    params = []
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        if key in _UNSUPPORTED_PARAMS:
            continue
        if key == "sslmode":
            key = "ssl"
        params.append((key, value))
    return urlunsplit((scheme, parts.netloc, parts.path, urlencode(params), parts.fragment))


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    `database_url` has no default on purpose: a process started without a
    connection string must not come up.
    """

    # ── Database ──────────────────────────────────────────────────────────
    database_url: str = Field(
        validation_alias=AliasChoices(
            "DATABASE_URL", "database_url", "NETLIFY_DATABASE_URL", "netlify_database_url"
        ),
        description="PostgreSQL connection URL (normalized to the asyncpg driver)",
    )

    # Hosted Postgres plans cap connections low; keep the pool small
    db_pool_size: int = Field(default=5, ge=1, le=100)
    db_max_overflow: int = Field(default=5, ge=0, le=50)

    # Serverless Postgres suspends idle computes; pre-ping drops dead connections
    db_pool_pre_ping: bool = Field(default=True)

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Rejects blank values and normalizes the driver scheme."""
        if not v or not v.strip():
            raise ValueError("DATABASE_URL is not set")
        return normalize_database_url(v)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins; empty means the frontend is served same-origin
    # and no CORS middleware is installed.
    cors_origins: str = Field(default="")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list, dropping blanks."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
    }

    @property
    def is_sqlite(self) -> bool:
        """True when running against SQLite (local tests); disables pool sizing."""
        return self.database_url.startswith("sqlite")


# Singleton instance, imported throughout the application.
# Missing DATABASE_URL raises pydantic.ValidationError here, at import time.
settings = Settings()
