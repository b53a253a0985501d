"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields.  In a
production deployment you should override these via environment
variables, in particular ``SECRET_KEY``.
"""

import os
from dataclasses import dataclass, field


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: os.getenv("PROJECT_NAME", "Library Catalog API"))
    api_version: str = field(default_factory=lambda: os.getenv("API_VERSION", "1.0.0"))
    debug: bool = field(default_factory=lambda: _env_flag("DEBUG"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: os.getenv("LOG_FILE", ""))
    secret_key: str = field(default_factory=lambda: os.getenv("SECRET_KEY", "change_me"))
    access_token_expire_minutes: int = field(
        default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    )
    algorithm: str = field(default_factory=lambda: os.getenv("ALGORITHM", "HS256"))

    # Path for the SQLite database.  If a relative path is provided, it
    # is resolved relative to the project root by the ``db`` module.
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "library_catalog.db"))

    # Number of books shown on the home listing and in the author
    # detail view.
    recent_books_limit: int = field(default_factory=lambda: int(os.getenv("RECENT_BOOKS_LIMIT", "10")))
    author_books_preview_limit: int = field(
        default_factory=lambda: int(os.getenv("AUTHOR_BOOKS_PREVIEW_LIMIT", "5"))
    )


def load_settings() -> Settings:
    """Build a fresh ``Settings`` from the current environment."""
    return Settings()


# Default instance for modules that do not receive settings explicitly.
# Environment variables must be set before importing this module for
# them to be reflected here; use ``load_settings`` to re-read them.
settings = load_settings()
