"""Settings for peopledb.

Configuration is read from ``PEOPLEDB_``-prefixed environment variables
and an optional ``.env`` file.

Examples:
    >>> from peopledb.core.settings import PeopleDBSettings
    >>> PeopleDBSettings(database_url="people.db").database_url
    'people.db'

Tags:
    settings, configuration, pydantic, environment, peopledb
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PeopleDBSettings(BaseSettings):
    """Settings shared by the CLI and any embedding application.

    Fields
    ──────
    database_url : ``memory``, a SQLite path / URL or a PostgreSQL URL
    log_level    : Structlog log level
    log_json     : Force JSON (True) or console (False) logs; None auto-detects
    echo_sql     : Echo SQL through SQLAlchemy (non-SQLite backends only)
    """

    model_config = SettingsConfigDict(
        env_prefix="PEOPLEDB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ──────────────────────────────────────────────────
    database_url: str = Field(
        default="memory",
        description="Database URL, SQLite file path, or 'memory'",
    )
    echo_sql: bool = False

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None


@lru_cache(maxsize=1)
def get_settings() -> PeopleDBSettings:
    """Return the process-wide settings instance."""
    return PeopleDBSettings()
