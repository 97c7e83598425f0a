"""SQL dialect abstraction for backend-specific fragments.

Repository SQL is written once with positional ``?`` placeholders (the
SQLAlchemy bridge rewrites them for other drivers).  What still differs
between backends is isolated here: identity-column DDL and how an INSERT
hands back its generated key.

Architecture::

    ┌──────────────────────────┐     ┌──────────────────────────────┐
    │ SQLiteDialect            │     │ PostgreSQLDialect            │
    │ INTEGER PRIMARY KEY      │     │ BIGSERIAL PRIMARY KEY        │
    │   AUTOINCREMENT          │     │                              │
    │ key ← cursor.lastrowid   │     │ INSERT … RETURNING ID        │
    │                          │     │ key ← cursor.fetchone()[0]   │
    └──────────────────────────┘     └──────────────────────────────┘

Examples:
    >>> d = SQLiteDialect()
    >>> d.insert_returning_id("INSERT INTO ADDRESSES (CITY) VALUES (?)")
    'INSERT INTO ADDRESSES (CITY) VALUES (?)'
    >>> PostgreSQLDialect().insert_returning_id("INSERT INTO ADDRESSES (CITY) VALUES (?)")
    'INSERT INTO ADDRESSES (CITY) VALUES (?) RETURNING ID'

Tags:
    dialect, sql, portability, database, peopledb
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Dialect(Protocol):
    """SQL dialect contract."""

    @property
    def name(self) -> str:
        """Human-readable dialect name (e.g. ``'sqlite'``)."""
        ...

    def auto_increment(self) -> str:
        """DDL column type for a generated integer primary key."""
        ...

    def insert_returning_id(self, sql: str) -> str:
        """Rewrite an INSERT so that executing it yields the generated key."""
        ...

    def generated_id(self, cursor: Any) -> int | None:
        """Read the generated key from the cursor of an executed INSERT."""
        ...

    def table_exists_query(self) -> str:
        """Query taking one table-name parameter; returns a row if it exists."""
        ...


class SQLiteDialect:
    """SQLite dialect (``lastrowid`` for generated keys)."""

    @property
    def name(self) -> str:
        return "sqlite"

    def auto_increment(self) -> str:
        return "INTEGER PRIMARY KEY AUTOINCREMENT"

    def insert_returning_id(self, sql: str) -> str:
        return sql

    def generated_id(self, cursor: Any) -> int | None:
        return cursor.lastrowid

    def table_exists_query(self) -> str:
        return "SELECT name FROM sqlite_master WHERE type='table' AND name = ?"


class PostgreSQLDialect:
    """PostgreSQL dialect (``RETURNING ID`` for generated keys)."""

    @property
    def name(self) -> str:
        return "postgresql"

    def auto_increment(self) -> str:
        return "BIGSERIAL PRIMARY KEY"

    def insert_returning_id(self, sql: str) -> str:
        return f"{sql.rstrip().rstrip(';')} RETURNING ID"

    def generated_id(self, cursor: Any) -> int | None:
        row = cursor.fetchone()
        return row[0] if row else None

    def table_exists_query(self) -> str:
        return (
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = 'public' AND table_name = lower(?)"
        )


# ── Factory ──────────────────────────────────────────────────────────────

_DIALECTS: dict[str, Dialect] = {
    "sqlite": SQLiteDialect(),
    "postgresql": PostgreSQLDialect(),
    "postgres": PostgreSQLDialect(),
}


def get_dialect(backend: str) -> Dialect:
    """Dialect for a backend name (``ConnectionInfo.backend``), case-insensitive."""
    try:
        return _DIALECTS[backend.lower()]
    except KeyError:
        raise ValueError(f"Unknown dialect {backend!r}; expected sqlite or postgresql") from None


__all__ = [
    "Dialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "get_dialect",
]
