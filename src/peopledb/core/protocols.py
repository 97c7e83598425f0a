"""
Canonical protocol definitions for peopledb.

Every module that needs a database connection types it as
:class:`Connection`.  Any object with this shape works: the bundled
:class:`~peopledb.core.sqlite_conn.SqliteConnection`, the SQLAlchemy
:class:`~peopledb.core.orm.session.SAConnectionBridge`, or a test double.

Architecture:
    ::

        Connection                          cursor (returned by execute)
        ────────────────────────────        ────────────────────────────
        execute(sql, params) -> cursor      fetchone() / fetchall()
        executemany(sql, [params, ...])     description (column names)
        fetchone() / fetchall()             lastrowid (SQLite inserts)
        commit() / rollback()

    SQL always uses positional ``?`` markers.

Guardrails:
    ❌ DON'T: Share one Connection between threads
    ✅ DO: Give each concurrent caller its own connection and repositories

Tags:
    protocol, connection, database, peopledb
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Connection(Protocol):
    """Minimal synchronous connection interface (DB-API 2.0 flavoured)."""

    def execute(self, sql: str, params: tuple = ()) -> Any:
        """Execute SQL statement with optional parameters."""
        ...

    def executemany(self, sql: str, params: list[tuple]) -> Any:
        """Execute SQL statement for multiple parameter sets."""
        ...

    def fetchone(self) -> Any:
        """Fetch one row from last query."""
        ...

    def fetchall(self) -> list:
        """Fetch all rows from last query."""
        ...

    def commit(self) -> None:
        """Commit current transaction."""
        ...

    def rollback(self) -> None:
        """Rollback current transaction."""
        ...


__all__ = ["Connection"]
