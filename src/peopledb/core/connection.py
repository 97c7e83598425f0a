"""Open a :class:`~peopledb.core.protocols.Connection` from a URL or path.

Repositories never open connections themselves.  Callers open one here,
hand it (with ``info.dialect``) to the repositories and own commit and
rollback.

Accepted forms:

- ``None``, ``""``, ``memory``, ``:memory:``, ``sqlite://``: in-memory SQLite
- ``sqlite:///relative/or/absolute/path.db``, or a bare path: SQLite file
  (parent directories are created)
- ``postgresql://…``, ``postgres://…``, ``postgresql+driver://…``:
  PostgreSQL through the SQLAlchemy bridge

Usage::

    conn, info = create_connection("people.db", init_schema=True)
    repo = PeopleRepository(conn, info.dialect)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

from peopledb.core.dialect import Dialect, get_dialect
from peopledb.core.logging import get_logger
from peopledb.core.protocols import Connection

logger = get_logger(__name__)

_MEMORY_ALIASES = {"", "memory", ":memory:"}
_POSTGRES_SCHEMES = ("postgresql://", "postgres://", "postgresql+", "postgres+")


class DatabaseTarget(NamedTuple):
    backend: str  # "sqlite" | "postgresql"
    location: str | None  # file path, URL, or None for in-memory SQLite


def parse_database_url(db: str | None) -> DatabaseTarget:
    """Classify ``db`` without opening anything."""
    if db is None or db in _MEMORY_ALIASES:
        return DatabaseTarget("sqlite", None)
    if db.startswith(_POSTGRES_SCHEMES):
        return DatabaseTarget("postgresql", db)
    if db.startswith("sqlite:"):
        path = db.removeprefix("sqlite:").removeprefix("//").removeprefix("/")
        return DatabaseTarget("sqlite", None if path in _MEMORY_ALIASES else path)
    return DatabaseTarget("sqlite", db)


@dataclass(frozen=True)
class ConnectionInfo:
    """What :func:`create_connection` opened."""

    backend: str
    url: str | None
    path: str | None = None  # resolved SQLite file; None in memory and for PostgreSQL

    @property
    def persistent(self) -> bool:
        return self.backend != "sqlite" or self.path is not None

    @property
    def dialect(self) -> Dialect:
        return get_dialect(self.backend)


def _open_sqlite(target: DatabaseTarget) -> tuple[Connection, str | None]:
    from peopledb.core.sqlite_conn import SqliteConnection

    if target.location is None:
        return SqliteConnection(":memory:"), None
    path = Path(target.location).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    return SqliteConnection(path), str(path)


def _open_postgresql(target: DatabaseTarget, echo: bool) -> Connection:
    from peopledb.core.orm.session import PeopleDBSession, SAConnectionBridge, create_peopledb_engine

    engine = create_peopledb_engine(target.location, echo=echo)
    return SAConnectionBridge(PeopleDBSession(bind=engine))


def create_connection(
    db: str | None = None,
    *,
    init_schema: bool = False,
    echo: bool = False,
) -> tuple[Connection, ConnectionInfo]:
    """Open ``db`` and describe it.

    Args:
        db: URL, path or memory alias (see module docstring)
        init_schema: Create PEOPLE and ADDRESSES if missing
        echo: Echo SQL (SQLAlchemy-backed connections only)
    """
    target = parse_database_url(db)
    if target.backend == "postgresql":
        conn = _open_postgresql(target, echo)
        info = ConnectionInfo(backend="postgresql", url=db)
    else:
        conn, path = _open_sqlite(target)
        info = ConnectionInfo(backend="sqlite", url=db, path=path)

    logger.debug("connection_opened", backend=info.backend, persistent=info.persistent, path=info.path)

    if init_schema:
        from peopledb.core.schema import create_schema

        create_schema(conn, info.dialect)
    return conn, info


__all__ = ["ConnectionInfo", "DatabaseTarget", "create_connection", "parse_database_url"]
