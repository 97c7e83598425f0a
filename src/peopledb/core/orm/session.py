"""SQLAlchemy engine factory and Connection bridge.

Backends other than the bundled sqlite3 adapter (PostgreSQL) are reached
through SQLAlchemy.  Repositories only speak the
:class:`~peopledb.core.protocols.Connection` protocol, so
:class:`SAConnectionBridge` makes a ``Session`` look like one:

* repository SQL keeps its positional ``?`` markers; the bridge renames
  them ``:p0, :p1, ...`` and binds a matching dict
* ``execute`` returns the bridge, which then acts as the cursor of that
  statement (rows as plain tuples, DB-API ``description``, ``lastrowid``)

Tags:
    peopledb, orm, sqlalchemy, session, bridge
"""

from __future__ import annotations

import itertools
import re
from collections.abc import Sequence
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import CursorResult, Engine
from sqlalchemy.orm import Session

_POSITIONAL = re.compile(r"\?")


def create_peopledb_engine(url: str, *, echo: bool = False, **kwargs: Any) -> Engine:
    """Engine for ``url``; ``kwargs`` go straight to :func:`sqlalchemy.create_engine`."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url, echo=echo, **kwargs)


class PeopleDBSession(Session):
    """Session that keeps loaded state readable after ``commit``."""

    def __init__(self, bind: Engine | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("expire_on_commit", False)
        super().__init__(bind=bind, **kwargs)


def _rewrite_placeholders(sql: str) -> str:
    """``WHERE A = ? AND B = ?`` → ``WHERE A = :p0 AND B = :p1``."""
    counter = itertools.count()
    return _POSITIONAL.sub(lambda _match: f":p{next(counter)}", sql)


def _named(params: Sequence[Any]) -> dict[str, Any]:
    return {f"p{i}": value for i, value in enumerate(params)}


class SAConnectionBridge:
    """``Connection`` protocol over a SQLAlchemy :class:`Session`."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._result: CursorResult | None = None

    @property
    def session(self) -> Session:
        return self._session

    def execute(self, sql: str, params: Sequence[Any] = ()) -> SAConnectionBridge:
        self._result = self._session.execute(text(_rewrite_placeholders(sql)), _named(params))
        return self

    def executemany(self, sql: str, params: Sequence[Sequence[Any]]) -> SAConnectionBridge:
        self._result = self._session.execute(text(_rewrite_placeholders(sql)), [_named(p) for p in params])
        return self

    def _returns_rows(self) -> bool:
        return self._result is not None and self._result.returns_rows

    def fetchone(self) -> tuple[Any, ...] | None:
        if not self._returns_rows():
            return None
        row = self._result.fetchone()
        return None if row is None else tuple(row)

    def fetchall(self) -> list[tuple[Any, ...]]:
        if not self._returns_rows():
            return []
        return [tuple(row) for row in self._result.fetchall()]

    @property
    def description(self) -> list[tuple[Any, ...]] | None:
        """DB-API 2.0 style: one 7-tuple per column, name first."""
        if not self._returns_rows():
            return None
        return [(name,) + (None,) * 6 for name in self._result.keys()]

    @property
    def lastrowid(self) -> int | None:
        return None if self._result is None else self._result.lastrowid

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        self._session.rollback()

    def close(self) -> None:
        self._session.close()
