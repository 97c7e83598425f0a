"""``Connection`` implementation over the stdlib :mod:`sqlite3` driver.

Usage::

    with SqliteConnection("people.db") as conn:
        conn.execute("INSERT INTO ADDRESSES (CITY) VALUES (?)", ("Anytown",))
    # committed here; rolled back instead if the block raised
"""

from __future__ import annotations

import os
import sqlite3
from typing import Any


class SqliteConnection:
    """One sqlite3 connection with one shared cursor.

    ``execute`` returns that cursor, so ``lastrowid`` and ``description``
    describe the latest statement.  FOREIGN KEY enforcement is left off:
    deleting a person or address leaves its dependants in place.
    """

    def __init__(self, database: str | os.PathLike[str] = ":memory:", *, row_factory: Any = sqlite3.Row) -> None:
        self.database = os.fspath(database)
        self._db = sqlite3.connect(self.database)
        self._db.row_factory = row_factory
        self._cur = self._db.cursor()

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        return self._cur.execute(sql, params)

    def executemany(self, sql: str, params: list[tuple]) -> sqlite3.Cursor:
        return self._cur.executemany(sql, params)

    def fetchone(self) -> Any:
        return self._cur.fetchone()

    def fetchall(self) -> list:
        return self._cur.fetchall()

    def commit(self) -> None:
        self._db.commit()

    def rollback(self) -> None:
        self._db.rollback()

    def close(self) -> None:
        self._cur.close()
        self._db.close()

    @property
    def in_transaction(self) -> bool:
        return self._db.in_transaction

    def __enter__(self) -> SqliteConnection:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    def __repr__(self) -> str:
        return f"SqliteConnection(database={self.database!r})"
