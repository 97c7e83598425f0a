"""SQLAlchemy bridge for non-SQLite backends.

Modules
-------
session     Engine factory, PeopleDBSession, SAConnectionBridge

Tags:
    peopledb, orm, sqlalchemy, bridge
"""

from __future__ import annotations

from peopledb.core.orm.session import (
    PeopleDBSession,
    SAConnectionBridge,
    create_peopledb_engine,
)

__all__ = [
    "create_peopledb_engine",
    "PeopleDBSession",
    "SAConnectionBridge",
]
