"""Tests for the SQLAlchemy Connection bridge.

Runs the people repository through ``SAConnectionBridge`` on an in-memory
SQLite engine, so the bridge path is exercised without a PostgreSQL server.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from peopledb.core.dialect import SQLiteDialect
from peopledb.core.orm.session import (
    PeopleDBSession,
    SAConnectionBridge,
    _rewrite_placeholders,
    create_peopledb_engine,
)
from peopledb.core.protocols import Connection
from peopledb.core.schema import create_schema
from peopledb.models.people import Address, Person, Region
from peopledb.repositories.people import PeopleRepository


@pytest.fixture
def bridge():
    engine = create_peopledb_engine("sqlite://")
    session = PeopleDBSession(bind=engine)
    conn = SAConnectionBridge(session)
    create_schema(conn, SQLiteDialect())
    yield conn
    conn.close()
    engine.dispose()


class TestRewritePlaceholders:
    def test_positional_to_named(self):
        assert _rewrite_placeholders("UPDATE T SET A = ?, B = ? WHERE ID = ?") == (
            "UPDATE T SET A = :p0, B = :p1 WHERE ID = :p2"
        )

    def test_no_placeholders(self):
        assert _rewrite_placeholders("SELECT 1") == "SELECT 1"


class TestBridge:
    def test_satisfies_protocol(self, bridge):
        assert isinstance(bridge, Connection)

    def test_fetch_before_execute(self):
        conn = SAConnectionBridge(PeopleDBSession())
        assert conn.fetchone() is None
        assert conn.fetchall() == []
        assert conn.description is None

    def test_insert_and_select(self, bridge):
        cursor = bridge.execute("INSERT INTO ADDRESSES (CITY, REGION) VALUES (?, ?)", ("Anytown", "WEST"))
        assert cursor.lastrowid == 1
        cursor = bridge.execute("SELECT ID, CITY FROM ADDRESSES")
        assert [d[0] for d in cursor.description] == ["ID", "CITY"]
        assert cursor.fetchall() == [(1, "Anytown")]

    def test_executemany(self, bridge):
        bridge.executemany("INSERT INTO ADDRESSES (CITY) VALUES (?)", [("A",), ("B",)])
        assert bridge.execute("SELECT COUNT(*) FROM ADDRESSES").fetchone() == (2,)

    def test_rollback(self, bridge):
        bridge.execute("INSERT INTO ADDRESSES (CITY) VALUES (?)", ("A",))
        bridge.rollback()
        assert bridge.execute("SELECT COUNT(*) FROM ADDRESSES").fetchone() == (0,)


class TestRepositoryOverBridge:
    def test_save_and_find_person(self, bridge):
        repo = PeopleRepository(bridge, SQLiteDialect())
        home = Address("1 Main St.", "Springfield", "IL", "62701", "United States", "Sangamon", Region.CENTRAL)
        dob = datetime(1975, 3, 1, 8, 30, tzinfo=timezone(timedelta(hours=-6)))
        person = repo.save(Person("Jane", "Doe", dob, salary=Decimal("1200.50"), home_address=home))
        repo.commit()

        found = repo.find_by_id(person.id)
        assert found == person
        assert found.salary == Decimal("1200.50")
        assert found.home_address == home
        assert repo.count() == 1
