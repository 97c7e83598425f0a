"""
Shared pytest fixtures for peopledb tests.

This module provides:
- An in-memory SQLite connection with the PEOPLE/ADDRESSES schema
- Repositories bound to that connection (rolled back after each test)
- Factories for addresses and people with realistic values

Usage:
    def test_something(people_repo, make_person):
        john = people_repo.save(make_person("John", "Smith"))
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from peopledb.core.dialect import SQLiteDialect
from peopledb.core.schema import create_schema
from peopledb.core.settings import get_settings
from peopledb.core.sqlite_conn import SqliteConnection
from peopledb.models.people import Address, Person, Region
from peopledb.repositories.addresses import AddressRepository
from peopledb.repositories.people import PeopleRepository

CST = timezone(timedelta(hours=-6))


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def conn() -> Generator[SqliteConnection, None, None]:
    """In-memory SQLite connection with both tables created."""
    connection = SqliteConnection(":memory:")
    create_schema(connection, SQLiteDialect())
    yield connection
    connection.rollback()
    connection.close()


@pytest.fixture
def people_repo(conn: SqliteConnection) -> PeopleRepository:
    return PeopleRepository(conn, SQLiteDialect())


@pytest.fixture
def address_repo(conn: SqliteConnection) -> AddressRepository:
    return AddressRepository(conn, SQLiteDialect())


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Settings are cached per process; reset around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Entity Factories
# =============================================================================


@pytest.fixture
def make_address() -> Callable[..., Address]:
    def _make(street: str = "123 Beale St.", **overrides) -> Address:
        values = dict(
            street_address=street,
            address2="Apt. 1A",
            city="Wala Wala",
            state="WA",
            postcode="90210",
            country="United States",
            county="Fulton County",
            region=Region.WEST,
        )
        values.update(overrides)
        return Address(**values)

    return _make


@pytest.fixture
def make_person() -> Callable[..., Person]:
    def _make(first: str = "John", last: str = "Smith", **overrides) -> Person:
        values = dict(
            date_of_birth=datetime(1980, 11, 15, 15, 15, tzinfo=CST),
            salary=Decimal("85000.00"),
            email=f"{first.lower()}.{last.lower()}@example.com",
        )
        values.update(overrides)
        return Person(first, last, **values)

    return _make
