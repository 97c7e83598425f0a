"""
DDL for the PEOPLE and ADDRESSES tables.

Schema management is outside the repositories' job; this module exists so
the CLI, tests and embedding applications can bootstrap a database.  All
statements are idempotent (``CREATE TABLE IF NOT EXISTS``).

Association columns (HOME_ADDRESS, SECONDARY_ADDRESS, SPOUSE, PARENT_ID)
hold plain integer ids without FOREIGN KEY constraints: deleting a person
or address leaves its dependants orphaned instead of failing.

Tables::

    ADDRESSES
    ┌────────────────┬──────────────────────────────────────────┐
    │ ID             │ generated integer identity               │
    │ STREET_ADDRESS │ ADDRESS2 (nullable) │ CITY │ STATE        │
    │ POSTCODE       │ COUNTRY │ COUNTY │ REGION (upper case)    │
    └────────────────┴──────────────────────────────────────────┘

    PEOPLE
    ┌────────────────┬──────────────────────────────────────────┐
    │ ID             │ generated integer identity               │
    │ FIRST_NAME     │ LAST_NAME │ DOB (UTC) │ SALARY │ EMAIL     │
    │ HOME_ADDRESS   │ → ADDRESSES.ID (nullable)                │
    │ SECONDARY_ADDRESS → ADDRESSES.ID (nullable)               │
    │ SPOUSE         │ → PEOPLE.ID (nullable)                   │
    │ PARENT_ID      │ → PEOPLE.ID (nullable)                   │
    └────────────────┴──────────────────────────────────────────┘

Tags:
    schema, ddl, peopledb
"""

from __future__ import annotations

from peopledb.core.dialect import Dialect, SQLiteDialect
from peopledb.core.logging import get_logger
from peopledb.core.protocols import Connection

logger = get_logger(__name__)

ADDRESSES_TABLE = "ADDRESSES"
PEOPLE_TABLE = "PEOPLE"


def addresses_ddl(dialect: Dialect) -> str:
    return f"""
        CREATE TABLE IF NOT EXISTS {ADDRESSES_TABLE} (
            ID {dialect.auto_increment()},
            STREET_ADDRESS VARCHAR(255),
            ADDRESS2 VARCHAR(255),
            CITY VARCHAR(255),
            STATE VARCHAR(255),
            POSTCODE VARCHAR(32),
            COUNTRY VARCHAR(255),
            COUNTY VARCHAR(255),
            REGION VARCHAR(16)
        )
    """


def people_ddl(dialect: Dialect) -> str:
    return f"""
        CREATE TABLE IF NOT EXISTS {PEOPLE_TABLE} (
            ID {dialect.auto_increment()},
            FIRST_NAME VARCHAR(255),
            LAST_NAME VARCHAR(255),
            DOB TIMESTAMP,
            SALARY NUMERIC(10, 2) DEFAULT 0,
            EMAIL VARCHAR(255),
            HOME_ADDRESS BIGINT,
            SECONDARY_ADDRESS BIGINT,
            SPOUSE BIGINT,
            PARENT_ID BIGINT
        )
    """


def create_schema(conn: Connection, dialect: Dialect | None = None) -> list[str]:
    """Create both tables (idempotent) and commit.  Returns the table names."""
    dialect = dialect or SQLiteDialect()
    conn.execute(addresses_ddl(dialect))
    conn.execute(people_ddl(dialect))
    conn.commit()
    logger.info("schema_created", dialect=dialect.name, tables=[ADDRESSES_TABLE, PEOPLE_TABLE])
    return [ADDRESSES_TABLE, PEOPLE_TABLE]


def table_exists(conn: Connection, table: str, dialect: Dialect | None = None) -> bool:
    dialect = dialect or SQLiteDialect()
    cursor = conn.execute(dialect.table_exists_query(), (table,))
    return cursor.fetchone() is not None


__all__ = [
    "ADDRESSES_TABLE",
    "PEOPLE_TABLE",
    "addresses_ddl",
    "people_ddl",
    "create_schema",
    "table_exists",
]
