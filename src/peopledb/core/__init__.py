"""peopledb core -- connection, mapping and CRUD primitives.

Manifesto:
    A persistence layer for a small aggregate model needs a handful of
    parts that stay out of each other's way: a connection that any driver
    can satisfy, a table of SQL per entity type, a way to find the
    identity attribute, and one generic executor that runs the statements
    and turns driver failures into a closed set of domain errors.

    - **Protocol-first:** Connection and Dialect are protocols, not classes
    - **Metadata over convention:** SQL and identity are declared, never guessed
    - **Typed failures:** Driver exceptions never leave a repository

Architecture::

    Layer 1 -- Types & Errors
        errors.py          PeopleDBError hierarchy (SaveError, LoadError, ...)
        protocols.py       Connection protocol
        timestamps.py      UTC normalisation for DOB columns
        logging.py         structlog configuration

    Layer 2 -- Database
        dialect.py         SQLite / PostgreSQL fragments
        sqlite_conn.py     sqlite3 adapter
        orm/               SQLAlchemy bridge
        connection.py      create_connection(url)
        schema.py          PEOPLE / ADDRESSES DDL

    Layer 3 -- Mapping
        identity.py        IdentityResolver
        registry.py        MetadataRegistry, SqlBinding
        cursor.py          RowCursor with push-back
        repository.py      CrudExecutor, RowMapper

Tags:
    peopledb, core, persistence
"""

from peopledb.core.connection import ConnectionInfo, create_connection
from peopledb.core.cursor import RowCursor
from peopledb.core.dialect import Dialect, PostgreSQLDialect, SQLiteDialect, get_dialect
from peopledb.core.errors import (
    ConfigError,
    DatabaseError,
    DeleteError,
    ErrorCategory,
    ErrorContext,
    LoadError,
    NoIdentityError,
    NoSqlError,
    PeopleDBError,
    SaveError,
    is_configuration_error,
)
from peopledb.core.identity import IdentityResolver, default_resolver, identity
from peopledb.core.protocols import Connection
from peopledb.core.registry import MetadataRegistry, SqlBinding
from peopledb.core.repository import CrudExecutor, RowMapper
from peopledb.core.schema import create_schema
from peopledb.core.sqlite_conn import SqliteConnection

__all__ = [
    # connection
    "Connection",
    "ConnectionInfo",
    "SqliteConnection",
    "create_connection",
    "create_schema",
    # dialect
    "Dialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "get_dialect",
    # errors
    "ErrorCategory",
    "ErrorContext",
    "PeopleDBError",
    "DatabaseError",
    "SaveError",
    "LoadError",
    "DeleteError",
    "ConfigError",
    "NoIdentityError",
    "NoSqlError",
    "is_configuration_error",
    # mapping
    "IdentityResolver",
    "default_resolver",
    "identity",
    "MetadataRegistry",
    "SqlBinding",
    "RowCursor",
    "CrudExecutor",
    "RowMapper",
]
