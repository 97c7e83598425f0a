"""Tests for peopledb.core.connection and the SQLite adapter."""

from __future__ import annotations

import pytest

from peopledb.core.connection import ConnectionInfo, DatabaseTarget, create_connection, parse_database_url
from peopledb.core.dialect import PostgreSQLDialect, SQLiteDialect
from peopledb.core.protocols import Connection
from peopledb.core.schema import ADDRESSES_TABLE, PEOPLE_TABLE, create_schema, table_exists
from peopledb.core.sqlite_conn import SqliteConnection


class TestParseDatabaseUrl:
    @pytest.mark.parametrize("db", [None, "", "memory", ":memory:", "sqlite://", "sqlite:///:memory:"])
    def test_memory(self, db):
        assert parse_database_url(db) == DatabaseTarget("sqlite", None)

    def test_sqlite_relative_url(self):
        assert parse_database_url("sqlite:///data/people.db") == ("sqlite", "data/people.db")

    def test_sqlite_absolute_url(self):
        assert parse_database_url("sqlite:////var/db/people.db") == ("sqlite", "/var/db/people.db")

    def test_bare_path(self):
        assert parse_database_url("./people.db") == ("sqlite", "./people.db")

    @pytest.mark.parametrize(
        "url",
        ["postgresql://u:p@localhost/db", "postgres://u:p@localhost/db", "postgresql+psycopg://u:p@h/db"],
    )
    def test_postgres(self, url):
        assert parse_database_url(url) == ("postgresql", url)


class TestCreateConnection:
    def test_memory_connection(self):
        conn, info = create_connection("memory")
        assert isinstance(conn, SqliteConnection)
        assert isinstance(conn, Connection)
        assert info.backend == "sqlite"
        assert info.persistent is False
        assert isinstance(info.dialect, SQLiteDialect)
        conn.close()

    def test_init_schema_creates_tables(self):
        conn, _info = create_connection(None, init_schema=True)
        assert table_exists(conn, PEOPLE_TABLE)
        assert table_exists(conn, ADDRESSES_TABLE)
        conn.close()

    def test_file_connection_persists(self, tmp_path):
        path = tmp_path / "nested" / "people.db"
        conn, info = create_connection(str(path), init_schema=True)
        conn.execute("INSERT INTO ADDRESSES (CITY) VALUES (?)", ("Anytown",))
        conn.commit()
        conn.close()

        assert info.persistent is True
        assert info.path == str(path.resolve())

        conn2, _ = create_connection(f"sqlite:///{path}")
        rows = conn2.execute("SELECT CITY FROM ADDRESSES").fetchall()
        assert [r["CITY"] for r in rows] == ["Anytown"]
        conn2.close()


class TestConnectionInfo:
    def test_postgres(self):
        info = ConnectionInfo(backend="postgresql", url="postgresql://h/db")
        assert info.persistent is True
        assert isinstance(info.dialect, PostgreSQLDialect)

    def test_memory_is_not_persistent(self):
        assert ConnectionInfo(backend="sqlite", url=None).persistent is False


class TestSqliteConnection:
    def test_context_manager_commits(self, tmp_path):
        path = tmp_path / "ctx.db"
        with SqliteConnection(path) as conn:
            create_schema(conn)
            conn.execute("INSERT INTO ADDRESSES (CITY) VALUES (?)", ("Kept",))
        conn.close()

        reopened = SqliteConnection(path)
        assert reopened.execute("SELECT COUNT(*) AS N FROM ADDRESSES").fetchone()["N"] == 1
        reopened.close()

    def test_context_manager_rolls_back_on_error(self):
        conn = SqliteConnection()
        create_schema(conn)
        with pytest.raises(RuntimeError):
            with conn:
                conn.execute("INSERT INTO ADDRESSES (CITY) VALUES (?)", ("Lost",))
                assert conn.in_transaction
                raise RuntimeError("boom")
        assert conn.execute("SELECT COUNT(*) AS N FROM ADDRESSES").fetchone()["N"] == 0
        conn.close()

    def test_repr(self):
        conn = SqliteConnection()
        assert repr(conn) == "SqliteConnection(database=':memory:')"
        conn.close()


class TestSchema:
    def test_create_schema_is_idempotent(self):
        conn = SqliteConnection()
        assert create_schema(conn) == [ADDRESSES_TABLE, PEOPLE_TABLE]
        assert create_schema(conn) == [ADDRESSES_TABLE, PEOPLE_TABLE]
        conn.close()

    def test_salary_defaults_to_zero(self):
        conn = SqliteConnection()
        create_schema(conn)
        conn.execute("INSERT INTO PEOPLE (FIRST_NAME) VALUES (?)", ("Ann",))
        assert conn.execute("SELECT SALARY FROM PEOPLE").fetchone()["SALARY"] == 0
        conn.close()

    def test_missing_table(self):
        conn = SqliteConnection()
        assert table_exists(conn, PEOPLE_TABLE) is False
        conn.close()
