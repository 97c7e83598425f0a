"""Tests for peopledb.core.dialect."""

import pytest

from peopledb.core.dialect import Dialect, PostgreSQLDialect, SQLiteDialect, get_dialect

INSERT = "INSERT INTO ADDRESSES (CITY) VALUES (?)"


class _FakeCursor:
    def __init__(self, lastrowid=None, row=None):
        self.lastrowid = lastrowid
        self._row = row

    def fetchone(self):
        return self._row


class TestSQLiteDialect:
    def test_satisfies_protocol(self):
        assert isinstance(SQLiteDialect(), Dialect)

    def test_insert_unchanged(self):
        assert SQLiteDialect().insert_returning_id(INSERT) == INSERT

    def test_generated_id_from_lastrowid(self):
        assert SQLiteDialect().generated_id(_FakeCursor(lastrowid=42)) == 42

    def test_auto_increment(self):
        assert "AUTOINCREMENT" in SQLiteDialect().auto_increment()


class TestPostgreSQLDialect:
    def test_satisfies_protocol(self):
        assert isinstance(PostgreSQLDialect(), Dialect)

    def test_insert_gets_returning_clause(self):
        assert PostgreSQLDialect().insert_returning_id(INSERT + ";") == INSERT + " RETURNING ID"

    def test_generated_id_from_returned_row(self):
        assert PostgreSQLDialect().generated_id(_FakeCursor(row=(7,))) == 7

    def test_generated_id_none_without_row(self):
        assert PostgreSQLDialect().generated_id(_FakeCursor(row=None)) is None

    def test_bigserial(self):
        assert PostgreSQLDialect().auto_increment() == "BIGSERIAL PRIMARY KEY"


class TestGetDialect:
    @pytest.mark.parametrize(
        "name,expected",
        [("sqlite", "sqlite"), ("SQLite", "sqlite"), ("postgresql", "postgresql"), ("postgres", "postgresql")],
    )
    def test_known(self, name, expected):
        assert get_dialect(name).name == expected

    def test_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown dialect"):
            get_dialect("oracle")
