"""Tests for CrudExecutor with a minimal single-table mapper.

Covers the generic machinery independently of the people model:
- SQL resolution through the registry
- identity assignment on save
- driver failures wrapped in SaveError / LoadError / DeleteError
- row normalisation in ``query``
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

import pytest

from peopledb.core.cursor import RowCursor
from peopledb.core.errors import DeleteError, LoadError, NoSqlError, SaveError
from peopledb.core.identity import identity
from peopledb.core.registry import SqlBinding
from peopledb.core.repository import CrudExecutor
from peopledb.core.sqlite_conn import SqliteConnection
from peopledb.models.people import CrudOperation


@dataclass
class Tag:
    label: str
    tag_id: int | None = identity()


class TagMapper:
    entity_type = Tag
    sql_bindings = (
        SqlBinding(CrudOperation.SAVE, "INSERT INTO TAGS (LABEL) VALUES (?)"),
        SqlBinding(CrudOperation.FIND_BY_ID, "SELECT id, label FROM TAGS WHERE ID = ?"),
        SqlBinding(CrudOperation.FIND_ALL, "SELECT id, label FROM TAGS ORDER BY ID"),
        SqlBinding(CrudOperation.UPDATE, "UPDATE TAGS SET LABEL = ? WHERE ID = ?"),
        SqlBinding(CrudOperation.DELETE, "DELETE FROM TAGS WHERE ID = ?"),
    )

    def __init__(self):
        self.saved = []

    def default_sql(self, operation):
        if operation is CrudOperation.COUNT:
            return "SELECT COUNT(*) AS count FROM TAGS"
        return None

    def bind_for_save(self, tag):
        return (tag.label,)

    def bind_for_update(self, tag, tag_id):
        return (tag.label, tag_id)

    def extract(self, cursor: RowCursor):
        row = cursor.next()
        return Tag(row["LABEL"], tag_id=row["ID"])

    def post_save(self, executor, tag, tag_id):
        self.saved.append(tag_id)


class LazyMapper(TagMapper):
    """Mapper whose extract never advances the cursor."""

    def extract(self, cursor):
        return None


@pytest.fixture
def tag_conn():
    conn = SqliteConnection()
    conn.execute("CREATE TABLE TAGS (ID INTEGER PRIMARY KEY AUTOINCREMENT, LABEL TEXT)")
    yield conn
    conn.close()


@pytest.fixture
def tags(tag_conn):
    return CrudExecutor(tag_conn, TagMapper())


class TestSave:
    def test_assigns_generated_identity(self, tags):
        tag = tags.save(Tag("red"))
        assert tag.tag_id == 1
        assert tags.save(Tag("blue")).tag_id == 2

    def test_runs_post_save_with_identity(self, tags):
        tags.save(Tag("red"))
        assert tags.mapper.saved == [1]

    def test_resave_raises(self, tags):
        tag = tags.save(Tag("red"))
        with pytest.raises(SaveError, match="already persisted"):
            tags.save(tag)

    def test_driver_error_is_wrapped(self):
        executor = CrudExecutor(SqliteConnection(), TagMapper())
        with pytest.raises(SaveError) as exc_info:
            executor.save(Tag("red"))
        assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)
        assert exc_info.value.context.operation == "SAVE"
        assert exc_info.value.context.entity_type == "Tag"


class TestFind:
    def test_find_by_id(self, tags):
        tags.save(Tag("red"))
        assert tags.find_by_id(1) == Tag("red", tag_id=1)

    def test_missing_is_none(self, tags):
        assert tags.find_by_id(99) is None

    def test_find_all_ordered(self, tags):
        for label in ("a", "b", "c"):
            tags.save(Tag(label))
        assert [t.label for t in tags.find_all()] == ["a", "b", "c"]

    def test_find_all_empty(self, tags):
        assert tags.find_all() == []

    def test_extract_must_consume(self, tag_conn):
        executor = CrudExecutor(tag_conn, LazyMapper())
        executor.save(Tag("red"))
        with pytest.raises(LoadError, match="consumed no rows"):
            executor.find_all()

    def test_driver_error_is_wrapped(self):
        executor = CrudExecutor(SqliteConnection(), TagMapper())
        with pytest.raises(LoadError) as exc_info:
            executor.find_by_id(1)
        assert exc_info.value.context.entity_id == 1
        with pytest.raises(LoadError):
            executor.find_all()


class TestUpdate:
    def test_update(self, tags):
        tag = tags.save(Tag("red"))
        tag.label = "green"
        tags.update(tag)
        assert tags.find_by_id(tag.tag_id).label == "green"

    def test_update_unsaved_raises(self, tags):
        with pytest.raises(SaveError, match="unsaved"):
            tags.update(Tag("red"))


class TestDelete:
    def test_single(self, tags):
        tag = tags.save(Tag("red"))
        tags.delete(tag)
        assert tags.find_by_id(tag.tag_id) is None

    def test_batch(self, tags):
        a, b, c = tags.save(Tag("a")), tags.save(Tag("b")), tags.save(Tag("c"))
        tags.delete(a, c)
        assert [t.label for t in tags.find_all()] == ["b"]

    def test_nothing_to_delete(self, tags):
        tags.delete()
        assert tags.count() == 0

    def test_unsaved_raises(self, tags):
        with pytest.raises(DeleteError):
            tags.delete(Tag("red"))

    def test_driver_error_is_wrapped(self):
        executor = CrudExecutor(SqliteConnection(), TagMapper())
        with pytest.raises(DeleteError) as exc_info:
            executor.delete(Tag("a", tag_id=1), Tag("b", tag_id=2))
        assert exc_info.value.context.metadata["ids"] == [1, 2]


class TestCount:
    def test_count_via_default_supplier(self, tags):
        """Lower-case alias still reads as COUNT."""
        tags.save(Tag("a"))
        tags.save(Tag("b"))
        assert tags.count() == 2

    def test_driver_error_is_wrapped(self):
        with pytest.raises(LoadError):
            CrudExecutor(SqliteConnection(), TagMapper()).count()


class TestSqlResolution:
    def test_unsupported_operation(self, tags):
        class NoCount(TagMapper):
            def default_sql(self, operation):
                return None

        executor = CrudExecutor(tags.conn, NoCount())
        with pytest.raises(NoSqlError):
            executor.count()


class TestQuery:
    def test_keys_are_upper_case(self, tags):
        tags.save(Tag("red"))
        assert tags.query("SELECT id, label AS lbl FROM TAGS") == [{"ID": 1, "LBL": "red"}]

    def test_tuple_rows_use_description(self):
        conn = SqliteConnection(row_factory=None)
        conn.execute("CREATE TABLE TAGS (ID INTEGER PRIMARY KEY AUTOINCREMENT, LABEL TEXT)")
        executor = CrudExecutor(conn, TagMapper())
        executor.save(Tag("red"))
        assert executor.query("SELECT id, label FROM TAGS") == [{"ID": 1, "LABEL": "red"}]
        conn.close()
