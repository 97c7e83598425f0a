"""Generic, metadata-driven CRUD executor.

Provides :class:`CrudExecutor`, which pairs a
:class:`~peopledb.core.protocols.Connection` and a
:class:`~peopledb.core.dialect.Dialect` with a per-entity
:class:`RowMapper` strategy.  The executor owns the statement lifecycle
and error translation; the mapper owns everything entity-specific.

Architecture::

    ┌────────────────────────────────────────────────────────────────────┐
    │                        CrudExecutor[T]                             │
    │                                                                    │
    │   registry: MetadataRegistry  ← (type, op) → SQL                   │
    │   mapper:   RowMapper[T]      ← bind / extract / post_save         │
    │   identity: IdentityResolver  ← declared identity field            │
    │                                                                    │
    │   save(entity)          → entity (identity assigned)               │
    │   find_by_id(id)        → entity | None                            │
    │   find_all()            → list[entity]                             │
    │   update(entity)        → None                                     │
    │   delete(*entities)     → None  (batch when more than one)         │
    │   count()               → int                                      │
    └────────────────────────────────────────────────────────────────────┘

Every driver failure is caught at the operation boundary and re-raised as
:class:`~peopledb.core.errors.SaveError`, :class:`LoadError` or
:class:`DeleteError` with the original exception chained.  A missing row
in ``find_by_id`` is ``None``, never an error.

Tags:
    repository, crud, database, peopledb
"""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from decimal import InvalidOperation
from typing import Any, Generic, Protocol, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from peopledb.core.cursor import RowCursor
from peopledb.core.dialect import Dialect, SQLiteDialect
from peopledb.core.errors import (
    DeleteError,
    LoadError,
    PeopleDBError,
    SaveError,
)
from peopledb.core.identity import IdentityResolver, default_resolver
from peopledb.core.logging import get_logger
from peopledb.core.protocols import Connection
from peopledb.core.registry import MetadataRegistry, SqlBinding
from peopledb.models.people import CrudOperation

logger = get_logger(__name__)

T = TypeVar("T")

# Failures raised while talking to the driver or decoding what it returned
DATA_ACCESS_ERRORS: tuple[type[BaseException], ...] = (
    sqlite3.Error,
    SQLAlchemyError,
    ValueError,
    KeyError,
    InvalidOperation,
)


class RowMapper(Protocol[T]):
    """Per-entity mapping strategy used by :class:`CrudExecutor`."""

    entity_type: type
    sql_bindings: Sequence[SqlBinding]

    def default_sql(self, operation: CrudOperation) -> str | None:
        """SQL for operations without a declared binding (None if unsupported)."""
        ...

    def bind_for_save(self, entity: T) -> tuple:
        """Positional INSERT parameters, in declared column order."""
        ...

    def bind_for_update(self, entity: T, entity_id: int) -> tuple:
        """Positional UPDATE parameters; the identity is bound last."""
        ...

    def extract(self, cursor: RowCursor) -> T | None:
        """Decode the next entity, consuming at least one row."""
        ...

    def post_save(self, executor: CrudExecutor[T], entity: T, entity_id: int) -> None:
        """Hook run once the entity has its identity."""
        ...


class CrudExecutor(Generic[T]):
    """Generic CRUD operations over one entity type.

    Parameters:
        conn: Any object satisfying the :class:`Connection` protocol.
        mapper: The entity's :class:`RowMapper` strategy.
        dialect: SQL dialect.  Defaults to :class:`SQLiteDialect`.
        identity: Identity resolver.  Defaults to the process-wide one.
    """

    def __init__(
        self,
        conn: Connection,
        mapper: RowMapper[T],
        dialect: Dialect | None = None,
        *,
        identity: IdentityResolver | None = None,
    ) -> None:
        self.conn = conn
        self.mapper = mapper
        self.dialect: Dialect = dialect or SQLiteDialect()
        self.identity = identity or default_resolver
        self.entity_type: type = mapper.entity_type
        self.registry = MetadataRegistry()
        self.registry.register(self.entity_type, mapper.sql_bindings, mapper.default_sql)

    # -- SQL resolution ----------------------------------------------------

    def sql(self, operation: CrudOperation) -> str:
        """SQL text for ``operation`` on this executor's entity type."""
        return self.registry.resolve(self.entity_type, operation)

    # -- Query helpers -----------------------------------------------------

    def query(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        """Execute a SELECT and return rows as dicts keyed by upper-case column name."""
        cursor = self.conn.execute(sql, params)
        rows = cursor.fetchall()
        if not rows:
            return []

        # sqlite3.Row exposes keys(); plain tuples need cursor.description
        if hasattr(rows[0], "keys"):
            return [{str(k).upper(): row[k] for k in row.keys()} for row in rows]

        columns = [str(desc[0]).upper() for desc in cursor.description]
        return [dict(zip(columns, row, strict=False)) for row in rows]

    def commit(self) -> None:
        """Commit the current transaction."""
        self.conn.commit()

    def rollback(self) -> None:
        """Roll back the current transaction."""
        self.conn.rollback()

    # -- CRUD --------------------------------------------------------------

    def save(self, entity: T) -> T:
        """Insert ``entity``, assign its generated identity and run the post-save hook."""
        type_name = self.entity_type.__name__
        if self.identity.get_id(entity) is not None:
            raise SaveError(f"{type_name} is already persisted").with_context(
                entity_type=type_name,
                entity_id=self.identity.get_id(entity),
                operation=CrudOperation.SAVE.value,
            )

        sql = self.dialect.insert_returning_id(self.sql(CrudOperation.SAVE))
        try:
            params = self.mapper.bind_for_save(entity)
            cursor = self.conn.execute(sql, params)
            new_id = self.dialect.generated_id(cursor)
        except PeopleDBError:
            raise
        except DATA_ACCESS_ERRORS as exc:
            logger.error("save_failed", entity_type=type_name, error=str(exc))
            raise SaveError(f"Unable to save {type_name}: {entity!r}", cause=exc).with_context(
                entity_type=type_name, operation=CrudOperation.SAVE.value, sql=sql
            ) from exc

        if new_id is None:
            raise SaveError(f"No generated identity returned for {type_name}").with_context(
                entity_type=type_name, operation=CrudOperation.SAVE.value, sql=sql
            )

        self.identity.set_id(entity, int(new_id))
        logger.debug("entity_saved", entity_type=type_name, entity_id=int(new_id))
        self.mapper.post_save(self, entity, int(new_id))
        return entity

    def find_by_id(self, entity_id: int) -> T | None:
        """Load one aggregate by identity, or ``None`` if there is no such row."""
        type_name = self.entity_type.__name__
        sql = self.sql(CrudOperation.FIND_BY_ID)
        try:
            rows = self.query(sql, (entity_id,))
            if not rows:
                return None
            entity = self.mapper.extract(RowCursor(rows))
        except PeopleDBError:
            raise
        except DATA_ACCESS_ERRORS as exc:
            logger.error("load_failed", entity_type=type_name, entity_id=entity_id, error=str(exc))
            raise LoadError(f"Unable to find {type_name} with id: {entity_id}", cause=exc).with_context(
                entity_type=type_name,
                entity_id=entity_id,
                operation=CrudOperation.FIND_BY_ID.value,
                sql=sql,
            ) from exc

        logger.debug("entities_loaded", entity_type=type_name, entity_id=entity_id, rows=len(rows))
        return entity

    def find_all(self) -> list[T]:
        """Load every aggregate; one entity per group of rows."""
        type_name = self.entity_type.__name__
        sql = self.sql(CrudOperation.FIND_ALL)
        entities: list[T] = []
        try:
            cursor = RowCursor(self.query(sql))
            while not cursor.exhausted:
                start = cursor.position
                entity = self.mapper.extract(cursor)
                if cursor.position == start:
                    raise LoadError(f"{type(self.mapper).__name__}.extract consumed no rows")
                if entity is not None:
                    entities.append(entity)
        except PeopleDBError:
            raise
        except DATA_ACCESS_ERRORS as exc:
            logger.error("load_failed", entity_type=type_name, error=str(exc))
            raise LoadError(f"Unable to find {type_name} entities", cause=exc).with_context(
                entity_type=type_name, operation=CrudOperation.FIND_ALL.value, sql=sql
            ) from exc

        logger.debug("entities_loaded", entity_type=type_name, count=len(entities), rows=len(cursor))
        return entities

    def update(self, entity: T) -> None:
        """Write the mutable columns of a persisted entity."""
        type_name = self.entity_type.__name__
        entity_id = self.identity.get_id(entity)
        if entity_id is None:
            raise SaveError(f"Cannot update unsaved {type_name}").with_context(
                entity_type=type_name, operation=CrudOperation.UPDATE.value
            )

        sql = self.sql(CrudOperation.UPDATE)
        try:
            self.conn.execute(sql, self.mapper.bind_for_update(entity, entity_id))
        except PeopleDBError:
            raise
        except DATA_ACCESS_ERRORS as exc:
            logger.error("update_failed", entity_type=type_name, entity_id=entity_id, error=str(exc))
            raise SaveError(f"Unable to update {type_name} with id: {entity_id}", cause=exc).with_context(
                entity_type=type_name,
                entity_id=entity_id,
                operation=CrudOperation.UPDATE.value,
                sql=sql,
            ) from exc

        logger.debug("entity_updated", entity_type=type_name, entity_id=entity_id)

    def delete(self, *entities: T) -> None:
        """Delete one entity, or several as a single batch.

        Dependants (addresses, children) are not touched.  If the batch
        fails, the whole call fails; no partial result is reported.
        """
        type_name = self.entity_type.__name__
        if not entities:
            return

        ids = [self.identity.get_id(entity) for entity in entities]
        if any(entity_id is None for entity_id in ids):
            raise DeleteError(f"Cannot delete unsaved {type_name}").with_context(
                entity_type=type_name, operation=CrudOperation.DELETE.value
            )

        sql = self.sql(CrudOperation.DELETE)
        try:
            if len(ids) == 1:
                self.conn.execute(sql, (ids[0],))
            else:
                self.conn.executemany(sql, [(entity_id,) for entity_id in ids])
        except DATA_ACCESS_ERRORS as exc:
            logger.error("delete_failed", entity_type=type_name, ids=ids, error=str(exc))
            raise DeleteError(f"Unable to delete {type_name} entities: {ids}", cause=exc).with_context(
                entity_type=type_name, operation=CrudOperation.DELETE.value, sql=sql, ids=ids
            ) from exc

        logger.debug("entities_deleted", entity_type=type_name, ids=ids)

    def count(self) -> int:
        """Number of rows, read from the ``COUNT`` column of the single result row."""
        type_name = self.entity_type.__name__
        sql = self.sql(CrudOperation.COUNT)
        try:
            rows = self.query(sql)
            return int(rows[0]["COUNT"]) if rows else 0
        except DATA_ACCESS_ERRORS as exc:
            logger.error("count_failed", entity_type=type_name, error=str(exc))
            raise LoadError(f"Unable to count {type_name} entities", cause=exc).with_context(
                entity_type=type_name, operation=CrudOperation.COUNT.value, sql=sql
            ) from exc


__all__ = [
    "CrudExecutor",
    "RowMapper",
    "DATA_ACCESS_ERRORS",
]
