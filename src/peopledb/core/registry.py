"""
SQL metadata registry: (entity type, CRUD operation) → SQL text.

Each row mapper declares its statements as an ordered tuple of
:class:`SqlBinding` records.  A repository builds one
:class:`MetadataRegistry` at construction time; lookups afterwards are
plain dictionary reads.

Resolution order for ``resolve(entity_type, operation)``:

1. The first binding declared for that operation (declaration order wins,
   later duplicates are ignored).
2. The default supplier registered for the entity type, called with the
   operation.
3. :class:`~peopledb.core.errors.NoSqlError` if the supplier returns
   ``None`` or an empty string.

Examples:
    >>> registry = MetadataRegistry()
    >>> registry.register(
    ...     Address,
    ...     [SqlBinding(CrudOperation.SAVE, "INSERT INTO ADDRESSES ...")],
    ...     default_supplier=lambda op: "SELECT COUNT(*) AS COUNT FROM ADDRESSES"
    ...     if op is CrudOperation.COUNT else None,
    ... )
    >>> registry.resolve(Address, CrudOperation.COUNT)
    'SELECT COUNT(*) AS COUNT FROM ADDRESSES'

Tags:
    registry, sql, metadata, peopledb
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from peopledb.core.errors import NoSqlError

DefaultSqlSupplier = Callable[[Any], "str | None"]


@dataclass(frozen=True)
class SqlBinding:
    """One SQL statement bound to the CRUD operation it serves."""

    operation: Any
    sql: str


def _no_default(operation: Any) -> None:
    return None


class MetadataRegistry:
    """Immutable-per-type table of SQL bindings with a fallback supplier."""

    def __init__(self) -> None:
        self._tables: dict[type, MappingProxyType] = {}
        self._defaults: dict[type, DefaultSqlSupplier] = {}

    def register(
        self,
        entity_type: type,
        bindings: Iterable[SqlBinding],
        default_supplier: DefaultSqlSupplier | None = None,
    ) -> None:
        """Register the bindings of ``entity_type``.

        Registering the same type twice replaces the earlier table.
        """
        table: dict[Any, str] = {}
        for binding in bindings:
            table.setdefault(binding.operation, binding.sql)
        self._tables[entity_type] = MappingProxyType(table)
        self._defaults[entity_type] = default_supplier or _no_default

    def resolve(self, entity_type: type, operation: Any) -> str:
        table = self._tables.get(entity_type, {})
        sql = table.get(operation)
        if sql:
            return sql
        supplier = self._defaults.get(entity_type, _no_default)
        sql = supplier(operation)
        if not sql:
            raise NoSqlError(entity_type, operation)
        return sql

    def bindings(self, entity_type: type) -> dict[Any, str]:
        """Declared (not supplied) bindings of ``entity_type``, in resolution order."""
        return dict(self._tables.get(entity_type, {}))

    def __contains__(self, entity_type: object) -> bool:
        return entity_type in self._tables


__all__ = ["SqlBinding", "MetadataRegistry", "DefaultSqlSupplier"]
