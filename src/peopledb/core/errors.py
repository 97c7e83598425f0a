"""
Structured error types for peopledb.

Every failure that leaves a repository is one of a small, closed set of
typed errors.  Driver exceptions (``sqlite3.Error``, SQLAlchemy's
``DBAPIError``, decoding errors) never escape: the executor
catches them at the operation boundary and chains them as ``cause`` of the
matching domain error.

Manifesto:
    - **Closed taxonomy:** Callers handle five error types, not driver internals
    - **Two families:** Broken mapping code vs a failing store
    - **Rich context:** Errors carry entity type, identity, operation and SQL
    - **Chaining:** The driver exception stays reachable as ``__cause__``

Architecture:
    ::

        PeopleDBError  (category, retryable, context, cause)
        │
        ├── DatabaseError         DATABASE   operational
        │   ├── SaveError         insert / update / identity assignment
        │   ├── LoadError         find_by_id / find_all / count
        │   └── DeleteError       single or batch delete
        │
        └── ConfigError           CONFIG     programming error
            ├── NoIdentityError   entity type declares no identity field
            └── NoSqlError        no SQL for (entity type, operation)

Examples:
    >>> err = LoadError("Unable to count Person entities").with_context(entity_type="Person")
    >>> err.category
    <ErrorCategory.DATABASE: 'DATABASE'>
    >>> is_configuration_error(err)
    False

Guardrails:
    ❌ DON'T: Let ``sqlite3.Error`` propagate out of a repository
    ✅ DO: Wrap it in SaveError / LoadError / DeleteError with ``cause=``

    ❌ DON'T: Raise for a missing row in ``find_by_id``
    ✅ DO: Return ``None``

Tags:
    error-handling, exception-hierarchy, error-context, peopledb
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    DATABASE = "DATABASE"  # query, write or transaction failed
    CONFIG = "CONFIG"  # identity metadata or SQL binding missing
    VALIDATION = "VALIDATION"  # entity state unfit for the operation
    INTERNAL = "INTERNAL"  # anything else


@dataclass
class ErrorContext:
    """Where an error happened.

    Attributes:
        entity_type: Entity class name (``"Person"``)
        entity_id: Identity involved, when known
        operation: CRUD operation name (``"SAVE"``, ``"FIND_BY_ID"``, ...)
        sql: Statement being executed
        metadata: Anything else (batch ids, ...)
    """

    entity_type: str | None = None
    entity_id: int | None = None
    operation: str | None = None
    sql: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Set fields only, with ``metadata`` flattened in."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "metadata" and getattr(self, f.name) is not None
        }
        return {**result, **self.metadata}


_CONTEXT_FIELDS = frozenset(f.name for f in fields(ErrorContext)) - {"metadata"}


class PeopleDBError(Exception):
    """Root of the peopledb error hierarchy.

    ``category`` and ``retryable`` default per subclass and may be overridden
    per instance.

    Examples:
        >>> PeopleDBError("Something went wrong").category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
    """

    category: ErrorCategory = ErrorCategory.INTERNAL
    retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        if category is not None:
            self.category = category
        if retryable is not None:
            self.retryable = retryable
        self.context = context if context is not None else ErrorContext()
        self.cause = cause
        self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> PeopleDBError:
        """Fill context fields (unknown keys land in ``metadata``); returns self.

        Usage:
            raise LoadError("Unable to find Person").with_context(entity_type="Person", entity_id=42)
        """
        for key, value in kwargs.items():
            if key in _CONTEXT_FIELDS:
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Log-friendly view of the error."""
        data: dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if context := self.context.to_dict():
            data["context"] = context
        if self.cause is not None:
            data["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return data

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


# -- operational --------------------------------------------------------------


class DatabaseError(PeopleDBError):
    """The store rejected or failed a statement."""

    category = ErrorCategory.DATABASE


class SaveError(DatabaseError):
    """Insert, update or identity assignment failed."""


class LoadError(DatabaseError):
    """Read failed.  A missing row is *not* a LoadError."""


class DeleteError(DatabaseError):
    """Single or batch delete failed.  A failed batch fails as a whole."""


# -- configuration ------------------------------------------------------------


class ConfigError(PeopleDBError):
    """Mapping metadata is wrong; fix the code, never retry."""

    category = ErrorCategory.CONFIG


class NoIdentityError(ConfigError):
    def __init__(self, entity_type: type, message: str | None = None):
        self.entity_type = entity_type
        super().__init__(
            message or f"No identity field declared on {entity_type.__name__}",
            context=ErrorContext(entity_type=entity_type.__name__),
        )


class NoSqlError(ConfigError):
    def __init__(self, entity_type: type, operation: Any, message: str | None = None):
        self.entity_type = entity_type
        self.operation = operation
        op_name = getattr(operation, "value", str(operation))
        super().__init__(
            message or f"No SQL resolvable for {op_name} on {entity_type.__name__}",
            context=ErrorContext(entity_type=entity_type.__name__, operation=op_name),
        )


def is_configuration_error(error: BaseException) -> bool:
    """True when ``error`` means broken mapping code rather than a failing store."""
    return isinstance(error, ConfigError)


__all__ = [
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
]
