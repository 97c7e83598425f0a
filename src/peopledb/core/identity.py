"""
Identity resolution by declared field metadata.

An entity marks its identity attribute when it declares its fields::

    @dataclass
    class Address:
        street_address: str
        id: int | None = identity()

``IdentityResolver`` finds that field once per entity type (cached) and
reads or assigns it.  Nothing depends on the attribute being called
``id``.  A type with no identity field is a programming error and raises
:class:`~peopledb.core.errors.NoIdentityError`.

Identity is set exactly once: assigning a different value to an entity
that already has one raises :class:`~peopledb.core.errors.SaveError`.

Tags:
    identity, metadata, dataclasses, peopledb
"""

from __future__ import annotations

import dataclasses
from typing import Any

from peopledb.core.errors import NoIdentityError, SaveError

IDENTITY_KEY = "identity"


def identity(default: int | None = None) -> Any:
    """Declare a dataclass field as the entity's identity."""
    return dataclasses.field(default=default, metadata={IDENTITY_KEY: True})


class IdentityResolver:
    """Reads and assigns the identity attribute declared on entity types."""

    def __init__(self) -> None:
        self._fields: dict[type, str] = {}

    def field_name(self, entity_type: type) -> str:
        """Name of the identity attribute of ``entity_type``."""
        try:
            return self._fields[entity_type]
        except KeyError:
            pass

        if not dataclasses.is_dataclass(entity_type):
            raise NoIdentityError(entity_type)
        for f in dataclasses.fields(entity_type):
            if f.metadata.get(IDENTITY_KEY):
                self._fields[entity_type] = f.name
                return f.name
        raise NoIdentityError(entity_type)

    def get_id(self, entity: Any) -> int | None:
        return getattr(entity, self.field_name(type(entity)))

    def set_id(self, entity: Any, value: int) -> None:
        name = self.field_name(type(entity))
        current = getattr(entity, name)
        if current is not None and current != value:
            raise SaveError(
                f"{type(entity).__name__} already has identity {current}; refusing to assign {value}"
            ).with_context(entity_type=type(entity).__name__, entity_id=current)
        setattr(entity, name, value)


#: Process-wide resolver; the per-type cache is immutable once filled.
default_resolver = IdentityResolver()


__all__ = ["IDENTITY_KEY", "identity", "IdentityResolver", "default_resolver"]
