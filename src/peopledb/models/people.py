"""People and address models (PEOPLE / ADDRESSES tables).

Models for the two persisted entity types.  Both declare their identity
with :func:`~peopledb.core.identity.identity`; it is ``None`` until the
first successful save.

Tags:
    peopledb, models, dataclasses, schema-mapping
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from peopledb.core.identity import identity


class Region(str, Enum):
    """Closed set of address regions, stored upper case."""

    NORTH = "NORTH"
    SOUTH = "SOUTH"
    EAST = "EAST"
    WEST = "WEST"
    CENTRAL = "CENTRAL"

    @classmethod
    def parse(cls, value: str | Region) -> Region:
        """Case-insensitive lookup (``"west"`` → ``Region.WEST``)."""
        if isinstance(value, Region):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Region must be a string, got {value!r}")
        return cls(value.strip().upper())


class CrudOperation(str, Enum):
    SAVE = "SAVE"
    FIND_BY_ID = "FIND_BY_ID"
    FIND_ALL = "FIND_ALL"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    COUNT = "COUNT"


@dataclass
class Address:
    """A row in ``ADDRESSES``."""

    street_address: str
    city: str
    state: str
    postcode: str
    country: str
    county: str
    region: Region
    address2: str | None = None
    id: int | None = identity()


@dataclass(eq=False)
class Person:
    """A row in ``PEOPLE`` plus its associations.

    ``spouse`` is a non-owning reference, hydrated one level deep on read.
    ``children`` is owned: saved with the parent, filled on read from the
    join, and deduplicated by identity.
    """

    first_name: str
    last_name: str
    date_of_birth: datetime
    salary: Decimal = Decimal("0")
    email: str | None = None
    home_address: Address | None = None
    secondary_address: Address | None = None
    spouse: Person | None = field(default=None, repr=False)
    parent_id: int | None = None
    children: list[Person] = field(default_factory=list, repr=False)
    id: int | None = identity()

    def add_child(self, child: Person) -> bool:
        """Add ``child`` unless it is already present.  Returns True if added."""
        for existing in self.children:
            if existing is child:
                return False
            if child.id is not None and existing.id == child.id:
                return False
        self.children.append(child)
        return True

    def __eq__(self, other: object) -> bool:
        # Aware datetimes compare as instants, so offsets do not matter
        if self is other:
            return True
        if not isinstance(other, Person):
            return NotImplemented
        return (
            self.id == other.id
            and self.first_name == other.first_name
            and self.last_name == other.last_name
            and self.date_of_birth == other.date_of_birth
        )

    __hash__ = None  # type: ignore[assignment]
