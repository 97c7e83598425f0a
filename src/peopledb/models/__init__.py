"""Dataclass models for the PEOPLE and ADDRESSES tables."""

from peopledb.models.people import Address, CrudOperation, Person, Region

__all__ = ["Address", "CrudOperation", "Person", "Region"]
