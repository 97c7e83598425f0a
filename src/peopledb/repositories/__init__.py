"""Concrete repositories for the PEOPLE / ADDRESSES model."""

from peopledb.repositories.addresses import AddressMapper, AddressRepository
from peopledb.repositories.graph import GraphReconstructor
from peopledb.repositories.people import PeopleRepository, PersonMapper

__all__ = [
    "AddressMapper",
    "AddressRepository",
    "GraphReconstructor",
    "PeopleRepository",
    "PersonMapper",
]
