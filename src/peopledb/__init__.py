"""
peopledb - metadata-driven persistence for people, addresses and families.

Quick start::

    from peopledb import PeopleRepository, Person, create_connection

    conn, info = create_connection("memory", init_schema=True)
    people = PeopleRepository(conn, info.dialect)
    people.save(Person("John", "Smith", dob))
    people.commit()
"""

__version__ = "0.1.0"

from peopledb.core import *  # noqa: F401,F403
from peopledb.core import __all__ as _core_all
from peopledb.models import Address, CrudOperation, Person, Region
from peopledb.repositories import AddressRepository, GraphReconstructor, PeopleRepository

__all__ = [
    *_core_all,
    "Address",
    "CrudOperation",
    "Person",
    "Region",
    "AddressRepository",
    "GraphReconstructor",
    "PeopleRepository",
    "__version__",
]
