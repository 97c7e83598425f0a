"""People repository: PEOPLE table and its aggregate graph.

Saving a person cascades to its unsaved home/secondary addresses (before
the INSERT, so their ids can be bound as foreign keys) and to its unsaved
children (after the INSERT, so they can point at the new parent id).  The
spouse is only referenced and must already be persisted.

Reads go through one join query per call and are regrouped by
:class:`~peopledb.repositories.graph.GraphReconstructor`.

Tags:
    peopledb, repository, people, aggregate
"""

from __future__ import annotations

from peopledb.core.cursor import RowCursor
from peopledb.core.dialect import Dialect
from peopledb.core.errors import SaveError
from peopledb.core.identity import IdentityResolver, default_resolver
from peopledb.core.logging import get_logger
from peopledb.core.protocols import Connection
from peopledb.core.registry import SqlBinding
from peopledb.core.repository import CrudExecutor
from peopledb.core.schema import ADDRESSES_TABLE, PEOPLE_TABLE
from peopledb.core.timestamps import to_storage
from peopledb.models.people import Address, CrudOperation, Person
from peopledb.repositories._columns import (
    ADDRESS_COLUMNS,
    CHILD_PREFIX,
    HOME_PREFIX,
    PARENT_PREFIX,
    PERSON_COLUMNS,
    SECONDARY_PREFIX,
    SPOUSE_HOME_PREFIX,
    SPOUSE_PREFIX,
    SPOUSE_SECONDARY_PREFIX,
    select_list,
)
from peopledb.repositories.addresses import AddressRepository
from peopledb.repositories.graph import GraphReconstructor

logger = get_logger(__name__)

INSERT_PERSON_SQL = (
    f"INSERT INTO {PEOPLE_TABLE} "
    "(FIRST_NAME, LAST_NAME, DOB, SALARY, EMAIL, HOME_ADDRESS, SECONDARY_ADDRESS, SPOUSE, PARENT_ID) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)"
)
UPDATE_PERSON_SQL = (
    f"UPDATE {PEOPLE_TABLE} SET FIRST_NAME = ?, LAST_NAME = ?, DOB = ?, SALARY = ? WHERE ID = ?"
)
DELETE_PERSON_SQL = f"DELETE FROM {PEOPLE_TABLE} WHERE ID = ?"
COUNT_PEOPLE_SQL = f"SELECT COUNT(*) AS COUNT FROM {PEOPLE_TABLE}"

_AGGREGATE_SELECT = f"""
    SELECT
        {select_list("parent", PARENT_PREFIX, PERSON_COLUMNS)},
        {select_list("child", CHILD_PREFIX, PERSON_COLUMNS)},
        {select_list("home", HOME_PREFIX, ADDRESS_COLUMNS)},
        {select_list("secondary", SECONDARY_PREFIX, ADDRESS_COLUMNS)},
        {select_list("spouse", SPOUSE_PREFIX, PERSON_COLUMNS)},
        {select_list("spouse_home", SPOUSE_HOME_PREFIX, ADDRESS_COLUMNS)},
        {select_list("spouse_secondary", SPOUSE_SECONDARY_PREFIX, ADDRESS_COLUMNS)}
    FROM {PEOPLE_TABLE} AS parent
    LEFT OUTER JOIN {PEOPLE_TABLE} AS child ON parent.ID = child.PARENT_ID
    LEFT OUTER JOIN {ADDRESSES_TABLE} AS home ON parent.HOME_ADDRESS = home.ID
    LEFT OUTER JOIN {ADDRESSES_TABLE} AS secondary ON parent.SECONDARY_ADDRESS = secondary.ID
    LEFT OUTER JOIN {PEOPLE_TABLE} AS spouse ON parent.SPOUSE = spouse.ID
    LEFT OUTER JOIN {ADDRESSES_TABLE} AS spouse_home ON spouse.HOME_ADDRESS = spouse_home.ID
    LEFT OUTER JOIN {ADDRESSES_TABLE} AS spouse_secondary ON spouse.SECONDARY_ADDRESS = spouse_secondary.ID
"""

FIND_BY_ID_SQL = f"{_AGGREGATE_SELECT}    WHERE parent.ID = ?\n    ORDER BY child.ID\n"
FIND_ALL_SQL = f"{_AGGREGATE_SELECT}    ORDER BY parent.ID, child.ID\n"


class PersonMapper:
    """Row mapping for :class:`Person` aggregates.

    Parameters:
        addresses: Repository used to cascade-save unsaved addresses.
        identity: Identity resolver shared with the executors.
    """

    entity_type = Person
    sql_bindings = (
        SqlBinding(CrudOperation.SAVE, INSERT_PERSON_SQL),
        SqlBinding(CrudOperation.UPDATE, UPDATE_PERSON_SQL),
        SqlBinding(CrudOperation.FIND_BY_ID, FIND_BY_ID_SQL),
        SqlBinding(CrudOperation.FIND_ALL, FIND_ALL_SQL),
        SqlBinding(CrudOperation.COUNT, COUNT_PEOPLE_SQL),
        SqlBinding(CrudOperation.DELETE, DELETE_PERSON_SQL),
    )

    def __init__(
        self,
        addresses: AddressRepository,
        identity: IdentityResolver | None = None,
        graph: GraphReconstructor | None = None,
    ) -> None:
        self.addresses = addresses
        self.identity = identity or default_resolver
        self.graph = graph or GraphReconstructor()

    def default_sql(self, operation: CrudOperation) -> str | None:
        return None

    # -- writes ------------------------------------------------------------

    def bind_for_save(self, person: Person) -> tuple:
        # Validate everything before the address cascade writes any rows
        dob = to_storage(person.date_of_birth)
        spouse_fk = self._spouse_fk(person.spouse)
        return (
            person.first_name,
            person.last_name,
            dob,
            str(person.salary),
            person.email,
            self._address_fk(person.home_address),
            self._address_fk(person.secondary_address),
            spouse_fk,
            person.parent_id,
        )

    def bind_for_update(self, person: Person, person_id: int) -> tuple:
        return (
            person.first_name,
            person.last_name,
            to_storage(person.date_of_birth),
            str(person.salary),
            person_id,
        )

    def post_save(self, executor: CrudExecutor[Person], person: Person, person_id: int) -> None:
        for child in person.children:
            if self.identity.get_id(child) is not None:
                continue
            child.parent_id = person_id
            executor.save(child)
            logger.debug("child_saved", parent_id=person_id, child_id=child.id)

    def _address_fk(self, address: Address | None) -> int | None:
        if address is None:
            return None
        if self.identity.get_id(address) is None:
            self.addresses.save(address)
        return self.identity.get_id(address)

    def _spouse_fk(self, spouse: Person | None) -> int | None:
        if spouse is None:
            return None
        spouse_id = self.identity.get_id(spouse)
        if spouse_id is None:
            raise SaveError("Spouse must be saved before it can be referenced").with_context(
                entity_type=Person.__name__, operation=CrudOperation.SAVE.value
            )
        return spouse_id

    # -- reads -------------------------------------------------------------

    def extract(self, cursor: RowCursor) -> Person | None:
        return self.graph.reconstruct(cursor)


class PeopleRepository(CrudExecutor[Person]):
    """CRUD for ``PEOPLE`` with address and child cascades on save.

    Example::

        conn, info = create_connection("people.db", init_schema=True)
        repo = PeopleRepository(conn, info.dialect)
        john = repo.save(Person("John", "Smith", dob))
        repo.commit()
    """

    def __init__(
        self,
        conn: Connection,
        dialect: Dialect | None = None,
        *,
        identity: IdentityResolver | None = None,
    ) -> None:
        identity = identity or default_resolver
        self.addresses = AddressRepository(conn, dialect, identity=identity)
        super().__init__(conn, PersonMapper(self.addresses, identity), dialect, identity=identity)


__all__ = [
    "PersonMapper",
    "PeopleRepository",
    "INSERT_PERSON_SQL",
    "UPDATE_PERSON_SQL",
    "DELETE_PERSON_SQL",
    "COUNT_PEOPLE_SQL",
    "FIND_BY_ID_SQL",
    "FIND_ALL_SQL",
]
