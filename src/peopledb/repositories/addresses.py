"""Address repository: ADDRESSES table.

Tags:
    peopledb, repository, addresses
"""

from __future__ import annotations

from peopledb.core.cursor import RowCursor
from peopledb.core.dialect import Dialect
from peopledb.core.identity import IdentityResolver
from peopledb.core.protocols import Connection
from peopledb.core.registry import SqlBinding
from peopledb.core.repository import CrudExecutor
from peopledb.core.schema import ADDRESSES_TABLE
from peopledb.models.people import Address, CrudOperation, Region
from peopledb.repositories._columns import decode_address

SAVE_ADDRESS_SQL = (
    f"INSERT INTO {ADDRESSES_TABLE} "
    "(STREET_ADDRESS, ADDRESS2, CITY, STATE, POSTCODE, COUNTRY, COUNTY, REGION) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)"
)
FIND_BY_ID_SQL = f"SELECT * FROM {ADDRESSES_TABLE} WHERE ID = ?"


class AddressMapper:
    """Row mapping for :class:`Address`.

    Only SAVE and FIND_BY_ID are declared; the remaining operations come
    from :meth:`default_sql`.
    """

    entity_type = Address
    sql_bindings = (
        SqlBinding(CrudOperation.SAVE, SAVE_ADDRESS_SQL),
        SqlBinding(CrudOperation.FIND_BY_ID, FIND_BY_ID_SQL),
    )

    def default_sql(self, operation: CrudOperation) -> str | None:
        if operation is CrudOperation.FIND_ALL:
            return f"SELECT * FROM {ADDRESSES_TABLE} ORDER BY ID"
        if operation is CrudOperation.UPDATE:
            return (
                f"UPDATE {ADDRESSES_TABLE} SET STREET_ADDRESS = ?, ADDRESS2 = ?, CITY = ?, "
                "STATE = ?, POSTCODE = ?, COUNTRY = ?, COUNTY = ?, REGION = ? WHERE ID = ?"
            )
        if operation is CrudOperation.DELETE:
            return f"DELETE FROM {ADDRESSES_TABLE} WHERE ID = ?"
        if operation is CrudOperation.COUNT:
            return f"SELECT COUNT(*) AS COUNT FROM {ADDRESSES_TABLE}"
        return None

    def bind_for_save(self, address: Address) -> tuple:
        return (
            address.street_address,
            address.address2,
            address.city,
            address.state,
            address.postcode,
            address.country,
            address.county,
            Region.parse(address.region).value,
        )

    def bind_for_update(self, address: Address, address_id: int) -> tuple:
        return (*self.bind_for_save(address), address_id)

    def extract(self, cursor: RowCursor) -> Address | None:
        return decode_address(cursor.next())

    def post_save(self, executor: CrudExecutor[Address], address: Address, address_id: int) -> None:
        pass


class AddressRepository(CrudExecutor[Address]):
    """CRUD for ``ADDRESSES``."""

    def __init__(
        self,
        conn: Connection,
        dialect: Dialect | None = None,
        *,
        identity: IdentityResolver | None = None,
    ) -> None:
        super().__init__(conn, AddressMapper(), dialect, identity=identity)


__all__ = ["AddressMapper", "AddressRepository", "SAVE_ADDRESS_SQL", "FIND_BY_ID_SQL"]
