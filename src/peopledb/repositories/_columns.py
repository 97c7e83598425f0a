"""Column names, join aliases and prefix-aware row decoders.

A single find query carries several logical entities per row, each under
its own column prefix.  The same decoder is reused for every prefix:

==================  ==============================================
Prefix              Entity
==================  ==============================================
``PARENT_``         the aggregate root (PEOPLE)
``CHILD_``          one child per fan-out row (PEOPLE)
``SPOUSE_``         the root's spouse (PEOPLE)
``HOME_``           root home address (ADDRESSES)
``SECONDARY_``      root secondary address (ADDRESSES)
``SPOUSE_HOME_``    spouse home address (ADDRESSES)
``SPOUSE_SECONDARY_`` spouse secondary address (ADDRESSES)
==================  ==============================================

A NULL identity column means the association is absent.

Tags:
    peopledb, repository, helpers
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from peopledb.core.timestamps import from_storage
from peopledb.models.people import Address, Person, Region

# -- PEOPLE -------------------------------------------------------------------

ID = "ID"
FIRST_NAME = "FIRST_NAME"
LAST_NAME = "LAST_NAME"
DOB = "DOB"
SALARY = "SALARY"
EMAIL = "EMAIL"
HOME_ADDRESS = "HOME_ADDRESS"
SECONDARY_ADDRESS = "SECONDARY_ADDRESS"
SPOUSE = "SPOUSE"
PARENT_ID = "PARENT_ID"

PERSON_COLUMNS = (ID, FIRST_NAME, LAST_NAME, DOB, SALARY, EMAIL, PARENT_ID)

# -- ADDRESSES ----------------------------------------------------------------

STREET_ADDRESS = "STREET_ADDRESS"
ADDRESS2 = "ADDRESS2"
CITY = "CITY"
STATE = "STATE"
POSTCODE = "POSTCODE"
COUNTRY = "COUNTRY"
COUNTY = "COUNTY"
REGION = "REGION"

ADDRESS_COLUMNS = (ID, STREET_ADDRESS, ADDRESS2, CITY, STATE, POSTCODE, COUNTRY, COUNTY, REGION)

# -- Prefixes -----------------------------------------------------------------

PARENT_PREFIX = "PARENT_"
CHILD_PREFIX = "CHILD_"
SPOUSE_PREFIX = "SPOUSE_"
HOME_PREFIX = "HOME_"
SECONDARY_PREFIX = "SECONDARY_"
SPOUSE_HOME_PREFIX = "SPOUSE_HOME_"
SPOUSE_SECONDARY_PREFIX = "SPOUSE_SECONDARY_"


def select_list(alias: str, prefix: str, columns: tuple[str, ...]) -> str:
    """``alias.COL AS PREFIXCOL, ...`` for one joined table."""
    return ", ".join(f"{alias}.{col} AS {prefix}{col}" for col in columns)


def _decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def decode_address(row: Mapping[str, Any], prefix: str = "") -> Address | None:
    """Decode the address under ``prefix``; None when its ID column is NULL."""
    address_id = row.get(prefix + ID)
    if address_id is None:
        return None
    region = row[prefix + REGION]
    return Address(
        street_address=row[prefix + STREET_ADDRESS],
        address2=row[prefix + ADDRESS2],
        city=row[prefix + CITY],
        state=row[prefix + STATE],
        postcode=row[prefix + POSTCODE],
        country=row[prefix + COUNTRY],
        county=row[prefix + COUNTY],
        region=Region.parse(region),
        id=int(address_id),
    )


def decode_person(row: Mapping[str, Any], prefix: str) -> Person | None:
    """Decode the scalar columns of the person under ``prefix``.

    Associations (addresses, spouse, children) are left empty; the graph
    reconstructor decides which of them to hydrate.
    """
    person_id = row.get(prefix + ID)
    if person_id is None:
        return None
    parent_id = row.get(prefix + PARENT_ID)
    return Person(
        first_name=row[prefix + FIRST_NAME],
        last_name=row[prefix + LAST_NAME],
        date_of_birth=from_storage(row[prefix + DOB]),
        salary=_decimal(row.get(prefix + SALARY)),
        email=row.get(prefix + EMAIL),
        parent_id=int(parent_id) if parent_id is not None else None,
        id=int(person_id),
    )
