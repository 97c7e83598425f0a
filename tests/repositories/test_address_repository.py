"""Tests for AddressRepository.

Only SAVE and FIND_BY_ID are declared on the mapper, so the other
operations exercise the default SQL supplier.
"""

from __future__ import annotations

import pytest

from peopledb.models.people import Address, CrudOperation, Region
from peopledb.repositories.addresses import FIND_BY_ID_SQL, SAVE_ADDRESS_SQL, AddressMapper


class TestDeclaredOperations:
    def test_declared_bindings(self, address_repo):
        assert address_repo.registry.bindings(Address) == {
            CrudOperation.SAVE: SAVE_ADDRESS_SQL,
            CrudOperation.FIND_BY_ID: FIND_BY_ID_SQL,
        }

    def test_save_and_find(self, address_repo, make_address):
        saved = address_repo.save(make_address())
        assert saved.id > 0
        assert address_repo.find_by_id(saved.id) == saved

    def test_missing_is_none(self, address_repo):
        assert address_repo.find_by_id(404) is None

    def test_region_stored_upper_case(self, conn, address_repo, make_address):
        address_repo.save(make_address(region="central"))
        stored = conn.execute("SELECT REGION FROM ADDRESSES").fetchone()["REGION"]
        assert stored == "CENTRAL"

    def test_invalid_region_is_save_error(self, address_repo, make_address):
        from peopledb.core.errors import SaveError

        with pytest.raises(SaveError):
            address_repo.save(make_address(region="ATLANTIS"))

    def test_missing_region_is_save_error(self, address_repo, make_address):
        from peopledb.core.errors import SaveError

        with pytest.raises(SaveError) as exc_info:
            address_repo.save(make_address(region=None))
        assert isinstance(exc_info.value.cause, ValueError)
        assert address_repo.count() == 0


class TestSuppliedOperations:
    def test_find_all(self, address_repo, make_address):
        a = address_repo.save(make_address("1 A St."))
        b = address_repo.save(make_address("2 B St."))
        assert address_repo.find_all() == [a, b]

    def test_count(self, address_repo, make_address):
        assert address_repo.count() == 0
        address_repo.save(make_address())
        assert address_repo.count() == 1

    def test_update(self, address_repo, make_address):
        address = address_repo.save(make_address())
        address.city = "Seattle"
        address.region = Region.NORTH
        address_repo.update(address)
        found = address_repo.find_by_id(address.id)
        assert found.city == "Seattle"
        assert found.region is Region.NORTH

    def test_delete_batch(self, address_repo, make_address):
        a, b = address_repo.save(make_address("1 A St.")), address_repo.save(make_address("2 B St."))
        address_repo.delete(a, b)
        assert address_repo.count() == 0

    def test_supplier_declines_unknown_operations(self):
        assert AddressMapper().default_sql(CrudOperation.SAVE) is None
