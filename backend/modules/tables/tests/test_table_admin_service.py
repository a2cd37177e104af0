import pytest

from core.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from modules.orders.enums.order_enums import OrderStatus
from modules.tables.schemas.table_schemas import (
    TableCreate,
    TableUpdate,
    has_active_orders,
    is_unique_table_number,
)
from modules.tables.services.table_admin_service import TableAdminService
from tests.factories import OrderFactory, TableFactory


@pytest.fixture
def admin(repository):
    return TableAdminService(repository)


class TestCreateTable:

    def test_create_table(self, admin, repository):
        table = admin.create_table(TableCreate(number=12, seats=6))

        assert table.number == 12
        assert table.seats == 6
        assert table.active is True
        assert repository.get_table(table.id) == table

    def test_duplicate_number_conflicts(self, admin):
        admin.create_table(TableCreate(number=3, seats=4))
        with pytest.raises(ConflictError):
            admin.create_table(TableCreate(number=3, seats=2))

    @pytest.mark.parametrize("number,seats", [(0, 4), (-1, 4), (3, 0)])
    def test_non_positive_values_rejected(self, admin, number, seats):
        with pytest.raises(ValidationError):
            admin.create_table(TableCreate(number=number, seats=seats))


class TestUpdateTable:

    def test_update_number_and_seats(self, admin):
        table = admin.create_table(TableCreate(number=1, seats=2))
        updated = admin.update_table(table.id, TableUpdate(number=9, seats=8))

        assert (updated.number, updated.seats) == (9, 8)

    def test_keeping_own_number_is_allowed(self, admin):
        table = admin.create_table(TableCreate(number=1, seats=2))
        assert admin.update_table(table.id, TableUpdate(number=1)).number == 1

    def test_taking_another_tables_number_conflicts(self, admin):
        admin.create_table(TableCreate(number=1, seats=2))
        other = admin.create_table(TableCreate(number=2, seats=2))

        with pytest.raises(ConflictError):
            admin.update_table(other.id, TableUpdate(number=1))


class TestDeleteTable:

    def test_delete_empty_table(self, admin, repository):
        table = admin.create_table(TableCreate(number=1, seats=2))
        admin.delete_table(table.id)

        with pytest.raises(NotFoundError):
            repository.get_table(table.id)

    def test_delete_table_with_orders_rejected(self, admin, repository):
        table = repository.save_table(TableFactory(orders=[OrderFactory(delivered=True)]))
        with pytest.raises(InvalidStateError):
            admin.delete_table(table.id)


class TestActivation:

    def test_deactivate_with_undelivered_orders_rejected(self, admin, repository):
        table = repository.save_table(
            TableFactory(orders=[OrderFactory(status=OrderStatus.PREPARING)])
        )
        with pytest.raises(InvalidStateError):
            admin.set_active(table.id, False)
        assert repository.get_table(table.id).active is True

    def test_deactivate_with_delivered_orders_allowed(self, admin, repository):
        table = repository.save_table(TableFactory(orders=[OrderFactory(delivered=True)]))
        assert admin.set_active(table.id, False).active is False

    def test_toggle_active(self, admin, repository):
        table = repository.save_table(TableFactory())

        assert admin.toggle_active(table.id).active is False
        assert admin.toggle_active(table.id).active is True


class TestPredicates:

    def test_has_active_orders(self):
        assert not has_active_orders(TableFactory())
        assert not has_active_orders(TableFactory(orders=[OrderFactory(delivered=True)]))
        assert has_active_orders(TableFactory(orders=[OrderFactory()]))

    def test_is_unique_table_number(self):
        tables = [TableFactory(id="a", number=1), TableFactory(id="b", number=2)]

        assert is_unique_table_number(tables, 3)
        assert not is_unique_table_number(tables, 2)
        assert is_unique_table_number(tables, 2, exclude_id="b")
