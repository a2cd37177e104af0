import pytest

from core.exceptions import InvalidStateError, NotFoundError, ValidationError
from modules.orders.enums.order_enums import OrderStatus
from modules.orders.schemas.order_schemas import Cart
from modules.orders.services.cart_service import add_items_to_cart
from modules.tables.models.table_models import TableStatus
from modules.tables.services.table_state_service import TableStateService
from tests.factories import OrderFactory, TableFactory


@pytest.fixture
def service(repository):
    return TableStateService(repository)


@pytest.fixture
def table(repository):
    return repository.save_table(TableFactory(number=5))


@pytest.fixture
def cart(menu_items):
    cart = add_items_to_cart(Cart(), menu_items["burger"], 1)
    return add_items_to_cart(cart, menu_items["soda"], 2)


def deliver(service, table_id, order_id):
    for status in (OrderStatus.PREPARING, OrderStatus.DONE, OrderStatus.DELIVERED):
        service.advance_order_status(table_id, order_id, status)


class TestStartService:

    def test_available_table_becomes_occupied(self, service, table):
        result = service.start_service(table.id, "john")

        assert result.status == TableStatus.OCCUPIED
        assert result.waiter_id == "john"

    def test_reserved_table_can_start(self, service, table):
        service.reserve(table.id, "mary")
        result = service.start_service(table.id, "john")

        assert result.status == TableStatus.OCCUPIED
        assert result.waiter_id == "john"

    def test_occupied_without_orders_can_restart(self, service, table):
        service.start_service(table.id, "john")
        result = service.start_service(table.id, "mary")
        assert result.waiter_id == "mary"

    def test_occupied_with_orders_is_rejected(self, service, table, cart):
        service.send_cart_to_kitchen(table.id, cart, "john")

        with pytest.raises(InvalidStateError):
            service.start_service(table.id, "mary")
        assert service.get_table(table.id).waiter_id == "john"

    def test_inactive_table_is_rejected(self, service, repository):
        table = repository.save_table(TableFactory(active=False))
        with pytest.raises(InvalidStateError):
            service.start_service(table.id, "john")

    def test_unknown_table(self, service):
        with pytest.raises(NotFoundError):
            service.start_service("missing", "john")


class TestReserveAndRelease:

    def test_reserve_only_from_available(self, service, table):
        service.reserve(table.id, "john")
        with pytest.raises(InvalidStateError):
            service.reserve(table.id, "mary")

    def test_release_reserved_table(self, service, table):
        service.reserve(table.id, "john")
        result = service.release(table.id)

        assert result.status == TableStatus.AVAILABLE
        assert result.waiter_id is None

    def test_release_occupied_table_without_orders(self, service, table):
        service.start_service(table.id, "john")
        assert service.release(table.id).status == TableStatus.AVAILABLE

    def test_release_with_orders_is_rejected(self, service, table, cart):
        service.send_cart_to_kitchen(table.id, cart, "john")
        with pytest.raises(InvalidStateError):
            service.release(table.id)

    def test_release_available_table_is_rejected(self, service, table):
        with pytest.raises(InvalidStateError):
            service.release(table.id)


class TestSendCartToKitchen:

    def test_send_creates_pending_order_and_clears_cart(self, service, table, cart):
        result = service.send_cart_to_kitchen(table.id, cart, "john")

        assert cart.is_empty
        assert result.status == TableStatus.OCCUPIED
        assert result.waiter_id == "john"
        assert len(result.orders) == 1
        order = result.orders[0]
        assert order.status == OrderStatus.PENDING
        assert [(i.menu_item_id, i.quantity) for i in order.items] == [("burger", 1), ("soda", 2)]

    def test_every_send_creates_a_new_order(self, service, table, menu_items):
        for _ in range(2):
            cart = add_items_to_cart(Cart(), menu_items["burger"], 1)
            service.send_cart_to_kitchen(table.id, cart, "john")

        orders = service.get_table(table.id).orders
        assert len(orders) == 2
        assert orders[0].id != orders[1].id

    def test_empty_cart_is_rejected(self, service, table):
        with pytest.raises(ValidationError):
            service.send_cart_to_kitchen(table.id, Cart(), "john")
        assert service.get_table(table.id).orders == []

    def test_menu_changes_do_not_touch_sent_orders(self, service, table, cart, repository, menu_items):
        service.send_cart_to_kitchen(table.id, cart, "john")
        repository.save_menu_item(menu_items["burger"].model_copy(update={"name": "Renamed"}))

        order = service.get_table(table.id).orders[0]
        assert order.items[0].name == "Artisan Burger"


class TestAdvanceOrderStatus:

    def test_advance_persists_status(self, service, table, cart):
        order_id = service.send_cart_to_kitchen(table.id, cart, "john").orders[0].id

        service.advance_order_status(table.id, order_id, OrderStatus.PREPARING)

        order = service.get_table(table.id).find_order(order_id)
        assert order.status == OrderStatus.PREPARING
        assert order.preparing_at is not None

    def test_unknown_order(self, service, table):
        with pytest.raises(NotFoundError):
            service.advance_order_status(table.id, "order-missing", OrderStatus.PREPARING)

    def test_regression_leaves_stored_order_untouched(self, service, table, cart):
        order_id = service.send_cart_to_kitchen(table.id, cart, "john").orders[0].id
        service.advance_order_status(table.id, order_id, OrderStatus.PREPARING)
        service.advance_order_status(table.id, order_id, OrderStatus.DONE)
        before = service.get_table(table.id).find_order(order_id)

        with pytest.raises(InvalidStateError):
            service.advance_order_status(table.id, order_id, OrderStatus.PENDING)

        assert service.get_table(table.id).find_order(order_id) == before


class TestCloseTable:

    def test_close_after_delivery(self, service, table, cart):
        order_id = service.send_cart_to_kitchen(table.id, cart, "john").orders[0].id
        deliver(service, table.id, order_id)

        result = service.close_table(table.id)

        assert result.status == TableStatus.AVAILABLE
        assert result.orders == []
        assert result.waiter_id is None

    def test_close_with_preparing_order_fails(self, service, table, cart):
        order_id = service.send_cart_to_kitchen(table.id, cart, "john").orders[0].id
        service.advance_order_status(table.id, order_id, OrderStatus.PREPARING)

        with pytest.raises(InvalidStateError) as exc_info:
            service.close_table(table.id)

        assert exc_info.value.context["undelivered_orders"] == [order_id]
        assert len(service.get_table(table.id).orders) == 1

    def test_forced_close_discards_undelivered_orders(self, service, table, cart):
        service.send_cart_to_kitchen(table.id, cart, "john")

        result = service.close_table(table.id, force=True)

        assert result.status == TableStatus.AVAILABLE
        assert result.orders == []

    def test_close_table_without_orders(self, service, table):
        service.start_service(table.id, "john")
        assert service.close_table(table.id).status == TableStatus.AVAILABLE


class TestListTables:

    def test_inactive_tables_can_be_hidden(self, service, repository):
        repository.save_table(TableFactory(number=1))
        repository.save_table(TableFactory(number=2, active=False))

        assert [t.number for t in service.list_tables()] == [1, 2]
        assert [t.number for t in service.list_tables(include_inactive=False)] == [1]

    def test_snapshots_are_independent(self, service, table):
        snapshot = service.get_table(table.id)
        snapshot.orders.append(OrderFactory())
        assert service.get_table(table.id).orders == []
