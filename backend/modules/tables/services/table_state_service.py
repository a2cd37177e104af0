# backend/modules/tables/services/table_state_service.py

from typing import List, Optional
import logging

from ..models.table_models import TableStatus
from ..schemas.table_schemas import Table
from core.exceptions import InvalidStateError, NotFoundError, ValidationError
from core.locks import KeyedLockRegistry
from core.repository import Repository
from modules.orders.enums.order_enums import OrderStatus
from modules.orders.schemas.order_schemas import Cart
from modules.orders.services.order_lifecycle_service import OrderLifecycleService

logger = logging.getLogger(__name__)


class TableStateService:
    """
    Service for the service cycle of a table: seat, order, serve, close.

    Every mutation reads the table, changes the snapshot and saves it while
    holding that table's lock.
    """

    def __init__(
        self,
        repository: Repository,
        locks: Optional[KeyedLockRegistry] = None,
        lifecycle: Optional[OrderLifecycleService] = None,
    ):
        self.repository = repository
        self.locks = locks or KeyedLockRegistry()
        self.lifecycle = lifecycle or OrderLifecycleService()

    def list_tables(self, include_inactive: bool = True) -> List[Table]:
        tables = self.repository.list_tables()
        if include_inactive:
            return tables
        return [table for table in tables if table.active]

    def get_table(self, table_id: str) -> Table:
        return self.repository.get_table(table_id)

    def continue_service(self, table_id: str) -> Table:
        """Reopen an occupied table; nothing changes."""
        return self.repository.get_table(table_id)

    def start_service(self, table_id: str, waiter_id: str) -> Table:
        """Seat guests at a table and assign the waiter"""
        with self.locks.hold(table_id):
            table = self.repository.get_table(table_id)
            self._ensure_active(table, "start service on")

            if table.status == TableStatus.OCCUPIED and table.orders:
                logger.warning(
                    f"Rejected start of service on table {table.number}: "
                    f"already occupied with {len(table.orders)} order(s)"
                )
                raise InvalidStateError(
                    f"Table {table.number} is already being served",
                    context={"table_id": table.id, "status": table.status.value},
                )

            previous = table.status
            table.status = TableStatus.OCCUPIED
            table.waiter_id = waiter_id
            table = self.repository.save_table(table)
            logger.info(
                f"Table {table.number} {previous.value} -> occupied by waiter {waiter_id}"
            )
            return table

    def reserve(self, table_id: str, waiter_id: str) -> Table:
        with self.locks.hold(table_id):
            table = self.repository.get_table(table_id)
            self._ensure_active(table, "reserve")

            if table.status != TableStatus.AVAILABLE:
                logger.warning(
                    f"Rejected reservation of table {table.number} in status {table.status.value}"
                )
                raise InvalidStateError(
                    f"Only available tables can be reserved; table {table.number} is "
                    f"{table.status.value}",
                    context={"table_id": table.id, "status": table.status.value},
                )

            table.status = TableStatus.RESERVED
            table.waiter_id = waiter_id
            table = self.repository.save_table(table)
            logger.info(f"Table {table.number} reserved by waiter {waiter_id}")
            return table

    def release(self, table_id: str) -> Table:
        """Free a reserved table, or an occupied one that never ordered"""
        with self.locks.hold(table_id):
            table = self.repository.get_table(table_id)

            releasable = table.status == TableStatus.RESERVED or (
                table.status == TableStatus.OCCUPIED and not table.orders
            )
            if not releasable:
                logger.warning(
                    f"Rejected release of table {table.number} in status "
                    f"{table.status.value} with {len(table.orders)} order(s)"
                )
                raise InvalidStateError(
                    f"Table {table.number} cannot be released",
                    context={
                        "table_id": table.id,
                        "status": table.status.value,
                        "order_count": len(table.orders),
                    },
                )

            table.status = TableStatus.AVAILABLE
            table.waiter_id = None
            table = self.repository.save_table(table)
            logger.info(f"Table {table.number} released")
            return table

    def send_cart_to_kitchen(self, table_id: str, cart: Cart, waiter_id: str) -> Table:
        """
        Turn the cart into a new pending order on the table.

        The cart is emptied once the order is saved. Each send creates its own
        order, even if an identical one is already open.
        """
        if cart.is_empty:
            raise ValidationError("Cart is empty", context={"table_id": table_id})

        with self.locks.hold(table_id):
            table = self.repository.get_table(table_id)
            self._ensure_active(table, "send orders for")

            order = self.lifecycle.create_order(cart.lines)
            table.orders.append(order)
            table.status = TableStatus.OCCUPIED
            table.waiter_id = waiter_id
            table = self.repository.save_table(table)

        cart.clear()
        logger.info(
            f"Order {order.id} sent to kitchen for table {table.number} "
            f"({order.item_count} item(s), subtotal {order.subtotal})"
        )
        return table

    def advance_order_status(
        self, table_id: str, order_id: str, new_status: OrderStatus
    ) -> Table:
        with self.locks.hold(table_id):
            table = self.repository.get_table(table_id)
            order = table.find_order(order_id)
            if order is None:
                raise NotFoundError(
                    f"Order {order_id} not found on table {table.number}",
                    context={"table_id": table_id, "order_id": order_id},
                )

            if self.lifecycle.advance(order, new_status):
                table = self.repository.save_table(table)
            return table

    def close_table(self, table_id: str, force: bool = False) -> Table:
        """
        End the service: drop all orders, clear the waiter, free the table.

        Undelivered orders block the close unless ``force`` is set, in which
        case they are discarded with a warning.
        """
        with self.locks.hold(table_id):
            table = self.repository.get_table(table_id)

            undelivered = [o for o in table.orders if o.status != OrderStatus.DELIVERED]
            if undelivered:
                if not force:
                    logger.warning(
                        f"Rejected close of table {table.number}: "
                        f"{len(undelivered)} order(s) not delivered"
                    )
                    raise InvalidStateError(
                        f"Table {table.number} has {len(undelivered)} undelivered order(s)",
                        context={
                            "table_id": table.id,
                            "undelivered_orders": [o.id for o in undelivered],
                        },
                    )
                logger.warning(
                    f"Force closing table {table.number} with undelivered orders: "
                    f"{', '.join(o.id for o in undelivered)}"
                )

            table.orders = []
            table.waiter_id = None
            table.status = TableStatus.AVAILABLE
            table = self.repository.save_table(table)
            logger.info(f"Table {table.number} closed")
            return table

    def _ensure_active(self, table: Table, action: str) -> None:
        if not table.active:
            logger.warning(f"Rejected attempt to {action} inactive table {table.number}")
            raise InvalidStateError(
                f"Table {table.number} is inactive",
                context={"table_id": table.id},
            )