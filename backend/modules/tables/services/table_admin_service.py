# backend/modules/tables/services/table_admin_service.py

from typing import Optional
import logging
import uuid

from ..schemas.table_schemas import (
    Table,
    TableCreate,
    TableUpdate,
    has_active_orders,
    is_unique_table_number,
)
from core.exceptions import ConflictError, InvalidStateError, ValidationError
from core.locks import KeyedLockRegistry
from core.repository import Repository

logger = logging.getLogger(__name__)


def _validate_positive(field: str, value: int) -> None:
    if value is None or value <= 0:
        raise ValidationError(
            f"Table {field} must be greater than zero", context={field: value}
        )


class TableAdminService:
    """Manager operations on the floor plan"""

    def __init__(self, repository: Repository, locks: Optional[KeyedLockRegistry] = None):
        self.repository = repository
        self.locks = locks or KeyedLockRegistry()

    def create_table(self, table_data: TableCreate) -> Table:
        _validate_positive("number", table_data.number)
        _validate_positive("seats", table_data.seats)
        self._ensure_unique_number(table_data.number)

        table = Table(
            id=f"table-{uuid.uuid4().hex[:8]}",
            number=table_data.number,
            seats=table_data.seats,
        )
        table = self.repository.save_table(table)
        logger.info(f"Created table {table.number} ({table.seats} seats) as {table.id}")
        return table

    def update_table(self, table_id: str, table_data: TableUpdate) -> Table:
        with self.locks.hold(table_id):
            table = self.repository.get_table(table_id)

            if table_data.number is not None:
                _validate_positive("number", table_data.number)
                self._ensure_unique_number(table_data.number, exclude_id=table_id)
                table.number = table_data.number
            if table_data.seats is not None:
                _validate_positive("seats", table_data.seats)
                table.seats = table_data.seats

            table = self.repository.save_table(table)
            logger.info(f"Updated table {table.id}: number={table.number}, seats={table.seats}")
            return table

    def delete_table(self, table_id: str) -> None:
        with self.locks.hold(table_id):
            table = self.repository.get_table(table_id)
            if table.orders:
                logger.warning(
                    f"Rejected deletion of table {table.number} with {len(table.orders)} order(s)"
                )
                raise InvalidStateError(
                    f"Table {table.number} still has orders and cannot be deleted",
                    context={"table_id": table_id, "order_count": len(table.orders)},
                )
            self.repository.delete_table(table_id)

        self.locks.discard(table_id)
        logger.info(f"Deleted table {table.number} ({table_id})")

    def set_active(self, table_id: str, active: bool) -> Table:
        with self.locks.hold(table_id):
            table = self.repository.get_table(table_id)
            if table.active == active:
                return table

            if not active and has_active_orders(table):
                logger.warning(
                    f"Rejected deactivation of table {table.number}: undelivered orders"
                )
                raise InvalidStateError(
                    f"Table {table.number} has undelivered orders and cannot be deactivated",
                    context={"table_id": table_id},
                )

            table.active = active
            table = self.repository.save_table(table)
            logger.info(f"Table {table.number} {'activated' if active else 'deactivated'}")
            return table

    def toggle_active(self, table_id: str) -> Table:
        with self.locks.hold(table_id):
            table = self.repository.get_table(table_id)
            return self.set_active(table_id, not table.active)

    def _ensure_unique_number(self, number: int, exclude_id: Optional[str] = None) -> None:
        if not is_unique_table_number(self.repository.list_tables(), number, exclude_id):
            logger.warning(f"Rejected duplicate table number {number}")
            raise ConflictError(
                f"Table number {number} already exists", context={"number": number}
            )
