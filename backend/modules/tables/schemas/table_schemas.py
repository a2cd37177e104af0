# backend/modules/tables/schemas/table_schemas.py

from typing import Dict, Iterable, List, Optional
from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict

from ..models.table_models import TableStatus
from modules.orders.enums.order_enums import OrderStatus
from modules.orders.schemas.order_schemas import Order


class Table(BaseModel):
    """A dining table and the orders of its current service"""

    id: str
    number: int = Field(..., gt=0)
    seats: int = Field(..., gt=0)
    status: TableStatus = TableStatus.AVAILABLE
    orders: List[Order] = []
    waiter_id: Optional[str] = None
    active: bool = True

    model_config = ConfigDict(from_attributes=True)

    def find_order(self, order_id: str) -> Optional[Order]:
        return next((order for order in self.orders if order.id == order_id), None)

    @property
    def subtotal(self) -> Decimal:
        return sum((order.subtotal for order in self.orders), Decimal("0"))


def has_active_orders(table: Table) -> bool:
    """True while any order of the table has not been delivered."""
    return any(order.status != OrderStatus.DELIVERED for order in table.orders)


def is_unique_table_number(
    tables: Iterable[Table], number: int, exclude_id: Optional[str] = None
) -> bool:
    return not any(t.number == number and t.id != exclude_id for t in tables)


# Admin schemas. Ranges are checked by the service so that they surface as
# domain validation errors.
class TableCreate(BaseModel):
    number: int
    seats: int


class TableUpdate(BaseModel):
    number: Optional[int] = None
    seats: Optional[int] = None


class TableActiveUpdate(BaseModel):
    active: bool


class ServiceRequest(BaseModel):
    """Start or reserve a table. Managers may act on behalf of a waiter."""

    waiter_id: Optional[str] = None


class CloseTableRequest(BaseModel):
    force: bool = False


class DashboardSummary(BaseModel):
    """Live floor metrics"""

    total_tables: int
    active_tables: int
    tables_by_status: Dict[TableStatus, int]
    total_orders: int
    orders_by_status: Dict[OrderStatus, int]
    open_revenue: Decimal
    items_ordered: int
    occupancy_rate: Decimal = Field(..., description="Occupied active tables, percent")
