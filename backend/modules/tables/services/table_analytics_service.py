# backend/modules/tables/services/table_analytics_service.py

from decimal import Decimal, ROUND_HALF_UP
import logging

from ..models.table_models import TableStatus
from ..schemas.table_schemas import DashboardSummary
from core.repository import Repository
from modules.orders.enums.order_enums import OrderStatus

logger = logging.getLogger(__name__)


class TableAnalyticsService:
    """Service for live floor metrics"""

    def __init__(self, repository: Repository):
        self.repository = repository

    def get_dashboard_summary(self) -> DashboardSummary:
        tables = self.repository.list_tables()

        tables_by_status = {status: 0 for status in TableStatus}
        orders_by_status = {status: 0 for status in OrderStatus}
        open_revenue = Decimal("0")
        items_ordered = 0

        for table in tables:
            tables_by_status[table.status] += 1
            for order in table.orders:
                orders_by_status[order.status] += 1
                open_revenue += order.subtotal
                items_ordered += order.item_count

        active_tables = [t for t in tables if t.active]
        occupied = sum(1 for t in active_tables if t.status == TableStatus.OCCUPIED)
        occupancy_rate = Decimal("0")
        if active_tables:
            occupancy_rate = (Decimal(occupied) * 100 / len(active_tables)).quantize(
                Decimal("0.1"), rounding=ROUND_HALF_UP
            )

        return DashboardSummary(
            total_tables=len(tables),
            active_tables=len(active_tables),
            tables_by_status=tables_by_status,
            total_orders=sum(orders_by_status.values()),
            orders_by_status=orders_by_status,
            open_revenue=open_revenue.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP),
            items_ordered=items_ordered,
            occupancy_rate=occupancy_rate,
        )
