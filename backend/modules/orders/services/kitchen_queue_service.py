# backend/modules/orders/services/kitchen_queue_service.py

import logging

from core.repository import Repository
from ..enums.order_enums import OrderStatus
from ..schemas.order_schemas import KitchenQueue, KitchenTicket

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = {OrderStatus.PENDING, OrderStatus.PREPARING}


class KitchenQueueService:
    """Read-only view of the orders the kitchen is working on."""

    def __init__(self, repository: Repository):
        self.repository = repository

    def get_kitchen_queue(self) -> KitchenQueue:
        """
        Active orders (pending or preparing) and finished orders waiting to be
        picked up, each oldest first. Inactive tables are included since their
        orders still have to be served.
        """
        queue = KitchenQueue()
        for table in self.repository.list_tables():
            for order in table.orders:
                ticket = KitchenTicket(
                    table_id=table.id,
                    table_number=table.number,
                    waiter_id=table.waiter_id,
                    order=order,
                )
                if order.status in ACTIVE_STATUSES:
                    queue.active.append(ticket)
                elif order.status == OrderStatus.DONE:
                    queue.awaiting_delivery.append(ticket)

        queue.active.sort(key=lambda t: t.order.created_at)
        queue.awaiting_delivery.sort(key=lambda t: t.order.done_at or t.order.created_at)
        logger.debug(
            f"Kitchen queue: {len(queue.active)} active, "
            f"{len(queue.awaiting_delivery)} awaiting delivery"
        )
        return queue
