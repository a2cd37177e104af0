# backend/modules/orders/services/order_lifecycle_service.py

"""
Order lifecycle: pending -> preparing -> done -> delivered.

Orders move one stage at a time and never backwards. Each stage stamps its
own timestamp exactly once.
"""

import logging
import uuid
from datetime import datetime
from typing import Callable, Iterable, Optional

from core.exceptions import InvalidStateError, ValidationError
from ..enums.order_enums import OrderStatus
from ..schemas.order_schemas import Order, OrderItem

logger = logging.getLogger(__name__)


VALID_TRANSITIONS = {
    OrderStatus.PENDING: [OrderStatus.PREPARING],
    OrderStatus.PREPARING: [OrderStatus.DONE],
    OrderStatus.DONE: [OrderStatus.DELIVERED],
    OrderStatus.DELIVERED: [],
}

STATUS_SEQUENCE = [
    OrderStatus.PENDING,
    OrderStatus.PREPARING,
    OrderStatus.DONE,
    OrderStatus.DELIVERED,
]

STATUS_TIMESTAMP_FIELDS = {
    OrderStatus.PREPARING: "preparing_at",
    OrderStatus.DONE: "done_at",
    OrderStatus.DELIVERED: "delivered_at",
}


class OrderLifecycleService:
    def __init__(self, clock: Callable[[], datetime] = datetime.utcnow):
        self._clock = clock

    def create_order(self, items: Iterable[OrderItem]) -> Order:
        """Create a pending order from a batch of cart lines."""
        items = [item.model_copy() for item in items]
        if not items:
            raise ValidationError("Cannot send an empty order to the kitchen")

        now = self._clock()
        order = Order(
            id=f"order-{uuid.uuid4().hex[:12]}",
            items=items,
            status=OrderStatus.PENDING,
            created_at=now,
            sent_at=now,
        )
        logger.info(f"Created order {order.id} with {order.item_count} item(s)")
        return order

    @staticmethod
    def can_transition(order: Order, target: OrderStatus) -> bool:
        return target in VALID_TRANSITIONS.get(order.status, [])

    @staticmethod
    def next_status(order: Order) -> Optional[OrderStatus]:
        allowed = VALID_TRANSITIONS.get(order.status, [])
        return allowed[0] if allowed else None

    def advance(self, order: Order, target: OrderStatus) -> bool:
        """
        Move ``order`` to ``target`` in place.

        Returns True when the order changed. Asking for the current status is
        a no-op that returns False. Anything else that is not the next stage
        raises InvalidStateError and leaves the order untouched.
        """
        current = order.status
        if target == current:
            logger.debug(f"Order {order.id} already {current.value}")
            return False

        if not self.can_transition(order, target):
            direction = (
                "backwards"
                if STATUS_SEQUENCE.index(target) < STATUS_SEQUENCE.index(current)
                else "ahead"
            )
            logger.warning(
                f"Rejected transition of order {order.id} from {current.value} "
                f"to {target.value} ({direction})"
            )
            raise InvalidStateError(
                f"Invalid status transition from {current.value} to {target.value}",
                context={
                    "order_id": order.id,
                    "current_status": current.value,
                    "requested_status": target.value,
                },
            )

        order.status = target
        setattr(order, STATUS_TIMESTAMP_FIELDS[target], self._clock())
        logger.info(f"Order {order.id} moved from {current.value} to {target.value}")
        return True


order_lifecycle_service = OrderLifecycleService()
