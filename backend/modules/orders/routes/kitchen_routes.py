from fastapi import APIRouter, Depends

from app.container import get_kitchen_queue_service, get_table_state_service
from core.auth import require_roles
from core.exceptions import ValidationError
from modules.staff.enums.staff_enums import StaffRole
from modules.staff.schemas.staff_schemas import StaffUser
from modules.tables.services.table_state_service import TableStateService
from ..enums.order_enums import OrderStatus
from ..schemas.order_schemas import KitchenQueue, KitchenTicket, OrderStatusUpdate
from ..services.kitchen_queue_service import KitchenQueueService

router = APIRouter(prefix="/kitchen", tags=["Kitchen"])

kitchen_staff = require_roles(StaffRole.KITCHEN, StaffRole.MANAGER)

KITCHEN_ALLOWED_STATUSES = {OrderStatus.PREPARING, OrderStatus.DONE}


@router.get("/queue", response_model=KitchenQueue)
def get_kitchen_queue(
    current_user: StaffUser = Depends(kitchen_staff),
    service: KitchenQueueService = Depends(get_kitchen_queue_service),
):
    return service.get_kitchen_queue()


@router.put("/tables/{table_id}/orders/{order_id}/status", response_model=KitchenTicket)
def update_order_status(
    table_id: str,
    order_id: str,
    order_data: OrderStatusUpdate,
    current_user: StaffUser = Depends(kitchen_staff),
    service: TableStateService = Depends(get_table_state_service),
):
    """
    Update order status from kitchen perspective.

    Only allows updates to 'preparing' or 'done'.
    """
    if order_data.status not in KITCHEN_ALLOWED_STATUSES:
        raise ValidationError(
            f"Kitchen can only update status to: "
            f"{', '.join(sorted(s.value for s in KITCHEN_ALLOWED_STATUSES))}"
        )

    table = service.advance_order_status(table_id, order_id, order_data.status)
    return KitchenTicket(
        table_id=table.id,
        table_number=table.number,
        waiter_id=table.waiter_id,
        order=table.find_order(order_id),
    )
