# backend/modules/tables/routes/table_routes.py

from typing import List
from fastapi import APIRouter, Depends, Query, status

from app.container import get_menu_service, get_table_admin_service, get_table_state_service
from core.auth import get_current_user, require_roles
from core.exceptions import PermissionDeniedError
from modules.menu.services.menu_service import MenuService
from modules.orders.enums.order_enums import OrderStatus
from modules.orders.schemas.order_schemas import OrderStatusUpdate, SendCartRequest
from modules.orders.services.cart_service import cart_from_lines
from modules.staff.enums.staff_enums import StaffRole
from modules.staff.schemas.staff_schemas import StaffUser
from ..schemas.table_schemas import (
    CloseTableRequest,
    ServiceRequest,
    Table,
    TableActiveUpdate,
    TableCreate,
    TableUpdate,
)
from ..services.table_admin_service import TableAdminService
from ..services.table_state_service import TableStateService

router = APIRouter(prefix="/tables", tags=["Tables"])

floor_staff = require_roles(StaffRole.WAITER, StaffRole.MANAGER)
manager_only = require_roles(StaffRole.MANAGER)

# Who may move an order into each status
STATUS_ROLES = {
    OrderStatus.PREPARING: {StaffRole.KITCHEN, StaffRole.MANAGER},
    OrderStatus.DONE: {StaffRole.KITCHEN, StaffRole.MANAGER},
    OrderStatus.DELIVERED: {StaffRole.WAITER, StaffRole.MANAGER},
}


def _acting_waiter(user: StaffUser, request: ServiceRequest) -> str:
    """Waiters act as themselves; managers may name the waiter."""
    if user.role == StaffRole.MANAGER and request.waiter_id:
        return request.waiter_id
    return user.id


@router.get("", response_model=List[Table])
def list_tables(
    include_inactive: bool = Query(True),
    current_user: StaffUser = Depends(get_current_user),
    service: TableStateService = Depends(get_table_state_service),
):
    return service.list_tables(include_inactive=include_inactive)


@router.get("/{table_id}", response_model=Table)
def get_table(
    table_id: str,
    current_user: StaffUser = Depends(get_current_user),
    service: TableStateService = Depends(get_table_state_service),
):
    return service.continue_service(table_id)


# Service cycle
@router.post("/{table_id}/start", response_model=Table)
def start_service(
    table_id: str,
    request: ServiceRequest = ServiceRequest(),
    current_user: StaffUser = Depends(floor_staff),
    service: TableStateService = Depends(get_table_state_service),
):
    return service.start_service(table_id, _acting_waiter(current_user, request))


@router.post("/{table_id}/reserve", response_model=Table)
def reserve_table(
    table_id: str,
    request: ServiceRequest = ServiceRequest(),
    current_user: StaffUser = Depends(floor_staff),
    service: TableStateService = Depends(get_table_state_service),
):
    return service.reserve(table_id, _acting_waiter(current_user, request))


@router.post("/{table_id}/release", response_model=Table)
def release_table(
    table_id: str,
    current_user: StaffUser = Depends(floor_staff),
    service: TableStateService = Depends(get_table_state_service),
):
    return service.release(table_id)


@router.post("/{table_id}/orders", response_model=Table, status_code=status.HTTP_201_CREATED)
def send_cart_to_kitchen(
    table_id: str,
    request: SendCartRequest,
    current_user: StaffUser = Depends(floor_staff),
    service: TableStateService = Depends(get_table_state_service),
    menu_service: MenuService = Depends(get_menu_service),
):
    """Send a batch to the kitchen. Lines are priced from the menu, not the client."""
    cart = cart_from_lines(request.lines, menu_service.get_menu_item)
    return service.send_cart_to_kitchen(table_id, cart, current_user.id)


@router.patch("/{table_id}/orders/{order_id}/status", response_model=Table)
def update_order_status(
    table_id: str,
    order_id: str,
    update: OrderStatusUpdate,
    current_user: StaffUser = Depends(get_current_user),
    service: TableStateService = Depends(get_table_state_service),
):
    """
    Move an order to its next stage.

    Kitchen staff set preparing and done; waiters confirm delivery.
    """
    allowed = STATUS_ROLES.get(update.status, set())
    if current_user.role not in allowed:
        raise PermissionDeniedError(
            f"Role {current_user.role.value} cannot mark orders as {update.status.value}"
        )
    return service.advance_order_status(table_id, order_id, update.status)


@router.post("/{table_id}/close", response_model=Table)
def close_table(
    table_id: str,
    request: CloseTableRequest = CloseTableRequest(),
    current_user: StaffUser = Depends(floor_staff),
    service: TableStateService = Depends(get_table_state_service),
):
    return service.close_table(table_id, force=request.force)


# Administration
@router.post("", response_model=Table, status_code=status.HTTP_201_CREATED)
def create_table(
    table_data: TableCreate,
    current_user: StaffUser = Depends(manager_only),
    service: TableAdminService = Depends(get_table_admin_service),
):
    return service.create_table(table_data)


@router.put("/{table_id}", response_model=Table)
def update_table(
    table_id: str,
    table_data: TableUpdate,
    current_user: StaffUser = Depends(manager_only),
    service: TableAdminService = Depends(get_table_admin_service),
):
    return service.update_table(table_id, table_data)


@router.delete("/{table_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_table(
    table_id: str,
    current_user: StaffUser = Depends(manager_only),
    service: TableAdminService = Depends(get_table_admin_service),
):
    service.delete_table(table_id)


@router.patch("/{table_id}/active", response_model=Table)
def set_table_active(
    table_id: str,
    update: TableActiveUpdate,
    current_user: StaffUser = Depends(manager_only),
    service: TableAdminService = Depends(get_table_admin_service),
):
    return service.set_active(table_id, update.active)


@router.post("/{table_id}/toggle-active", response_model=Table)
def toggle_table_active(
    table_id: str,
    current_user: StaffUser = Depends(manager_only),
    service: TableAdminService = Depends(get_table_admin_service),
):
    return service.toggle_active(table_id)
