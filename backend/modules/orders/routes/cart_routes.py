from fastapi import APIRouter, Depends

from app.container import get_menu_service
from core.auth import require_roles
from modules.menu.services.menu_service import MenuService
from modules.staff.enums.staff_enums import StaffRole
from modules.staff.schemas.staff_schemas import StaffUser
from ..schemas.order_schemas import Cart, CartAddRequest, CartLineUpdate
from ..services.cart_service import add_items_to_cart, update_cart_line

router = APIRouter(prefix="/cart", tags=["Cart"])

floor_staff = require_roles(StaffRole.WAITER, StaffRole.MANAGER)


@router.post("/items", response_model=Cart)
def add_cart_item(
    request: CartAddRequest,
    current_user: StaffUser = Depends(floor_staff),
    menu_service: MenuService = Depends(get_menu_service),
):
    """Add a menu item to a cart held by the client and return the new cart."""
    menu_item = menu_service.get_menu_item(request.item.menu_item_id)
    return add_items_to_cart(request.cart, menu_item, request.item.quantity, request.item.notes)


@router.put("/lines", response_model=Cart)
def update_cart_item(
    request: CartLineUpdate,
    current_user: StaffUser = Depends(floor_staff),
):
    return update_cart_line(request.cart, request.menu_item_id, request.quantity, request.notes)
