# backend/modules/orders/services/cart_service.py

"""
Cart helpers. Carts are plain values owned by the caller; these functions
return a new cart and never touch storage.
"""

from typing import Callable, Iterable, Optional

from core.exceptions import NotFoundError, ValidationError
from modules.menu.schemas.menu_schemas import MenuItem
from ..schemas.order_schemas import Cart, CartItemAdd, OrderItem, normalize_notes


def _line_index(cart: Cart, menu_item_id: str, notes: Optional[str]) -> Optional[int]:
    for index, line in enumerate(cart.lines):
        if line.menu_item_id == menu_item_id and line.notes == notes:
            return index
    return None


def add_items_to_cart(
    cart: Cart, menu_item: MenuItem, quantity: int = 1, notes: Optional[str] = None
) -> Cart:
    """Add ``quantity`` of an item; lines with the same item and notes merge."""
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1", context={"quantity": quantity})
    if not menu_item.available:
        raise ValidationError(
            f"{menu_item.name} is currently unavailable",
            context={"menu_item_id": menu_item.id},
        )

    notes = normalize_notes(notes)
    updated = cart.model_copy(deep=True)
    index = _line_index(updated, menu_item.id, notes)
    if index is None:
        updated.lines.append(OrderItem.from_menu_item(menu_item, quantity, notes))
    else:
        line = updated.lines[index]
        updated.lines[index] = line.model_copy(update={"quantity": line.quantity + quantity})
    return updated


def update_cart_line(
    cart: Cart, menu_item_id: str, quantity: int, notes: Optional[str] = None
) -> Cart:
    """Set the quantity of a line. Zero removes it."""
    if quantity < 0:
        raise ValidationError("Quantity cannot be negative", context={"quantity": quantity})

    notes = normalize_notes(notes)
    updated = cart.model_copy(deep=True)
    index = _line_index(updated, menu_item_id, notes)
    if index is None:
        raise NotFoundError(f"Item {menu_item_id} is not in the cart")

    if quantity == 0:
        del updated.lines[index]
    else:
        updated.lines[index] = updated.lines[index].model_copy(update={"quantity": quantity})
    return updated


def remove_cart_line(cart: Cart, menu_item_id: str, notes: Optional[str] = None) -> Cart:
    return update_cart_line(cart, menu_item_id, 0, notes)


def cart_from_lines(
    lines: Iterable[CartItemAdd], get_menu_item: Callable[[str], MenuItem]
) -> Cart:
    """
    Build a cart from requested lines using current menu data.

    Unknown items raise NotFoundError through ``get_menu_item``; unavailable
    ones raise ValidationError.
    """
    cart = Cart()
    for line in lines:
        cart = add_items_to_cart(cart, get_menu_item(line.menu_item_id), line.quantity, line.notes)
    return cart
