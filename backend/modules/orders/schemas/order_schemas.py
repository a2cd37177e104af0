from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..enums.order_enums import OrderStatus
from modules.menu.schemas.menu_schemas import MenuItem


def normalize_notes(notes: Optional[str]) -> Optional[str]:
    """Blank notes are the same as no notes."""
    if notes is None:
        return None
    notes = notes.strip()
    return notes or None


class OrderItem(BaseModel):
    """A line of an order: menu item snapshot plus quantity and notes."""

    menu_item_id: str
    name: str
    category: str
    price: Decimal = Field(..., ge=0)
    description: str = ""
    image: str = ""
    quantity: int = Field(..., ge=1)
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return normalize_notes(v)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    @classmethod
    def from_menu_item(
        cls, menu_item: MenuItem, quantity: int, notes: Optional[str] = None
    ) -> "OrderItem":
        return cls(
            menu_item_id=menu_item.id,
            name=menu_item.name,
            category=menu_item.category,
            price=menu_item.price,
            description=menu_item.description,
            image=menu_item.image,
            quantity=quantity,
            notes=notes,
        )


class Order(BaseModel):
    id: str
    items: List[OrderItem] = Field(..., min_length=1)
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime
    sent_at: Optional[datetime] = None
    preparing_at: Optional[datetime] = None
    done_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_delivered(self) -> bool:
        return self.status == OrderStatus.DELIVERED


class Cart(BaseModel):
    """Items picked for a table but not yet sent to the kitchen."""

    lines: List[OrderItem] = []

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal("0"))

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def clear(self) -> None:
        self.lines.clear()


# Request schemas
class CartItemAdd(BaseModel):
    menu_item_id: str
    quantity: int = Field(1, ge=1)
    notes: Optional[str] = None


class CartAddRequest(BaseModel):
    cart: Cart = Field(default_factory=Cart)
    item: CartItemAdd


class CartLineUpdate(BaseModel):
    cart: Cart
    menu_item_id: str
    notes: Optional[str] = None
    quantity: int = Field(..., ge=0)


class SendCartRequest(BaseModel):
    """
    Lines to send to the kitchen.

    Only item ids, quantities and notes are accepted; names and prices are
    copied from the menu when the order is created.
    """

    lines: List[CartItemAdd] = []


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class KitchenTicket(BaseModel):
    """An order as the kitchen sees it, tagged with its table."""

    table_id: str
    table_number: int
    waiter_id: Optional[str] = None
    order: Order


class KitchenQueue(BaseModel):
    active: List[KitchenTicket] = []
    awaiting_delivery: List[KitchenTicket] = []
