from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from ..enums.payment_enums import PaymentMethod, SplitMethod


class BillLine(BaseModel):
    """All units of one menu item across the table's orders"""

    item_id: str
    name: str
    unit_price: Decimal
    quantity: int
    line_total: Decimal


class Bill(BaseModel):
    table_id: str
    table_number: int
    lines: List[BillLine] = []
    subtotal: Decimal
    tip_percentage: Decimal
    tip_amount: Decimal
    total: Decimal
    warnings: List[str] = []


class CustomShare(BaseModel):
    payer_name: str = Field(..., min_length=1, max_length=100)
    amount: Decimal


class ItemAssignment(BaseModel):
    item_id: str
    quantity: int = Field(..., ge=1)
    # Needed only when the item was ordered at more than one price
    unit_price: Optional[Decimal] = None


class ItemShare(BaseModel):
    payer_name: str = Field(..., min_length=1, max_length=100)
    assignments: List[ItemAssignment] = []


class SplitRequest(BaseModel):
    """How the bill is divided. Only the fields of the chosen method are read."""

    method: SplitMethod = SplitMethod.FULL
    tip_percentage: Decimal = Decimal("0")
    people: Optional[int] = None
    custom_shares: List[CustomShare] = []
    item_shares: List[ItemShare] = []


class PaymentRequest(SplitRequest):
    payment_method: PaymentMethod = PaymentMethod.CREDIT
    force: bool = False


class PayerShare(BaseModel):
    payer_name: str
    amount: Decimal
    items_subtotal: Optional[Decimal] = None
    tip_share: Optional[Decimal] = None


class SplitResult(BaseModel):
    method: SplitMethod
    bill: Bill
    shares: List[PayerShare]
    total_assigned: Decimal


class PaymentReceipt(BaseModel):
    table_id: str
    table_number: int
    payment_method: PaymentMethod
    split: SplitResult
    paid_at: datetime
    forced: bool = False
