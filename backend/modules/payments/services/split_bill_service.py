"""
Bill building and split calculation for table payments.

Amounts are computed with exact Decimals and rounded to cents only at the
end; every split hands out exactly the rounded total, cent for cent.
"""

import logging
from collections import OrderedDict, defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from core.config import Settings, get_settings
from core.exceptions import NotFoundError, ValidationError
from modules.orders.enums.order_enums import OrderStatus
from modules.tables.schemas.table_schemas import Table
from modules.tables.services.table_state_service import TableStateService
from ..enums.payment_enums import SplitMethod
from ..schemas.split_bill_schemas import (
    Bill,
    BillLine,
    ItemAssignment,
    PayerShare,
    PaymentReceipt,
    PaymentRequest,
    SplitRequest,
    SplitResult,
)
from ..utils.money import allocate_cents, from_cents, round_money, to_cents

logger = logging.getLogger(__name__)


class SplitBillService:
    """Service for table bills and split payments"""

    def __init__(self, table_state_service: TableStateService, settings: Optional[Settings] = None):
        self.table_state = table_state_service
        self.repository = table_state_service.repository
        self.locks = table_state_service.locks
        self.settings = settings or get_settings()

    def build_bill(self, table: Table, tip_percentage: Decimal = Decimal("0")) -> Bill:
        tip_percentage = Decimal(tip_percentage)
        if not tip_percentage.is_finite() or tip_percentage < 0:
            raise ValidationError(
                "Tip percentage must be zero or positive",
                context={"tip_percentage": str(tip_percentage)},
            )
        if tip_percentage not in self.settings.tip_presets:
            logger.debug(f"Custom tip percentage {tip_percentage} on table {table.number}")

        # A price change between orders yields a separate line per price
        grouped: Dict[Tuple[str, Decimal], BillLine] = OrderedDict()
        warnings: List[str] = []
        for order in table.orders:
            if order.status != OrderStatus.DELIVERED:
                warnings.append(f"Order {order.id} is still {order.status.value}")
            for item in order.items:
                key = (item.menu_item_id, item.price)
                line = grouped.get(key)
                if line is None:
                    grouped[key] = BillLine(
                        item_id=item.menu_item_id,
                        name=item.name,
                        unit_price=item.price,
                        quantity=item.quantity,
                        line_total=item.line_total,
                    )
                else:
                    line.quantity += item.quantity
                    line.line_total += item.line_total

        subtotal = sum((line.line_total for line in grouped.values()), Decimal("0"))
        tip_amount = subtotal * tip_percentage / 100
        return Bill(
            table_id=table.id,
            table_number=table.number,
            lines=list(grouped.values()),
            subtotal=round_money(subtotal),
            tip_percentage=tip_percentage,
            tip_amount=round_money(tip_amount),
            total=round_money(subtotal + tip_amount),
            warnings=warnings,
        )

    def split(self, bill: Bill, request: SplitRequest) -> SplitResult:
        """Apply the requested split strategy to a bill"""
        if request.method == SplitMethod.FULL:
            shares = [PayerShare(payer_name="Full bill", amount=bill.total)]
        elif request.method == SplitMethod.EQUAL:
            shares = self._split_equal(bill, request.people)
        elif request.method == SplitMethod.CUSTOM:
            shares = self._split_custom(bill, request)
        else:
            shares = self._split_by_items(bill, request)

        return SplitResult(
            method=request.method,
            bill=bill,
            shares=shares,
            total_assigned=sum((share.amount for share in shares), Decimal("0")),
        )

    def preview(self, table_id: str, request: SplitRequest) -> SplitResult:
        table = self.repository.get_table(table_id)
        return self.split(self.build_bill(table, request.tip_percentage), request)

    def complete_payment(
        self, table_id: str, request: PaymentRequest, force: bool = False
    ) -> PaymentReceipt:
        """
        Settle the table's bill and close the table.

        The bill is rebuilt from the table as it is now, under the table lock,
        so orders added since a preview are never missed.
        """
        force = force or request.force
        with self.locks.hold(table_id):
            table = self.repository.get_table(table_id)
            if not table.orders:
                logger.warning(f"Payment attempted on table {table.number} without orders")
                raise NotFoundError(
                    f"Table {table.number} has no open bill", context={"table_id": table_id}
                )

            result = self.split(self.build_bill(table, request.tip_percentage), request)
            self.table_state.close_table(table_id, force=force)

        receipt = PaymentReceipt(
            table_id=table.id,
            table_number=table.number,
            payment_method=request.payment_method,
            split=result,
            paid_at=datetime.utcnow(),
            forced=bool(force and result.bill.warnings),
        )
        logger.info(
            f"Payment of {result.bill.total} on table {table.number} by "
            f"{request.payment_method.value}, {request.method.value} split "
            f"across {len(result.shares)} payer(s)"
        )
        return receipt

    def _split_equal(self, bill: Bill, people: Optional[int]) -> List[PayerShare]:
        low, high = self.settings.min_equal_split, self.settings.max_equal_split
        if people is None or not low <= people <= high:
            raise ValidationError(
                f"Equal split needs between {low} and {high} people",
                context={"people": people},
            )

        cents = allocate_cents(to_cents(bill.total), [Decimal(1)] * people)
        return [
            PayerShare(payer_name=f"Person {index + 1}", amount=from_cents(amount))
            for index, amount in enumerate(cents)
        ]

    def _split_custom(self, bill: Bill, request: SplitRequest) -> List[PayerShare]:
        if not request.custom_shares:
            raise ValidationError("Add at least one payer to split the bill")

        for share in request.custom_shares:
            if not share.amount.is_finite() or share.amount < 0:
                raise ValidationError(
                    f"Amount for {share.payer_name} cannot be negative",
                    context={"payer_name": share.payer_name, "amount": str(share.amount)},
                )
            if share.amount != round_money(share.amount):
                raise ValidationError(
                    f"Amount for {share.payer_name} must be in whole cents",
                    context={"payer_name": share.payer_name, "amount": str(share.amount)},
                )

        assigned = sum((share.amount for share in request.custom_shares), Decimal("0"))
        remaining = bill.total - assigned
        if remaining != 0:
            if remaining > 0:
                message = f"Please assign the remaining {round_money(remaining)}"
            else:
                message = f"Total assigned exceeds the bill by {round_money(-remaining)}"
            raise ValidationError(
                message,
                context={
                    "remaining": str(remaining),
                    "assigned": str(assigned),
                    "total": str(bill.total),
                },
            )

        return [
            PayerShare(payer_name=share.payer_name, amount=round_money(share.amount))
            for share in request.custom_shares
        ]

    def _split_by_items(self, bill: Bill, request: SplitRequest) -> List[PayerShare]:
        if not request.item_shares:
            raise ValidationError("Add at least one payer to split the bill")

        lines = {(line.item_id, line.unit_price): line for line in bill.lines}
        assigned: Dict[Tuple[str, Decimal], int] = defaultdict(int)
        resolved = []
        for share in request.item_shares:
            share_lines = []
            for assignment in share.assignments:
                line = self._resolve_line(bill, assignment)
                assigned[(line.item_id, line.unit_price)] += assignment.quantity
                share_lines.append((line, assignment.quantity))
            resolved.append(share_lines)

        unassigned = sum(max(line.quantity - assigned[key], 0) for key, line in lines.items())
        over_assigned = sum(max(assigned[key] - line.quantity, 0) for key, line in lines.items())
        context = {"unassigned": unassigned, "over_assigned": over_assigned}
        if over_assigned:
            raise ValidationError(
                f"Too many items assigned. {over_assigned} item(s) over the order.",
                context=context,
            )
        if unassigned:
            raise ValidationError(
                f"Please assign all items. {unassigned} item(s) remaining.", context=context
            )

        subtotals = [
            sum((line.unit_price * quantity for line, quantity in share_lines), Decimal("0"))
            for share_lines in resolved
        ]
        # The tip follows each payer's share of the subtotal
        cents = allocate_cents(to_cents(bill.total), subtotals)

        shares = []
        for share, subtotal, amount in zip(request.item_shares, subtotals, cents):
            amount = from_cents(amount)
            items_subtotal = round_money(subtotal)
            shares.append(
                PayerShare(
                    payer_name=share.payer_name,
                    amount=amount,
                    items_subtotal=items_subtotal,
                    tip_share=amount - items_subtotal,
                )
            )
        return shares

    @staticmethod
    def _resolve_line(bill: Bill, assignment: ItemAssignment) -> BillLine:
        """Find the bill line an assignment refers to; the price picks among repriced items."""
        candidates = [line for line in bill.lines if line.item_id == assignment.item_id]
        if assignment.unit_price is not None:
            candidates = [line for line in candidates if line.unit_price == assignment.unit_price]
        if not candidates:
            raise ValidationError(
                f"Item {assignment.item_id} is not on the bill",
                context={"item_id": assignment.item_id},
            )
        if len(candidates) > 1:
            raise ValidationError(
                f"Item {assignment.item_id} was ordered at several prices; choose one",
                context={
                    "item_id": assignment.item_id,
                    "unit_prices": [str(line.unit_price) for line in candidates],
                },
            )
        return candidates[0]
