from decimal import Decimal

from fastapi import APIRouter, Depends, Query

from app.container import get_split_bill_service
from core.auth import require_roles
from modules.staff.enums.staff_enums import StaffRole
from modules.staff.schemas.staff_schemas import StaffUser
from ..schemas.split_bill_schemas import (
    Bill,
    PaymentReceipt,
    PaymentRequest,
    SplitRequest,
    SplitResult,
)
from ..services.split_bill_service import SplitBillService

router = APIRouter(prefix="/tables/{table_id}", tags=["Payments"])

floor_staff = require_roles(StaffRole.WAITER, StaffRole.MANAGER)


@router.get("/bill", response_model=Bill)
def get_bill(
    table_id: str,
    tip_percentage: Decimal = Query(Decimal("0")),
    current_user: StaffUser = Depends(floor_staff),
    service: SplitBillService = Depends(get_split_bill_service),
):
    table = service.repository.get_table(table_id)
    return service.build_bill(table, tip_percentage)


@router.post("/bill/preview", response_model=SplitResult)
def preview_split(
    table_id: str,
    request: SplitRequest,
    current_user: StaffUser = Depends(floor_staff),
    service: SplitBillService = Depends(get_split_bill_service),
):
    """Calculate each payer's share without touching the table"""
    return service.preview(table_id, request)


@router.post("/payment", response_model=PaymentReceipt)
def complete_payment(
    table_id: str,
    request: PaymentRequest,
    current_user: StaffUser = Depends(floor_staff),
    service: SplitBillService = Depends(get_split_bill_service),
):
    """Settle the bill and free the table"""
    return service.complete_payment(table_id, request)
