"""
REST API routes for the manager dashboard.
"""

from fastapi import APIRouter, Depends

from app.container import get_table_analytics_service
from core.auth import require_roles
from modules.staff.enums.staff_enums import StaffRole
from modules.staff.schemas.staff_schemas import StaffUser
from ..services.table_analytics_service import TableAnalyticsService
from ..schemas.table_schemas import DashboardSummary

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummary)
def get_dashboard_summary(
    current_user: StaffUser = Depends(require_roles(StaffRole.MANAGER)),
    service: TableAnalyticsService = Depends(get_table_analytics_service),
):
    """Table and order counts, open revenue and occupancy right now."""
    return service.get_dashboard_summary()
