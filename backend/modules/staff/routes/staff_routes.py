from typing import List

from fastapi import APIRouter, Depends, Query, status

from app.container import get_staff_service
from core.auth import require_roles
from ..enums.staff_enums import StaffRole
from ..schemas.staff_schemas import StaffCreate, StaffUpdate, StaffUser
from ..services.staff_service import StaffService

router = APIRouter(prefix="/staff", tags=["Staff"])

manager_only = require_roles(StaffRole.MANAGER)


@router.get("/users", response_model=List[StaffUser])
def list_staff(
    include_system: bool = Query(False),
    current_user: StaffUser = Depends(manager_only),
    service: StaffService = Depends(get_staff_service),
):
    return service.list_users(include_system=include_system)


@router.get("/users/{user_id}", response_model=StaffUser)
def get_staff(
    user_id: str,
    current_user: StaffUser = Depends(manager_only),
    service: StaffService = Depends(get_staff_service),
):
    return service.get_user(user_id)


@router.post("/users", response_model=StaffUser, status_code=status.HTTP_201_CREATED)
def add_staff(
    staff_data: StaffCreate,
    current_user: StaffUser = Depends(manager_only),
    service: StaffService = Depends(get_staff_service),
):
    return service.create_user(staff_data)


@router.put("/users/{user_id}", response_model=StaffUser)
def update_staff(
    user_id: str,
    staff_data: StaffUpdate,
    current_user: StaffUser = Depends(manager_only),
    service: StaffService = Depends(get_staff_service),
):
    return service.update_user(user_id, staff_data)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_staff(
    user_id: str,
    current_user: StaffUser = Depends(manager_only),
    service: StaffService = Depends(get_staff_service),
):
    service.delete_user(user_id)
