"""
Authentication routes.

Staff log in with username, password and the role they are signing in as;
the response carries a bearer token for the other endpoints.
"""

from fastapi import APIRouter, Depends

from app.container import get_staff_service
from core.auth import create_access_token, get_current_user
from core.config import get_settings
from modules.staff.schemas.staff_schemas import LoginRequest, StaffUser, TokenResponse
from modules.staff.services.staff_service import StaffService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse)
def login(
    credentials: LoginRequest,
    staff_service: StaffService = Depends(get_staff_service),
):
    """
    Authenticate a waiter, the kitchen or the manager.

    Any mismatch of username, password or role returns 401 with the same
    "Invalid credentials" message.
    """
    user = staff_service.authenticate(credentials.username, credentials.password, credentials.role)
    settings = get_settings()
    return TokenResponse(
        access_token=create_access_token(user),
        expires_in=settings.access_token_expire_minutes * 60,
        user=user,
    )


@router.get("/me", response_model=StaffUser)
def read_current_user(current_user: StaffUser = Depends(get_current_user)):
    return current_user
