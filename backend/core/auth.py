"""
Bearer-token authentication and role checks for the HTTP layer.

Tokens are short JWTs carrying the user id and role. The user is looked up
again on every request so deleted staff lose access immediately.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from .config import get_settings
from .exceptions import AuthError, NotFoundError, PermissionDeniedError
from modules.staff.enums.staff_enums import StaffRole
from modules.staff.schemas.staff_schemas import StaffUser

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


class TokenData(BaseModel):
    user_id: str
    role: StaffRole


def create_access_token(user: StaffUser, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    expire = datetime.utcnow() + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode = {
        "sub": user.id,
        "username": user.username,
        "role": user.role.value,
        "type": "access",
        "exp": expire,
        "iat": datetime.utcnow(),
    }
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> TokenData:
    """Decode an access token; any problem is reported as AuthError."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        raise AuthError("Could not validate credentials")

    if payload.get("type") != "access" or not payload.get("sub"):
        logger.warning("Token is missing required claims")
        raise AuthError("Could not validate credentials")

    try:
        return TokenData(user_id=payload["sub"], role=payload.get("role"))
    except ValueError:
        raise AuthError("Could not validate credentials")


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> StaffUser:
    if credentials is None:
        raise AuthError("Not authenticated")

    token_data = verify_token(credentials.credentials)
    staff_service = request.app.state.container.staff
    try:
        user = staff_service.get_user(token_data.user_id)
    except NotFoundError:
        logger.warning(f"Token presented for missing user {token_data.user_id}")
        raise AuthError("Could not validate credentials")

    if user.role != token_data.role:
        raise AuthError("Could not validate credentials")
    return user


def require_roles(*roles: StaffRole) -> Callable[..., StaffUser]:
    """Dependency factory admitting only users holding one of ``roles``."""
    allowed: List[StaffRole] = list(roles)

    def dependency(user: StaffUser = Depends(get_current_user)) -> StaffUser:
        if user.role not in allowed:
            logger.warning(
                f"User {user.id} ({user.role.value}) denied; requires "
                f"{', '.join(role.value for role in allowed)}"
            )
            raise PermissionDeniedError(
                f"Operation requires one of these roles: {[role.value for role in allowed]}"
            )
        return user

    return dependency
