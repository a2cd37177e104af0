"""
Domain exceptions and handlers for consistent API error responses.

Services raise these exceptions directly; they subclass ``HTTPException`` so
the HTTP layer can render them without translation, while plain Python
callers can catch them like any other exception.
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class APIError(HTTPException):
    """Base API error with consistent structure"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code
        self.context = context or {}

    def __str__(self) -> str:
        return str(self.detail)


class ValidationError(APIError):
    """Bad input shape or range (negative price, empty cart, split mismatch)"""

    def __init__(
        self,
        detail: str = "Validation failed",
        error_code: str = "VALIDATION_ERROR",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code,
            context=context,
        )


class InvalidStateError(APIError):
    """Operation not legal in the entity's current state"""

    def __init__(
        self,
        detail: str = "Operation not allowed in current state",
        error_code: str = "INVALID_STATE",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code=error_code,
            context=context,
        )


class NotFoundError(APIError):
    """Resource not found error"""

    def __init__(
        self,
        detail: str = "Resource not found",
        error_code: str = "NOT_FOUND",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=error_code,
            context=context,
        )


class ConflictError(APIError):
    """Uniqueness or referential conflict"""

    def __init__(
        self,
        detail: str = "Resource conflict",
        error_code: str = "CONFLICT",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code=error_code,
            context=context,
        )


class AuthError(APIError):
    """Authentication error. The message never says which part was wrong."""

    def __init__(self, detail: str = "Invalid credentials", error_code: str = "AUTH_FAILED"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"},
        )


class PermissionDeniedError(APIError):
    """Authenticated user lacks the role for the operation"""

    def __init__(
        self, detail: str = "Permission denied", error_code: str = "PERMISSION_DENIED"
    ):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN, detail=detail, error_code=error_code
        )


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API errors"""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} at {request.url.path}: {exc.detail}")
    else:
        logger.info(f"{exc.error_code} at {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error_code": exc.error_code,
            "path": str(request.url.path),
            "context": exc.context,
        },
        headers=exc.headers,
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and hide internals from the caller"""
    logger.error(f"Unhandled exception at {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "An unexpected error occurred. Please try again later.",
            "error_code": "INTERNAL_ERROR",
            "path": str(request.url.path),
        },
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app"""
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
