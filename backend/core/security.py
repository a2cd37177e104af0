"""
Password hashing for staff credentials.

Secrets are hashed with argon2 through passlib; the plaintext never reaches
the repository.
"""

import logging
from functools import lru_cache

from passlib.context import CryptContext

from .config import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_password_context() -> CryptContext:
    settings = get_settings()
    context = CryptContext(
        schemes=["argon2"],
        deprecated="auto",
        argon2__time_cost=settings.argon2_time_cost,
        argon2__memory_cost=settings.argon2_memory_cost,
        argon2__parallelism=settings.argon2_parallelism,
    )
    logger.info("Password context initialized with argon2")
    return context


def hash_password(password: str) -> str:
    return get_password_context().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash; malformed hashes simply fail."""
    if not hashed_password:
        return False
    try:
        return get_password_context().verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored credential hash could not be parsed")
        return False
