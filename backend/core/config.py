"""
Configuration management for the OrderFlow backend.

Values come from environment variables (or a local ``.env`` file) and are
validated once at startup.
"""

from decimal import Decimal
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application
    app_name: str = "OrderFlow API"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Storage: leave unset to run on the in-memory repository
    database_url: Optional[str] = None
    log_sql_queries: bool = False
    seed_demo_data: bool = False

    # JWT Authentication - MUST be overridden in production
    jwt_secret_key: str = "dev-secret-change-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 12 * 60

    # System accounts
    kitchen_password: str = Field(default="kitchen123", min_length=1)
    manager_password: str = Field(default="admin123", min_length=1)

    # Password hashing (argon2)
    argon2_time_cost: int = Field(default=3, ge=1)
    argon2_memory_cost: int = Field(default=65536, ge=8)
    argon2_parallelism: int = Field(default=2, ge=1)

    # Billing
    tip_presets: List[Decimal] = [Decimal("0"), Decimal("5"), Decimal("10"), Decimal("15")]
    min_equal_split: int = 2
    max_equal_split: int = 10

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str, info) -> str:
        """Refuse the development secret outside development/test."""
        environment = info.data.get("environment", "development")
        if environment == "production" and v == "dev-secret-change-in-production":
            raise ValueError("JWT_SECRET_KEY must be set in production")
        return v

    @property
    def uses_database(self) -> bool:
        return bool(self.database_url)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
