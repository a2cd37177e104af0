from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..enums.staff_enums import StaffRole


class StaffUser(BaseModel):
    id: str
    username: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    role: StaffRole = StaffRole.WAITER

    model_config = ConfigDict(from_attributes=True)


class StaffCreate(BaseModel):
    id: Optional[str] = Field(None, max_length=64)
    username: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    password: str = Field(..., min_length=1)
    role: StaffRole = StaffRole.WAITER

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        return v.strip()


class StaffUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=1, max_length=100)
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    password: Optional[str] = Field(None, min_length=1)

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class LoginRequest(BaseModel):
    username: str
    password: str
    role: StaffRole


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: StaffUser
