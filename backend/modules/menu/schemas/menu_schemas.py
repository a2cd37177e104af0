# backend/modules/menu/schemas/menu_schemas.py

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CENT = Decimal("0.01")


def is_valid_price(price: Any) -> bool:
    """A price is a finite, non-negative amount in whole cents."""
    try:
        value = Decimal(str(price))
        return value.is_finite() and value >= 0 and value == value.quantize(CENT)
    except (ArithmeticError, ValueError, TypeError):
        return False


class MenuItem(BaseModel):
    """A sellable item. ``category`` holds the category name."""

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., ge=0)
    description: str = ""
    image: str = ""
    available: bool = True

    model_config = ConfigDict(from_attributes=True)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: Decimal) -> Decimal:
        # Storage keeps two decimals; finer prices would bill differently per backend
        if not is_valid_price(v):
            raise ValueError("Price must be in whole cents")
        return v


# Prices are left unconstrained on requests so the service can reject them
# with a domain error instead of a schema error.
class MenuItemCreate(BaseModel):
    id: Optional[str] = Field(None, max_length=64)
    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    price: Decimal
    description: str = ""
    image: str = ""
    available: bool = True


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[Decimal] = None
    description: Optional[str] = None
    image: Optional[str] = None
    available: Optional[bool] = None


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class CategoryRename(BaseModel):
    new_name: str = Field(..., min_length=1, max_length=100)


class CategoryResponse(BaseModel):
    name: str
    item_count: int = 0
