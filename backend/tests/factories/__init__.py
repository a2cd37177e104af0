# backend/tests/factories/__init__.py

"""
Shared test factories for the OrderFlow backend.

Factories build domain snapshots (pydantic models); save them through a
repository when a test needs them persisted.
"""

from .menu import MenuItemFactory
from .order import OrderItemFactory, OrderFactory
from .staff import StaffUserFactory
from .table import TableFactory

__all__ = [
    "MenuItemFactory",
    "OrderItemFactory",
    "OrderFactory",
    "StaffUserFactory",
    "TableFactory",
]
