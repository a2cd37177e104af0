# backend/modules/menu/services/menu_service.py

import logging
import threading
import uuid
from typing import List, Optional

from core.exceptions import ValidationError
from core.repository import Repository
from ..schemas.menu_schemas import (
    CategoryResponse,
    MenuItem,
    MenuItemCreate,
    MenuItemUpdate,
    is_valid_price,
)

logger = logging.getLogger(__name__)


def _clean_category_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name cannot be empty")
    return name


class MenuService:
    """Menu items and categories. Writes are serialized by the admin lock."""

    def __init__(self, repository: Repository, admin_lock: Optional[threading.RLock] = None):
        self.repository = repository
        self.admin_lock = admin_lock or threading.RLock()

    # Menu items
    def list_menu_items(
        self, category: Optional[str] = None, available_only: bool = False
    ) -> List[MenuItem]:
        items = self.repository.list_menu_items()
        if category is not None:
            items = [item for item in items if item.category == category]
        if available_only:
            items = [item for item in items if item.available]
        return items

    def get_menu_item(self, item_id: str) -> MenuItem:
        return self.repository.get_menu_item(item_id)

    def create_menu_item(self, item_data: MenuItemCreate) -> MenuItem:
        if not is_valid_price(item_data.price):
            raise ValidationError(
                "Price must be a non-negative amount in whole cents",
                context={"price": str(item_data.price)},
            )

        with self.admin_lock:
            item = MenuItem(
                id=item_data.id or f"item-{uuid.uuid4().hex[:8]}",
                **item_data.model_dump(exclude={"id"}),
            )
            item = self.repository.save_menu_item(item)

        logger.info(f"Created menu item {item.id} '{item.name}' in {item.category} at {item.price}")
        return item

    def update_menu_item(self, item_id: str, item_data: MenuItemUpdate) -> MenuItem:
        changes = item_data.model_dump(exclude_unset=True)
        if "price" in changes and not is_valid_price(changes["price"]):
            raise ValidationError(
                "Price must be a non-negative amount in whole cents",
                context={"price": str(changes["price"])},
            )

        with self.admin_lock:
            item = self.repository.get_menu_item(item_id)
            updated = {**item.model_dump(), **{k: v for k, v in changes.items() if v is not None}}
            item = self.repository.save_menu_item(MenuItem.model_validate(updated))

        logger.info(f"Updated menu item {item_id}: {', '.join(changes) or 'no changes'}")
        return item

    def set_availability(self, item_id: str, available: bool) -> MenuItem:
        return self.update_menu_item(item_id, MenuItemUpdate(available=available))

    def toggle_availability(self, item_id: str) -> MenuItem:
        with self.admin_lock:
            item = self.repository.get_menu_item(item_id)
            return self.set_availability(item_id, not item.available)

    def delete_menu_item(self, item_id: str) -> None:
        with self.admin_lock:
            self.repository.delete_menu_item(item_id)
        logger.info(f"Deleted menu item {item_id}")

    # Categories
    def list_categories(self) -> List[CategoryResponse]:
        items = self.repository.list_menu_items()
        return [
            CategoryResponse(
                name=name, item_count=sum(1 for item in items if item.category == name)
            )
            for name in self.repository.list_categories()
        ]

    def create_category(self, name: str) -> str:
        name = _clean_category_name(name)
        with self.admin_lock:
            self.repository.add_category(name)
        logger.info(f"Created category '{name}'")
        return name

    def rename_category(self, old_name: str, new_name: str) -> str:
        new_name = _clean_category_name(new_name)
        with self.admin_lock:
            self.repository.rename_category(old_name, new_name)
        logger.info(f"Renamed category '{old_name}' to '{new_name}'")
        return new_name

    def delete_category(self, name: str) -> None:
        with self.admin_lock:
            self.repository.delete_category(name)
        logger.info(f"Deleted category '{name}'")
