"""
Persistence contract for tables, menu, categories and staff.

Services only talk to a ``Repository``. Every read returns a snapshot that the
caller may mutate freely; nothing is visible to others until it is saved.
The repository owns the uniqueness and referential rules (table numbers,
usernames, category names, category references) so that they hold no matter
which service writes.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .exceptions import AuthError, ConflictError, NotFoundError
from .security import verify_password
from modules.menu.schemas.menu_schemas import MenuItem
from modules.staff.enums.staff_enums import StaffRole
from modules.staff.schemas.staff_schemas import StaffUser
from modules.tables.schemas.table_schemas import Table

logger = logging.getLogger(__name__)


class Repository(ABC):
    # Tables
    @abstractmethod
    def list_tables(self) -> List[Table]:
        """All tables ordered by number."""

    @abstractmethod
    def get_table(self, table_id: str) -> Table:
        """Return the table or raise NotFoundError."""

    @abstractmethod
    def save_table(self, table: Table) -> Table:
        """Insert or fully replace a table, orders included."""

    @abstractmethod
    def delete_table(self, table_id: str) -> None:
        pass

    # Menu items
    @abstractmethod
    def list_menu_items(self) -> List[MenuItem]:
        pass

    @abstractmethod
    def get_menu_item(self, item_id: str) -> MenuItem:
        pass

    @abstractmethod
    def save_menu_item(self, item: MenuItem) -> MenuItem:
        """Upsert by id. The category must exist."""

    @abstractmethod
    def delete_menu_item(self, item_id: str) -> None:
        pass

    # Categories
    @abstractmethod
    def list_categories(self) -> List[str]:
        pass

    @abstractmethod
    def add_category(self, name: str) -> str:
        pass

    @abstractmethod
    def rename_category(self, old_name: str, new_name: str) -> str:
        """Rename a category and every menu item that references it, atomically."""

    @abstractmethod
    def delete_category(self, name: str) -> None:
        """Delete an unreferenced category; ConflictError while items use it."""

    # Staff
    @abstractmethod
    def list_users(self) -> List[StaffUser]:
        pass

    @abstractmethod
    def get_user(self, user_id: str) -> StaffUser:
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[StaffUser]:
        pass

    @abstractmethod
    def save_user(self, user: StaffUser) -> StaffUser:
        pass

    @abstractmethod
    def delete_user(self, user_id: str) -> None:
        pass

    @abstractmethod
    def set_credential(self, user_id: str, hashed_password: str) -> None:
        pass

    @abstractmethod
    def get_credential(self, user_id: str) -> Optional[str]:
        pass

    def authenticate(self, username: str, password: str, role: StaffRole) -> StaffUser:
        """
        Resolve a login attempt to a user.

        Every failure raises the same AuthError so callers cannot tell an
        unknown username from a wrong password or role.
        """
        user = self.get_user_by_username(username)
        if user is None or user.role != role:
            logger.warning(f"Login rejected for username '{username}' as {role.value}")
            raise AuthError()

        if not verify_password(password, self.get_credential(user.id) or ""):
            logger.warning(f"Login rejected for username '{username}' as {role.value}")
            raise AuthError()

        return user


class InMemoryRepository(Repository):
    """Process-local repository backed by dicts behind a single RLock."""

    def __init__(self):
        self._lock = threading.RLock()
        self._tables: Dict[str, Table] = {}
        self._menu_items: Dict[str, MenuItem] = {}
        self._categories: List[str] = []
        self._users: Dict[str, StaffUser] = {}
        self._credentials: Dict[str, str] = {}

    # Tables
    def list_tables(self) -> List[Table]:
        with self._lock:
            tables = sorted(self._tables.values(), key=lambda t: t.number)
            return [table.model_copy(deep=True) for table in tables]

    def get_table(self, table_id: str) -> Table:
        with self._lock:
            table = self._tables.get(table_id)
            if table is None:
                raise NotFoundError(f"Table {table_id} not found")
            return table.model_copy(deep=True)

    def save_table(self, table: Table) -> Table:
        with self._lock:
            for other in self._tables.values():
                if other.number == table.number and other.id != table.id:
                    raise ConflictError(
                        f"Table number {table.number} already exists",
                        context={"number": table.number},
                    )
            self._tables[table.id] = table.model_copy(deep=True)
            return table.model_copy(deep=True)

    def delete_table(self, table_id: str) -> None:
        with self._lock:
            if self._tables.pop(table_id, None) is None:
                raise NotFoundError(f"Table {table_id} not found")

    # Menu items
    def list_menu_items(self) -> List[MenuItem]:
        with self._lock:
            return [item.model_copy(deep=True) for item in self._menu_items.values()]

    def get_menu_item(self, item_id: str) -> MenuItem:
        with self._lock:
            item = self._menu_items.get(item_id)
            if item is None:
                raise NotFoundError(f"Menu item {item_id} not found")
            return item.model_copy(deep=True)

    def save_menu_item(self, item: MenuItem) -> MenuItem:
        with self._lock:
            if item.category not in self._categories:
                raise NotFoundError(f"Category '{item.category}' not found")
            self._menu_items[item.id] = item.model_copy(deep=True)
            return item.model_copy(deep=True)

    def delete_menu_item(self, item_id: str) -> None:
        with self._lock:
            if self._menu_items.pop(item_id, None) is None:
                raise NotFoundError(f"Menu item {item_id} not found")

    # Categories
    def list_categories(self) -> List[str]:
        with self._lock:
            return list(self._categories)

    def add_category(self, name: str) -> str:
        with self._lock:
            if name in self._categories:
                raise ConflictError(f"Category '{name}' already exists")
            self._categories.append(name)
            return name

    def rename_category(self, old_name: str, new_name: str) -> str:
        with self._lock:
            if old_name not in self._categories:
                raise NotFoundError(f"Category '{old_name}' not found")
            if new_name == old_name:
                return new_name
            if new_name in self._categories:
                raise ConflictError(f"Category '{new_name}' already exists")

            self._categories[self._categories.index(old_name)] = new_name
            for item_id, item in self._menu_items.items():
                if item.category == old_name:
                    self._menu_items[item_id] = item.model_copy(update={"category": new_name})
            return new_name

    def delete_category(self, name: str) -> None:
        with self._lock:
            if name not in self._categories:
                raise NotFoundError(f"Category '{name}' not found")
            in_use = sum(1 for item in self._menu_items.values() if item.category == name)
            if in_use:
                raise ConflictError(
                    f"Category '{name}' is used by {in_use} menu item(s)",
                    context={"category": name, "item_count": in_use},
                )
            self._categories.remove(name)

    # Staff
    def list_users(self) -> List[StaffUser]:
        with self._lock:
            return [user.model_copy() for user in self._users.values()]

    def get_user(self, user_id: str) -> StaffUser:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")
            return user.model_copy()

    def get_user_by_username(self, username: str) -> Optional[StaffUser]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user.model_copy()
            return None

    def save_user(self, user: StaffUser) -> StaffUser:
        with self._lock:
            for other in self._users.values():
                if other.username == user.username and other.id != user.id:
                    raise ConflictError(f"Username '{user.username}' is already taken")
            self._users[user.id] = user.model_copy()
            return user.model_copy()

    def delete_user(self, user_id: str) -> None:
        with self._lock:
            if self._users.pop(user_id, None) is None:
                raise NotFoundError(f"User {user_id} not found")
            self._credentials.pop(user_id, None)

    def set_credential(self, user_id: str, hashed_password: str) -> None:
        with self._lock:
            if user_id not in self._users:
                raise NotFoundError(f"User {user_id} not found")
            self._credentials[user_id] = hashed_password

    def get_credential(self, user_id: str) -> Optional[str]:
        with self._lock:
            return self._credentials.get(user_id)
