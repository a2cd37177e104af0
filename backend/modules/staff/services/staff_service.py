import logging
import threading
import uuid
from typing import List, Optional

from core.exceptions import ConflictError, PermissionDeniedError, ValidationError
from core.repository import Repository
from core.security import hash_password
from ..enums.staff_enums import StaffRole
from ..schemas.staff_schemas import StaffCreate, StaffUpdate, StaffUser

logger = logging.getLogger(__name__)

KITCHEN_ACCOUNT = StaffUser(id="kitchen", username="kitchen", name="Kitchen", role=StaffRole.KITCHEN)
MANAGER_ACCOUNT = StaffUser(id="manager", username="admin", name="Manager", role=StaffRole.MANAGER)
SYSTEM_ACCOUNT_IDS = {KITCHEN_ACCOUNT.id, MANAGER_ACCOUNT.id}


class StaffService:
    """Waiter roster plus the two system accounts (kitchen, manager)."""

    def __init__(self, repository: Repository, admin_lock: Optional[threading.RLock] = None):
        self.repository = repository
        self.admin_lock = admin_lock or threading.RLock()

    def list_users(self, include_system: bool = False) -> List[StaffUser]:
        users = self.repository.list_users()
        if include_system:
            return users
        return [user for user in users if user.id not in SYSTEM_ACCOUNT_IDS]

    def get_user(self, user_id: str) -> StaffUser:
        return self.repository.get_user(user_id)

    def create_user(self, user_data: StaffCreate) -> StaffUser:
        if user_data.role != StaffRole.WAITER:
            raise ValidationError(
                "Only waiter accounts can be created",
                context={"role": user_data.role.value},
            )
        if not user_data.username:
            raise ValidationError("Username cannot be empty")

        user = StaffUser(
            id=user_data.id or f"waiter-{uuid.uuid4().hex[:8]}",
            username=user_data.username,
            name=user_data.name,
            role=StaffRole.WAITER,
        )
        with self.admin_lock:
            if user.id in SYSTEM_ACCOUNT_IDS:
                raise ConflictError(f"User id '{user.id}' is reserved")
            if self.repository.get_user_by_username(user.username) is not None:
                raise ConflictError(f"Username '{user.username}' is already taken")
            user = self.repository.save_user(user)
            self.repository.set_credential(user.id, hash_password(user_data.password))

        logger.info(f"Created waiter {user.id} ({user.username})")
        return user

    def update_user(self, user_id: str, user_data: StaffUpdate) -> StaffUser:
        changes = user_data.model_dump(exclude_unset=True, exclude={"password"})
        with self.admin_lock:
            user = self.repository.get_user(user_id)
            if user_id in SYSTEM_ACCOUNT_IDS and "username" in changes:
                raise PermissionDeniedError("System account usernames cannot be changed")

            user = StaffUser.model_validate(
                {**user.model_dump(), **{k: v for k, v in changes.items() if v is not None}}
            )
            user = self.repository.save_user(user)
            if user_data.password:
                self.repository.set_credential(user_id, hash_password(user_data.password))

        logger.info(
            f"Updated user {user_id}"
            + (" (password changed)" if user_data.password else "")
        )
        return user

    def delete_user(self, user_id: str) -> None:
        """Remove a waiter. Tables keep the dangling waiter id."""
        if user_id in SYSTEM_ACCOUNT_IDS:
            logger.warning(f"Rejected deletion of system account {user_id}")
            raise PermissionDeniedError("System accounts cannot be deleted")

        with self.admin_lock:
            self.repository.delete_user(user_id)
        logger.info(f"Deleted user {user_id}")

    def authenticate(self, username: str, password: str, role: StaffRole) -> StaffUser:
        user = self.repository.authenticate(username.strip(), password, role)
        logger.info(f"User {user.id} logged in as {role.value}")
        return user

    def ensure_system_accounts(self, kitchen_password: str, manager_password: str) -> None:
        """Create the kitchen and manager accounts if they do not exist yet."""
        with self.admin_lock:
            for account, password in (
                (KITCHEN_ACCOUNT, kitchen_password),
                (MANAGER_ACCOUNT, manager_password),
            ):
                existing = {user.id for user in self.repository.list_users()}
                if account.id in existing:
                    continue
                self.repository.save_user(account)
                self.repository.set_credential(account.id, hash_password(password))
                logger.info(f"Seeded system account '{account.username}'")
