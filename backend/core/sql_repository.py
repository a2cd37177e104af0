"""
SQLAlchemy implementation of the repository contract.

Each call runs in its own session and transaction; domain snapshots are
built from the ORM rows before the session closes, so no ORM object ever
leaves this module.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from .exceptions import ConflictError, NotFoundError
from .repository import Repository
from modules.menu.models.menu_models import MenuCategoryRecord, MenuItemRecord
from modules.menu.schemas.menu_schemas import MenuItem
from modules.orders.models.order_models import OrderItemRecord, OrderRecord
from modules.staff.models.staff_models import StaffRecord
from modules.staff.schemas.staff_schemas import StaffUser
from modules.tables.models.table_models import TableRecord
from modules.tables.schemas.table_schemas import Table

logger = logging.getLogger(__name__)

ORDER_TIMESTAMP_FIELDS = ("sent_at", "preparing_at", "done_at", "delivered_at")


class SqlAlchemyRepository(Repository):
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Integrity error, transaction rolled back: {e.orig}")
            raise ConflictError("Conflicting data, change was not saved") from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # Tables
    def _load_table(self, db: Session, table_id: str) -> TableRecord:
        stmt = (
            select(TableRecord)
            .where(TableRecord.id == table_id)
            .options(selectinload(TableRecord.orders).selectinload(OrderRecord.items))
        )
        record = db.execute(stmt).scalar_one_or_none()
        if record is None:
            raise NotFoundError(f"Table {table_id} not found")
        return record

    def list_tables(self) -> List[Table]:
        with self._session() as db:
            stmt = (
                select(TableRecord)
                .order_by(TableRecord.number)
                .options(selectinload(TableRecord.orders).selectinload(OrderRecord.items))
            )
            return [Table.model_validate(r) for r in db.execute(stmt).scalars()]

    def get_table(self, table_id: str) -> Table:
        with self._session() as db:
            return Table.model_validate(self._load_table(db, table_id))

    def save_table(self, table: Table) -> Table:
        with self._session() as db:
            duplicate = db.execute(
                select(TableRecord.id).where(
                    TableRecord.number == table.number, TableRecord.id != table.id
                )
            ).first()
            if duplicate:
                raise ConflictError(
                    f"Table number {table.number} already exists",
                    context={"number": table.number},
                )

            try:
                record = self._load_table(db, table.id)
            except NotFoundError:
                record = TableRecord(id=table.id)
                db.add(record)

            record.number = table.number
            record.seats = table.seats
            record.status = table.status
            record.waiter_id = table.waiter_id
            record.active = table.active

            # Items of a sent order never change; only status and timestamps move.
            existing = {order.id: order for order in record.orders}
            orders = []
            for position, order in enumerate(table.orders):
                order_record = existing.get(order.id)
                if order_record is None:
                    order_record = OrderRecord(
                        id=order.id,
                        created_at=order.created_at,
                        items=[
                            OrderItemRecord(position=index, **item.model_dump())
                            for index, item in enumerate(order.items)
                        ],
                    )
                order_record.position = position
                order_record.status = order.status
                for field in ORDER_TIMESTAMP_FIELDS:
                    setattr(order_record, field, getattr(order, field))
                orders.append(order_record)
            record.orders = orders

            db.flush()
            return Table.model_validate(record)

    def delete_table(self, table_id: str) -> None:
        with self._session() as db:
            db.delete(self._load_table(db, table_id))

    # Menu items
    def list_menu_items(self) -> List[MenuItem]:
        with self._session() as db:
            stmt = select(MenuItemRecord).order_by(MenuItemRecord.position, MenuItemRecord.created_at)
            return [MenuItem.model_validate(r) for r in db.execute(stmt).scalars()]

    def get_menu_item(self, item_id: str) -> MenuItem:
        with self._session() as db:
            record = db.get(MenuItemRecord, item_id)
            if record is None:
                raise NotFoundError(f"Menu item {item_id} not found")
            return MenuItem.model_validate(record)

    def save_menu_item(self, item: MenuItem) -> MenuItem:
        with self._session() as db:
            if self._get_category(db, item.category) is None:
                raise NotFoundError(f"Category '{item.category}' not found")

            record = db.get(MenuItemRecord, item.id)
            if record is None:
                next_position = db.execute(
                    select(func.coalesce(func.max(MenuItemRecord.position), -1) + 1)
                ).scalar_one()
                record = MenuItemRecord(id=item.id, position=next_position)
                db.add(record)

            for field, value in item.model_dump(exclude={"id"}).items():
                setattr(record, field, value)
            db.flush()
            return MenuItem.model_validate(record)

    def delete_menu_item(self, item_id: str) -> None:
        with self._session() as db:
            record = db.get(MenuItemRecord, item_id)
            if record is None:
                raise NotFoundError(f"Menu item {item_id} not found")
            db.delete(record)

    # Categories
    @staticmethod
    def _get_category(db: Session, name: str) -> Optional[MenuCategoryRecord]:
        return db.execute(
            select(MenuCategoryRecord).where(MenuCategoryRecord.name == name)
        ).scalar_one_or_none()

    def list_categories(self) -> List[str]:
        with self._session() as db:
            stmt = select(MenuCategoryRecord.name).order_by(MenuCategoryRecord.id)
            return list(db.execute(stmt).scalars())

    def add_category(self, name: str) -> str:
        with self._session() as db:
            if self._get_category(db, name) is not None:
                raise ConflictError(f"Category '{name}' already exists")
            db.add(MenuCategoryRecord(name=name))
            return name

    def rename_category(self, old_name: str, new_name: str) -> str:
        with self._session() as db:
            category = self._get_category(db, old_name)
            if category is None:
                raise NotFoundError(f"Category '{old_name}' not found")
            if new_name == old_name:
                return new_name
            if self._get_category(db, new_name) is not None:
                raise ConflictError(f"Category '{new_name}' already exists")

            category.name = new_name
            db.flush()
            # Backends without ON UPDATE CASCADE need the items moved explicitly
            db.execute(
                update(MenuItemRecord)
                .where(MenuItemRecord.category == old_name)
                .values(category=new_name)
                .execution_options(synchronize_session=False)
            )
            return new_name

    def delete_category(self, name: str) -> None:
        with self._session() as db:
            category = self._get_category(db, name)
            if category is None:
                raise NotFoundError(f"Category '{name}' not found")
            in_use = db.execute(
                select(func.count(MenuItemRecord.id)).where(MenuItemRecord.category == name)
            ).scalar_one()
            if in_use:
                raise ConflictError(
                    f"Category '{name}' is used by {in_use} menu item(s)",
                    context={"category": name, "item_count": in_use},
                )
            db.delete(category)

    # Staff
    def list_users(self) -> List[StaffUser]:
        with self._session() as db:
            stmt = select(StaffRecord).order_by(StaffRecord.created_at, StaffRecord.id)
            return [StaffUser.model_validate(r) for r in db.execute(stmt).scalars()]

    def get_user(self, user_id: str) -> StaffUser:
        with self._session() as db:
            record = db.get(StaffRecord, user_id)
            if record is None:
                raise NotFoundError(f"User {user_id} not found")
            return StaffUser.model_validate(record)

    def get_user_by_username(self, username: str) -> Optional[StaffUser]:
        with self._session() as db:
            record = db.execute(
                select(StaffRecord).where(StaffRecord.username == username)
            ).scalar_one_or_none()
            return StaffUser.model_validate(record) if record else None

    def save_user(self, user: StaffUser) -> StaffUser:
        with self._session() as db:
            taken = db.execute(
                select(StaffRecord.id).where(
                    StaffRecord.username == user.username, StaffRecord.id != user.id
                )
            ).first()
            if taken:
                raise ConflictError(f"Username '{user.username}' is already taken")

            record = db.get(StaffRecord, user.id)
            if record is None:
                record = StaffRecord(id=user.id)
                db.add(record)
            record.username = user.username
            record.name = user.name
            record.role = user.role
            db.flush()
            return StaffUser.model_validate(record)

    def delete_user(self, user_id: str) -> None:
        with self._session() as db:
            record = db.get(StaffRecord, user_id)
            if record is None:
                raise NotFoundError(f"User {user_id} not found")
            db.delete(record)

    def set_credential(self, user_id: str, hashed_password: str) -> None:
        with self._session() as db:
            record = db.get(StaffRecord, user_id)
            if record is None:
                raise NotFoundError(f"User {user_id} not found")
            record.hashed_password = hashed_password

    def get_credential(self, user_id: str) -> Optional[str]:
        with self._session() as db:
            record = db.get(StaffRecord, user_id)
            return record.hashed_password if record else None
