"""
Service wiring.

One container per application: a single repository, a single lock registry
shared by every service that touches tables, and one admin lock for menu and
staff changes.
"""

import logging
import threading
from typing import Optional

from fastapi import Request
from sqlalchemy.engine import Engine

from core.config import Settings, get_settings
from core.database import build_engine, build_session_factory, init_db
from core.locks import KeyedLockRegistry
from core.repository import InMemoryRepository, Repository
from core.sql_repository import SqlAlchemyRepository
from modules.menu.services.menu_service import MenuService
from modules.orders.services.kitchen_queue_service import KitchenQueueService
from modules.orders.services.order_lifecycle_service import OrderLifecycleService
from modules.payments.services.split_bill_service import SplitBillService
from modules.staff.services.staff_service import StaffService
from modules.tables.services.table_admin_service import TableAdminService
from modules.tables.services.table_analytics_service import TableAnalyticsService
from modules.tables.services.table_state_service import TableStateService

logger = logging.getLogger(__name__)


class ServiceContainer:
    def __init__(
        self,
        repository: Repository,
        settings: Optional[Settings] = None,
        engine: Optional[Engine] = None,
    ):
        self.settings = settings or get_settings()
        self.repository = repository
        self.engine = engine

        self.table_locks = KeyedLockRegistry()
        self.admin_lock = threading.RLock()

        self.order_lifecycle = OrderLifecycleService()
        self.table_state = TableStateService(repository, self.table_locks, self.order_lifecycle)
        self.table_admin = TableAdminService(repository, self.table_locks)
        self.table_analytics = TableAnalyticsService(repository)
        self.kitchen_queue = KitchenQueueService(repository)
        self.menu = MenuService(repository, self.admin_lock)
        self.staff = StaffService(repository, self.admin_lock)
        self.split_bill = SplitBillService(self.table_state, self.settings)

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database engine disposed")


def build_container(settings: Optional[Settings] = None) -> ServiceContainer:
    """Pick the repository from configuration and wire the services around it."""
    settings = settings or get_settings()
    if not settings.uses_database:
        logger.info("Using in-memory repository")
        return ServiceContainer(InMemoryRepository(), settings)

    engine = build_engine(settings.database_url)
    init_db(engine)
    logger.info(f"Using SQL repository on {engine.url.render_as_string(hide_password=True)}")
    repository = SqlAlchemyRepository(build_session_factory(engine))
    return ServiceContainer(repository, settings, engine=engine)


# FastAPI dependencies
def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_table_state_service(request: Request) -> TableStateService:
    return get_container(request).table_state


def get_table_admin_service(request: Request) -> TableAdminService:
    return get_container(request).table_admin


def get_table_analytics_service(request: Request) -> TableAnalyticsService:
    return get_container(request).table_analytics


def get_kitchen_queue_service(request: Request) -> KitchenQueueService:
    return get_container(request).kitchen_queue


def get_menu_service(request: Request) -> MenuService:
    return get_container(request).menu


def get_staff_service(request: Request) -> StaffService:
    return get_container(request).staff


def get_split_bill_service(request: Request) -> SplitBillService:
    return get_container(request).split_bill
