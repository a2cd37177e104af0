"""
Application startup: logging, system accounts and optional demo data.
"""

import logging
from decimal import Decimal

from core.config import Settings
from core.exceptions import ConflictError
from modules.menu.schemas.menu_schemas import MenuItemCreate
from modules.staff.schemas.staff_schemas import StaffCreate
from modules.tables.schemas.table_schemas import TableCreate
from .container import ServiceContainer

logger = logging.getLogger(__name__)


DEMO_CATEGORIES = ["Appetizers", "Main Courses", "Beverages", "Desserts"]

DEMO_MENU = [
    ("Caesar Salad", "Appetizers", "28.90", "Romaine lettuce, parmesan, croutons and Caesar dressing"),
    ("Bruschetta", "Appetizers", "24.90", "Toasted bread with tomatoes, garlic and basil"),
    ("Sushi Platter", "Appetizers", "45.90", "Assorted nigiri and maki rolls"),
    ("Grilled Steak", "Main Courses", "89.90", "Sirloin with roasted potatoes and vegetables"),
    ("Artisan Burger", "Main Courses", "52.90", "Beef patty, cheddar, caramelized onions, fries"),
    ("Pasta Carbonara", "Main Courses", "48.90", "Spaghetti with egg, pancetta and pecorino"),
    ("Pizza Margherita", "Main Courses", "42.90", "Tomato sauce, mozzarella and fresh basil"),
    ("Espresso Coffee", "Beverages", "8.90", "Double shot of espresso"),
    ("Orange Juice", "Beverages", "12.90", "Freshly squeezed"),
    ("Soda", "Beverages", "8.00", "Can, 350ml"),
    ("House Cocktail", "Beverages", "28.90", "Bartender's signature cocktail"),
    ("Tiramisu", "Desserts", "24.90", "Classic Italian dessert with mascarpone"),
    ("Lava Cake", "Desserts", "28.90", "Warm chocolate cake with a molten center"),
    ("Cheesecake", "Desserts", "26.90", "New York style with berry coulis"),
]

DEMO_WAITERS = [
    ("john", "John Smith"),
    ("mary", "Mary Johnson"),
    ("peter", "Peter Brown"),
    ("anna", "Anna Davis"),
]
DEMO_WAITER_PASSWORD = "waiter123"

DEMO_TABLES = [(1, 4), (2, 2), (3, 4), (4, 6), (5, 2), (6, 8), (7, 4), (8, 4)]


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def seed_system_accounts(container: ServiceContainer) -> None:
    container.staff.ensure_system_accounts(
        kitchen_password=container.settings.kitchen_password,
        manager_password=container.settings.manager_password,
    )


def seed_demo_data(container: ServiceContainer) -> None:
    """Load a small restaurant: categories, menu, waiters and tables."""
    if container.repository.list_tables() or container.repository.list_menu_items():
        logger.info("Demo data skipped, repository already has data")
        return

    for name in DEMO_CATEGORIES:
        container.menu.create_category(name)

    for index, (name, category, price, description) in enumerate(DEMO_MENU, start=1):
        container.menu.create_menu_item(
            MenuItemCreate(
                id=str(index),
                name=name,
                category=category,
                price=Decimal(price),
                description=description,
            )
        )

    for username, name in DEMO_WAITERS:
        try:
            container.staff.create_user(
                StaffCreate(id=username, username=username, name=name, password=DEMO_WAITER_PASSWORD)
            )
        except ConflictError:
            logger.info(f"Demo waiter '{username}' already exists")

    for number, seats in DEMO_TABLES:
        container.table_admin.create_table(TableCreate(number=number, seats=seats))

    logger.info(
        f"Seeded demo data: {len(DEMO_MENU)} menu items, {len(DEMO_WAITERS)} waiters, "
        f"{len(DEMO_TABLES)} tables"
    )


def run_startup(container: ServiceContainer) -> None:
    settings = container.settings
    logger.info("=" * 60)
    logger.info(f"Starting {settings.app_name}")
    logger.info(f"Environment: {settings.environment}")
    logger.info("=" * 60)

    if settings.environment == "development" and settings.jwt_secret_key.startswith("dev-secret"):
        logger.warning("Using development JWT secret - change for production")

    seed_system_accounts(container)
    if settings.seed_demo_data:
        seed_demo_data(container)
