"""
Pytest configuration file for backend testing.
"""
import os
import sys
from decimal import Decimal
from pathlib import Path

# Add the backend directory to Python path so imports work correctly
backend_dir = Path(__file__).parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Cheap password hashing for tests; must be set before settings are cached
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")
os.environ.setdefault("ARGON2_PARALLELISM", "1")
os.environ.setdefault("SEED_DEMO_DATA", "false")
os.environ.pop("DATABASE_URL", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.container import ServiceContainer  # noqa: E402
from core.database import build_engine, build_session_factory, init_db  # noqa: E402
from core.repository import InMemoryRepository  # noqa: E402
from core.sql_repository import SqlAlchemyRepository  # noqa: E402
from modules.menu.schemas.menu_schemas import MenuItem  # noqa: E402
from modules.staff.enums.staff_enums import StaffRole  # noqa: E402
from modules.staff.schemas.staff_schemas import StaffCreate  # noqa: E402

KITCHEN_PASSWORD = "kitchen123"
MANAGER_PASSWORD = "admin123"
WAITER_PASSWORD = "waiter123"


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def sql_repository():
    """SQLAlchemy repository on a private in-memory sqlite database."""
    engine = build_engine("sqlite://", echo=False)
    init_db(engine)
    yield SqlAlchemyRepository(build_session_factory(engine))
    engine.dispose()


@pytest.fixture
def container(repository):
    container = ServiceContainer(repository)
    container.staff.ensure_system_accounts(KITCHEN_PASSWORD, MANAGER_PASSWORD)
    return container


@pytest.fixture
def menu_items(repository):
    """A small menu: burger and steak as main courses, soda as beverage."""
    for category in ("Main Courses", "Beverages"):
        repository.add_category(category)

    items = {
        "burger": MenuItem(id="burger", name="Artisan Burger", category="Main Courses", price=Decimal("30.00")),
        "steak": MenuItem(id="steak", name="Grilled Steak", category="Main Courses", price=Decimal("89.90")),
        "soda": MenuItem(id="soda", name="Soda", category="Beverages", price=Decimal("8.00")),
    }
    for item in items.values():
        repository.save_menu_item(item)
    return items


@pytest.fixture
def waiter(container):
    return container.staff.create_user(
        StaffCreate(id="john", username="john", name="John Smith", password=WAITER_PASSWORD)
    )


@pytest.fixture
def client(repository, menu_items):
    from app.main import create_app

    app = create_app(repository=repository)
    with TestClient(app) as c:
        yield c


def login(client, username: str, password: str, role: StaffRole) -> dict:
    response = client.post(
        "/api/auth/login",
        json={"username": username, "password": password, "role": role.value},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def manager_headers(client):
    return login(client, "admin", MANAGER_PASSWORD, StaffRole.MANAGER)


@pytest.fixture
def kitchen_headers(client):
    return login(client, "kitchen", KITCHEN_PASSWORD, StaffRole.KITCHEN)


@pytest.fixture
def waiter_headers(client, manager_headers):
    response = client.post(
        "/api/staff/users",
        json={"id": "mary", "username": "mary", "name": "Mary Johnson", "password": WAITER_PASSWORD},
        headers=manager_headers,
    )
    assert response.status_code == 201, response.text
    return login(client, "mary", WAITER_PASSWORD, StaffRole.WAITER)
