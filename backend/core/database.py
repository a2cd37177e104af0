# backend/core/database.py

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import get_settings

Base = declarative_base()


def build_engine(database_url: str, echo: Optional[bool] = None) -> Engine:
    """Create an engine with sqlite-friendly defaults."""
    settings = get_settings()
    engine_kwargs = {
        "echo": settings.log_sql_queries if echo is None else echo,
        "pool_pre_ping": True,
    }

    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in {"sqlite://", "sqlite:///:memory:"}:
            engine_kwargs["poolclass"] = StaticPool

    return create_engine(database_url, **engine_kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create all tables registered on ``Base``."""
    # Register the ORM models before create_all
    from modules.menu.models import menu_models  # noqa: F401
    from modules.orders.models import order_models  # noqa: F401
    from modules.staff.models import staff_models  # noqa: F401
    from modules.tables.models import table_models  # noqa: F401

    Base.metadata.create_all(bind=engine)
