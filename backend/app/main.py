from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import Settings, get_settings
from core.exceptions import register_exception_handlers
from core.repository import Repository
from app.container import ServiceContainer, build_container
from app.startup import configure_logging, run_startup

# ========== Authentication & Staff ==========
from modules.auth.routes.auth_routes import router as auth_router
from modules.staff.routes.staff_routes import router as staff_router

# ========== Tables & Orders ==========
from modules.tables.routes.table_routes import router as table_router
from modules.tables.routes.analytics_routes import router as dashboard_router
from modules.orders.routes.cart_routes import router as cart_router
from modules.orders.routes.kitchen_routes import router as kitchen_router

# ========== Menu ==========
from modules.menu.routes.menu_routes import router as menu_router

# ========== Payments ==========
from modules.payments.routes.split_bill_routes import router as split_bill_router

API_PREFIX = "/api"


def create_app(
    settings: Optional[Settings] = None, repository: Optional[Repository] = None
) -> FastAPI:
    """
    Build the application.

    Passing a repository skips configuration-driven storage selection, which
    is how tests run the app against a prepared in-memory store.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if repository is not None:
            container = ServiceContainer(repository, settings)
        else:
            container = build_container(settings)
        app.state.container = container
        run_startup(container)
        yield
        container.close()

    app = FastAPI(
        title=settings.app_name,
        description="""
    Restaurant point-of-sale backend.

    * **Tables** - seat guests, reserve, release and close tables
    * **Orders** - send carts to the kitchen and follow each order to delivery
    * **Kitchen** - live queue of orders to prepare and to deliver
    * **Payments** - bills with tips and full, equal, custom or per-item splits
    * **Administration** - menu, categories, tables and waiters

    Use `/api/auth/login` to obtain a bearer token.
    """,
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(staff_router, prefix=API_PREFIX)
    app.include_router(table_router, prefix=API_PREFIX)
    app.include_router(split_bill_router, prefix=API_PREFIX)
    app.include_router(cart_router, prefix=API_PREFIX)
    app.include_router(kitchen_router, prefix=API_PREFIX)
    app.include_router(menu_router, prefix=API_PREFIX)
    app.include_router(dashboard_router, prefix=API_PREFIX)

    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok", "app": settings.app_name, "environment": settings.environment}

    return app


app = create_app()
