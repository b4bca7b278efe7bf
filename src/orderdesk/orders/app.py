"""
orderdesk.orders.app

FastAPI app factory for the orders service.

Responsibilities:
- Compose the file-backed order repository and the transition policy.
- Register routers, middleware and the envelope error handlers.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from orderdesk.api.envelope import install_error_handlers
from orderdesk.api.health import router as health_router
from orderdesk.observability.logging import configure_logging, get_logger
from orderdesk.observability.middleware import RequestContextMiddleware
from orderdesk.orders.repository import JsonOrderRepo
from orderdesk.orders.routes import router as orders_router
from orderdesk.orders.service import OrderService
from orderdesk.orders.state_machine import TransitionPolicy
from orderdesk.settings import Settings
from orderdesk.storage.json_file import JsonCollection

log = get_logger(__name__)

ORDERS_FILE = "orders.json"


def create_orders_app(*, settings: Settings) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_output=settings.env != "dev",
    )

    orders = OrderService(
        repo=JsonOrderRepo(JsonCollection(settings.data_dir / ORDERS_FILE)),
        policy=TransitionPolicy(settings.order_transition_policy),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, policy=settings.order_transition_policy)
        yield
        log.info("shutdown")

    # No trailing-slash redirects; their Location would name the internal host.
    app = FastAPI(
        title="orderdesk orders", version="0.1.0", lifespan=lifespan, redirect_slashes=False
    )
    app.state.settings = settings
    app.state.orders = orders

    app.add_middleware(RequestContextMiddleware)
    install_error_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(orders_router)
    return app
