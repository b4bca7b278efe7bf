"""
orderdesk.gateway.app

FastAPI app factory for the API gateway.

Responsibilities:
- Build the pooled upstream HTTP client and the upstream table.
- Register the proxy routes, request-id middleware and envelope error handlers.
- Close the upstream client on shutdown.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from orderdesk.api.envelope import install_error_handlers
from orderdesk.api.health import router as health_router
from orderdesk.gateway.proxy import Upstream, UpstreamProxy
from orderdesk.gateway.routes import router as gateway_router
from orderdesk.observability.logging import configure_logging, get_logger
from orderdesk.observability.middleware import RequestContextMiddleware
from orderdesk.settings import Settings

log = get_logger(__name__)


def create_gateway_app(
    *,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_output=settings.env != "dev",
    )

    # `transport` lets tests route upstream calls to in-process apps.
    http = httpx.AsyncClient(timeout=settings.upstream_timeout_seconds, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info(
            "startup",
            env=settings.env,
            users=settings.users_url,
            orders=settings.orders_url,
            rate_limit_max=settings.rate_limit_max,
            rate_limit_window_seconds=settings.rate_limit_window_seconds,
        )
        yield
        await http.aclose()
        log.info("shutdown")

    app = FastAPI(title="orderdesk gateway", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.proxy = UpstreamProxy(http=http, identity_header=settings.identity_header)
    app.state.upstreams = {
        "users": Upstream(name="users", base_url=settings.users_url),
        "orders": Upstream(name="orders", base_url=settings.orders_url),
    }

    app.add_middleware(RequestContextMiddleware)
    install_error_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(gateway_router)
    return app
