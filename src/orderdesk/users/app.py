"""
orderdesk.users.app

FastAPI app factory for the users service.

Responsibilities:
- Compose the credential store, password hasher and token issuer.
- Register routers, middleware and the envelope error handlers.
- Seed a bootstrap admin on startup when configured.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from orderdesk.api.envelope import install_error_handlers
from orderdesk.api.health import router as health_router
from orderdesk.auth.passwords import PasswordHasher
from orderdesk.auth.tokens import JwtConfig
from orderdesk.observability.logging import configure_logging, get_logger
from orderdesk.observability.middleware import RequestContextMiddleware
from orderdesk.settings import Settings
from orderdesk.storage.json_file import JsonCollection
from orderdesk.users.repository import UserRepo
from orderdesk.users.routes import router as users_router
from orderdesk.users.service import UserService

log = get_logger(__name__)

USERS_FILE = "users.json"


def create_users_app(*, settings: Settings) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_output=settings.env != "dev",
    )

    users = UserService(
        repo=UserRepo(JsonCollection(settings.data_dir / USERS_FILE)),
        hasher=PasswordHasher(),
        jwt_cfg=JwtConfig.from_settings(settings),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, port=settings.api_port)
        if settings.seed_admin_email and settings.seed_admin_password:
            await users.ensure_seed_admin(
                email=settings.seed_admin_email, password=settings.seed_admin_password
            )
        yield
        log.info("shutdown")

    # No trailing-slash redirects; their Location would name the internal host.
    app = FastAPI(
        title="orderdesk users", version="0.1.0", lifespan=lifespan, redirect_slashes=False
    )
    app.state.settings = settings
    app.state.users = users

    app.add_middleware(RequestContextMiddleware)
    install_error_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(users_router)
    return app
