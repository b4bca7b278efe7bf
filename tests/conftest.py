"""
tests.conftest

Shared fixtures: per-test settings on a temp data dir, in-process service apps,
and a host-routing transport so the gateway can reach the real backends.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from orderdesk.auth.models import Principal
from orderdesk.auth.tokens import JwtConfig, issue_token
from orderdesk.gateway.app import create_gateway_app
from orderdesk.orders.app import create_orders_app
from orderdesk.settings import Settings
from orderdesk.users.app import create_users_app


class HostRoutingTransport(httpx.AsyncBaseTransport):
    """Dispatch requests to in-process ASGI apps by URL host; unknown hosts fail to connect."""

    def __init__(self, apps: dict[str, FastAPI]) -> None:
        self._transports = {host: httpx.ASGITransport(app=app) for host, app in apps.items()}

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        transport = self._transports.get(request.url.host)
        if transport is None:
            raise httpx.ConnectError(f"no route to {request.url.host}", request=request)
        return await transport.handle_async_request(request)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        log_level="WARNING",
        jwt_secret="test-secret-0123456789abcdef0123456789",
        data_dir=tmp_path,
        users_url="http://users",
        orders_url="http://orders",
    )


@pytest.fixture
def jwt_cfg(settings: Settings) -> JwtConfig:
    return JwtConfig.from_settings(settings)


@pytest.fixture
def mint(jwt_cfg: JwtConfig):
    def _mint(subject: str, *roles: str) -> str:
        return issue_token(cfg=jwt_cfg, subject=subject, roles=list(roles) or ["user"])

    return _mint


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def as_principal(subject: str, *roles: str) -> Principal:
    return Principal(subject=subject, roles=frozenset(roles or ("user",)))


@pytest.fixture
def users_app(settings: Settings) -> FastAPI:
    return create_users_app(settings=settings)


@pytest.fixture
def orders_app(settings: Settings) -> FastAPI:
    return create_orders_app(settings=settings)


async def _client(app: Any, base_url: str) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url=base_url
    ) as client:
        yield client


@pytest_asyncio.fixture
async def users_client(users_app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    async for client in _client(users_app, "http://users"):
        yield client


@pytest_asyncio.fixture
async def orders_client(orders_app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    async for client in _client(orders_app, "http://orders"):
        yield client


@pytest.fixture
def gateway_app(settings: Settings, users_app: FastAPI, orders_app: FastAPI) -> FastAPI:
    transport = HostRoutingTransport({"users": users_app, "orders": orders_app})
    return create_gateway_app(settings=settings, transport=transport)


@pytest_asyncio.fixture
async def gateway(gateway_app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    async for client in _client(gateway_app, "http://gateway"):
        yield client
