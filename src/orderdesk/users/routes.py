"""
orderdesk.users.routes

HTTP surface of the users service (mounted behind the gateway at `/v1/users`).

Responsibilities:
- `POST /register`, `POST /login` (anonymous).
- `GET /me` (authenticated).
- `GET /`, `PATCH /{user_id}/roles` (admin).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from starlette.status import HTTP_201_CREATED

from orderdesk.api.envelope import success
from orderdesk.auth.deps import get_principal, require_admin
from orderdesk.auth.models import Principal
from orderdesk.users.models import LoginRequest, RegisterRequest, RolesUpdateRequest
from orderdesk.users.service import UserService
from orderdesk.validation import parse_model, require_valid

router = APIRouter(tags=["users"])


def users_service(request: Request) -> UserService:
    return request.app.state.users  # type: ignore[no-any-return]


@router.post("/register", status_code=HTTP_201_CREATED)
async def register(
    payload: Any = Body(default=None),
    svc: UserService = Depends(users_service),
) -> dict[str, Any]:
    body = require_valid(parse_model(RegisterRequest, payload))
    user = await svc.register(body)
    return success(user.public())


@router.post("/login")
async def login(
    payload: Any = Body(default=None),
    svc: UserService = Depends(users_service),
) -> dict[str, Any]:
    body = require_valid(parse_model(LoginRequest, payload))
    return success(await svc.login(body))


@router.get("/me")
async def me(
    principal: Principal = Depends(get_principal),
    svc: UserService = Depends(users_service),
) -> dict[str, Any]:
    user = await svc.me(principal.subject)
    return success(user.public())


@router.get("/")
async def list_users(
    _: Principal = Depends(require_admin),
    svc: UserService = Depends(users_service),
) -> dict[str, Any]:
    return success([u.public() for u in await svc.list_users()])


@router.patch("/{user_id}/roles")
async def update_roles(
    user_id: str,
    payload: Any = Body(default=None),
    principal: Principal = Depends(require_admin),
    svc: UserService = Depends(users_service),
) -> dict[str, Any]:
    body = require_valid(parse_model(RolesUpdateRequest, payload))
    user = await svc.set_roles(user_id, body.normalized(), actor=principal.subject)
    return success(user.public())
