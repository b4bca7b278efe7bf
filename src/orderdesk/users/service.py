"""
orderdesk.users.service

Users service layer.

Responsibilities:
- Register users (verifier hashing, default "user" role).
- Authenticate credentials and issue identity assertions.
- Profile lookup, admin listing and role replacement.
- Optional bootstrap admin seeding.
"""

from __future__ import annotations

import asyncio
from typing import Any

from orderdesk.auth.models import ADMIN_ROLE, USER_ROLE
from orderdesk.auth.passwords import PasswordHasher
from orderdesk.auth.tokens import JwtConfig, issue_token
from orderdesk.errors import InvalidCredentials, NotFound
from orderdesk.observability.logging import get_logger
from orderdesk.storage.records import new_id, utcnow
from orderdesk.users.models import LoginRequest, RegisterRequest, User
from orderdesk.users.repository import UserRepo

log = get_logger(__name__)


class UserService:
    def __init__(self, *, repo: UserRepo, hasher: PasswordHasher, jwt_cfg: JwtConfig) -> None:
        self._repo = repo
        self._hasher = hasher
        self._jwt_cfg = jwt_cfg

    async def register(self, body: RegisterRequest, *, roles: list[str] | None = None) -> User:
        # argon2 is CPU-bound; hashing stays off the event loop.
        password_hash = await asyncio.to_thread(self._hasher.hash, body.password)
        user = User(
            id=new_id(),
            email=body.email,
            name=body.name,
            password_hash=password_hash,
            roles=roles or [USER_ROLE],
            created_at=utcnow(),
        )
        await self._repo.add(user)
        log.info("user.registered", user_id=user.id)
        return user

    async def login(self, body: LoginRequest) -> dict[str, Any]:
        user = await self._repo.get_by_email(body.email)
        # Same failure for unknown email and wrong password.
        if user is None or not await asyncio.to_thread(
            self._hasher.verify, body.password, user.password_hash
        ):
            raise InvalidCredentials()

        token = issue_token(
            cfg=self._jwt_cfg, subject=user.id, roles=user.roles, email=user.email
        )
        log.info("user.login", user_id=user.id)
        return {"token": token, "user": user.public()}

    async def me(self, user_id: str) -> User:
        user = await self._repo.get(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    async def list_users(self) -> list[User]:
        return await self._repo.list_all()

    async def set_roles(self, user_id: str, roles: list[str], *, actor: str) -> User:
        user = await self._repo.set_roles(user_id, roles)
        # Already-issued tokens keep their roles snapshot until the user logs in again.
        log.info("user.roles_updated", user_id=user_id, roles=roles, actor=actor)
        return user

    async def ensure_seed_admin(self, *, email: str, password: str) -> User | None:
        if await self._repo.count() > 0:
            return None
        user = await self.register(
            RegisterRequest(email=email, name="Administrator", password=password),
            roles=[USER_ROLE, ADMIN_ROLE],
        )
        log.info("user.seeded_admin", user_id=user.id)
        return user
