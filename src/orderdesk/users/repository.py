"""
orderdesk.users.repository

Credential store backed by a JSON collection.

Responsibilities:
- Append users with case-insensitive email uniqueness enforced under the write lock.
- Lookup by id/email, list, and replace roles.
"""

from __future__ import annotations

from orderdesk.errors import Conflict, NotFound
from orderdesk.storage.json_file import JsonCollection
from orderdesk.users.models import User


def _same_email(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


class UserRepo:
    def __init__(self, collection: JsonCollection) -> None:
        self._collection = collection

    async def add(self, user: User) -> User:
        async with self._collection.mutate() as records:
            if any(_same_email(r.get("email", ""), user.email) for r in records):
                raise Conflict("User with this email already exists", code="EMAIL_EXISTS")
            records.append(user.to_record())
        return user

    async def get(self, user_id: str) -> User | None:
        for r in await self._collection.read_all():
            if r.get("id") == user_id:
                return User.model_validate(r)
        return None

    async def get_by_email(self, email: str) -> User | None:
        for r in await self._collection.read_all():
            if _same_email(r.get("email", ""), email):
                return User.model_validate(r)
        return None

    async def list_all(self) -> list[User]:
        return [User.model_validate(r) for r in await self._collection.read_all()]

    async def count(self) -> int:
        return len(await self._collection.read_all())

    async def set_roles(self, user_id: str, roles: list[str]) -> User:
        async with self._collection.mutate() as records:
            for idx, r in enumerate(records):
                if r.get("id") == user_id:
                    user = User.model_validate(r).model_copy(update={"roles": roles})
                    records[idx] = user.to_record()
                    return user
            raise NotFound("User not found")
