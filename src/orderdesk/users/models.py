"""
orderdesk.users.models

User record and request shapes.

Responsibilities:
- Define the persisted user record (credential store schema).
- Define register/login/roles request bodies.
- Provide the public projection that never includes the password verifier.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from orderdesk.storage.records import StoredRecord

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class User(StoredRecord):
    id: str
    email: str
    name: str
    password_hash: str
    roles: list[str]
    created_at: datetime

    def public(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude={"password_hash"})


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255, pattern=EMAIL_PATTERN)
    name: str = Field(min_length=1, max_length=120)
    password: str = Field(min_length=6, max_length=256)


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1, max_length=256)


class RolesUpdateRequest(BaseModel):
    roles: list[str] = Field(min_length=1)

    def normalized(self) -> list[str]:
        # Roles form a set that always contains the base "user" role.
        out: list[str] = ["user"]
        for role in self.roles:
            role = role.strip()
            if role and role not in out:
                out.append(role)
        return out


# --- Module Notes -----------------------------------------------------------
# `password_hash` is stored as "passwordHash" and stripped by `public()`.
