"""
orderdesk.auth.policy

Authorization guard.

Responsibilities:
- Map a route capability (anonymous / authenticated / admin / owner-or-admin)
  to an allow/deny decision for a caller.
- Keep "no identity" (401) distinct from "identity lacks capability" (403).
"""

from __future__ import annotations

import enum

from orderdesk.auth.models import Principal
from orderdesk.errors import Forbidden, Unauthenticated


class Capability(enum.StrEnum):
    anonymous = "anonymous"
    authenticated = "authenticated"
    admin = "admin"
    owner_or_admin = "owner-or-admin"


def authorize(
    principal: Principal | None,
    capability: Capability,
    *,
    owner_id: str | None = None,
) -> None:
    if capability is Capability.anonymous:
        return
    if principal is None:
        raise Unauthenticated()
    if capability is Capability.authenticated:
        return
    if principal.is_admin:
        return
    if capability is Capability.admin:
        raise Forbidden("Admin role required")
    if owner_id is None:
        raise ValueError("owner-or-admin checks need the resource owner id")
    if not principal.owns(owner_id):
        raise Forbidden("Access denied")
