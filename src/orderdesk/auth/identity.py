"""
orderdesk.auth.identity

Identity propagation across the gateway -> backend trust boundary.

Responsibilities:
- Serialize a verified `Principal` into the identity header (`{"id", "roles"}`).
- Parse that header on the backend side.
- Resolve the caller through one of two entry paths:
  1. trusted identity header set by the gateway (authoritative, no re-verification);
  2. raw bearer token, verified with the same rules the gateway uses
     (direct access to a backend, bypassing the gateway).

Both paths yield the same `Principal`, so every authorization decision downstream
runs through a single policy regardless of how the caller arrived.
"""

from __future__ import annotations

import json
from typing import Any

from orderdesk.auth.models import Principal
from orderdesk.auth.tokens import InvalidToken, JwtConfig, verify_token
from orderdesk.errors import Unauthenticated


def encode_identity(principal: Principal) -> str:
    return json.dumps(
        {"id": principal.subject, "roles": sorted(principal.roles)},
        separators=(",", ":"),
    )


def decode_identity(raw: str) -> Principal:
    try:
        data: Any = json.loads(raw)
    except ValueError as e:
        raise Unauthenticated("Malformed identity header") from e

    if not isinstance(data, dict):
        raise Unauthenticated("Malformed identity header")
    subject = data.get("id")
    roles = data.get("roles", [])
    if not isinstance(subject, str) or not subject:
        raise Unauthenticated("Malformed identity header")
    if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
        raise Unauthenticated("Malformed identity header")
    return Principal(subject=subject, roles=frozenset(roles))


def resolve_principal(
    *,
    identity_header: str | None,
    bearer_token: str | None,
    cfg: JwtConfig,
) -> Principal:
    # A present header is authoritative; a malformed one is rejected rather than
    # silently falling through to the token path.
    if identity_header:
        return decode_identity(identity_header)

    if not bearer_token:
        raise Unauthenticated("Missing Bearer token")
    try:
        return verify_token(cfg=cfg, token=bearer_token)
    except InvalidToken as e:
        raise Unauthenticated("Invalid or expired token") from e


# --- Module Notes -----------------------------------------------------------
# The gateway strips any client-supplied identity header before forwarding, so the
# header can only originate from the gateway on the proxied path.
