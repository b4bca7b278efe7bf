"""
orderdesk.gateway.auth

Token verification at the trust boundary.

Responsibilities:
- Classify each proxied path as anonymous or authenticated.
- Verify the bearer token for authenticated paths, once, before proxying.
"""

from __future__ import annotations

from starlette.requests import Request

from orderdesk.auth.models import Principal
from orderdesk.auth.policy import Capability, authorize
from orderdesk.auth.tokens import InvalidToken, JwtConfig, verify_token
from orderdesk.errors import Unauthenticated

ANONYMOUS_PATHS = frozenset({"/v1/users/register", "/v1/users/login"})

_BEARER_PREFIX = "bearer "


def capability_for(path: str) -> Capability:
    normalized = path.rstrip("/") or "/"
    return Capability.anonymous if normalized in ANONYMOUS_PATHS else Capability.authenticated


def bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization", "")
    if not header.lower().startswith(_BEARER_PREFIX):
        return None
    return header[len(_BEARER_PREFIX) :].strip() or None


def authenticate(request: Request, *, cfg: JwtConfig) -> Principal | None:
    capability = capability_for(request.url.path)
    if capability is Capability.anonymous:
        return None

    token = bearer_token(request)
    if token is None:
        raise Unauthenticated("Token required")
    try:
        principal = verify_token(cfg=cfg, token=token)
    except InvalidToken as e:
        raise Unauthenticated("Invalid token") from e

    authorize(principal, capability)
    return principal
