"""
orderdesk.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Resolve the caller `Principal` from the trusted identity header or a bearer token.
- Enforce route capabilities via a reusable dependency factory.
"""

from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from orderdesk.api.deps import settings_dep
from orderdesk.auth.identity import resolve_principal
from orderdesk.auth.models import Principal
from orderdesk.auth.policy import Capability, authorize
from orderdesk.auth.tokens import JwtConfig
from orderdesk.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def jwt_config_dep(settings: Settings = Depends(settings_dep)) -> JwtConfig:
    return JwtConfig.from_settings(settings)


def get_principal(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
    cfg: JwtConfig = Depends(jwt_config_dep),
) -> Principal:
    return resolve_principal(
        identity_header=request.headers.get(settings.identity_header),
        bearer_token=creds.credentials if creds is not None else None,
        cfg=cfg,
    )


def require(capability: Capability):
    def _dep(principal: Principal = Depends(get_principal)) -> Principal:
        authorize(principal, capability)
        return principal

    return _dep


require_admin = require(Capability.admin)


# --- Module Notes -----------------------------------------------------------
# Owner-or-admin checks need the loaded resource, so services call
# `auth.policy.authorize` directly once the record is in hand.
