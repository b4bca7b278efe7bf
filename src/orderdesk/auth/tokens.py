"""
orderdesk.auth.tokens

Identity assertion (JWT) issuing and verification.

Responsibilities:
- Mint a signed, time-limited token carrying subject id and a roles snapshot.
- Verify signature, registered claims and expiry; fail closed with `InvalidToken`.

Note:
- HS256 with a shared secret; every service that verifies holds the same secret.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from orderdesk.auth.models import Principal
from orderdesk.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    issuer: str
    audience: str
    secret: str
    ttl: timedelta = timedelta(hours=12)

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
            ttl=timedelta(minutes=settings.token_ttl_minutes),
        )


class InvalidToken(Exception):
    pass


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    roles: list[str],
    email: str | None = None,
    ttl: timedelta | None = None,
    now: datetime | None = None,
) -> str:
    now = now or datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "roles": list(roles),
        "iat": int(now.timestamp()),
        "exp": int((now + (ttl or cfg.ttl)).timestamp()),
    }
    if email is not None:
        payload["email"] = email
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(
    *, cfg: JwtConfig, token: str, now: datetime | None = None
) -> dict[str, Any]:
    try:
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub"],
                # Expiry is checked below: no grace period, `now >= exp` is expired.
                "verify_exp": False,
            },
        )
    except InvalidTokenError as e:
        raise InvalidToken(str(e)) from e

    exp = payload["exp"]
    if not isinstance(exp, int | float):
        raise InvalidToken("Invalid expiration claim")
    current = (now or datetime.now(tz=UTC)).timestamp()
    if current >= exp:
        raise InvalidToken("Signature has expired")
    return payload


def verify_token(*, cfg: JwtConfig, token: str, now: datetime | None = None) -> Principal:
    payload = decode_and_validate(cfg=cfg, token=token, now=now)

    subject = payload.get("sub")
    roles_raw = payload.get("roles", [])
    if not isinstance(subject, str) or not subject:
        raise InvalidToken("Invalid token subject")
    if not isinstance(roles_raw, list) or not all(isinstance(r, str) for r in roles_raw):
        raise InvalidToken("Invalid token roles")

    return Principal(subject=subject, roles=frozenset(roles_raw))


# --- Module Notes -----------------------------------------------------------
# Issued by the users service at login; verified by the gateway and, on the
# direct-access fallback path, by the backends (see `auth.identity`).
