from __future__ import annotations

import json

import pytest

from orderdesk.auth.identity import decode_identity, encode_identity, resolve_principal
from orderdesk.auth.models import Principal
from orderdesk.auth.tokens import JwtConfig, issue_token
from orderdesk.errors import Unauthenticated


def test_header_carries_id_and_roles() -> None:
    raw = encode_identity(Principal(subject="u-1", roles=frozenset({"user", "admin"})))

    assert json.loads(raw) == {"id": "u-1", "roles": ["admin", "user"]}
    assert decode_identity(raw) == Principal(subject="u-1", roles=frozenset({"user", "admin"}))


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[]",
        '{"roles": ["user"]}',
        '{"id": "", "roles": []}',
        '{"id": "u", "roles": "admin"}',
    ],
)
def test_malformed_header_is_unauthenticated(raw: str) -> None:
    with pytest.raises(Unauthenticated):
        decode_identity(raw)


def test_trusted_header_wins_without_token(jwt_cfg: JwtConfig) -> None:
    principal = resolve_principal(
        identity_header='{"id": "u-1", "roles": ["user"]}', bearer_token=None, cfg=jwt_cfg
    )

    assert principal.subject == "u-1"


def test_trusted_header_is_not_cross_checked_against_token(jwt_cfg: JwtConfig) -> None:
    token = issue_token(cfg=jwt_cfg, subject="someone-else", roles=["user"])

    principal = resolve_principal(
        identity_header='{"id": "u-1", "roles": ["user"]}', bearer_token=token, cfg=jwt_cfg
    )

    assert principal.subject == "u-1"


def test_falls_back_to_bearer_token(jwt_cfg: JwtConfig) -> None:
    token = issue_token(cfg=jwt_cfg, subject="u-2", roles=["user", "admin"])

    principal = resolve_principal(identity_header=None, bearer_token=token, cfg=jwt_cfg)

    assert principal == Principal(subject="u-2", roles=frozenset({"user", "admin"}))


def test_invalid_fallback_token_is_unauthenticated(jwt_cfg: JwtConfig) -> None:
    with pytest.raises(Unauthenticated):
        resolve_principal(identity_header=None, bearer_token="bogus", cfg=jwt_cfg)


def test_missing_identity_is_unauthenticated(jwt_cfg: JwtConfig) -> None:
    with pytest.raises(Unauthenticated):
        resolve_principal(identity_header=None, bearer_token=None, cfg=jwt_cfg)
