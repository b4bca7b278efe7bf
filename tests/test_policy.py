from __future__ import annotations

import pytest

from orderdesk.auth.policy import Capability, authorize
from orderdesk.errors import Forbidden, Unauthenticated

from .conftest import as_principal

USER = as_principal("u-1")
ADMIN = as_principal("a-1", "user", "admin")


def test_anonymous_allows_missing_identity() -> None:
    authorize(None, Capability.anonymous)


@pytest.mark.parametrize(
    "capability", [Capability.authenticated, Capability.admin, Capability.owner_or_admin]
)
def test_missing_identity_is_unauthenticated(capability: Capability) -> None:
    with pytest.raises(Unauthenticated):
        authorize(None, capability, owner_id="u-1")


def test_admin_capability_is_forbidden_for_plain_user() -> None:
    authorize(USER, Capability.authenticated)
    authorize(ADMIN, Capability.admin)

    with pytest.raises(Forbidden):
        authorize(USER, Capability.admin)


def test_owner_or_admin() -> None:
    authorize(USER, Capability.owner_or_admin, owner_id="u-1")
    authorize(ADMIN, Capability.owner_or_admin, owner_id="u-1")

    with pytest.raises(Forbidden):
        authorize(as_principal("u-2"), Capability.owner_or_admin, owner_id="u-1")
