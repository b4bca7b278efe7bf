"""
orderdesk.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) injected into endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass

ADMIN_ROLE = "admin"
USER_ROLE = "user"


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity.

    `roles` is the snapshot carried by the identity assertion at issuance time;
    it is not refreshed from the credential store.
    """

    subject: str
    roles: frozenset[str]

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles

    def owns(self, owner_id: str) -> bool:
        return self.subject == owner_id


# --- Module Notes -----------------------------------------------------------
# Keep this model minimal; it crosses the gateway boundary as a JSON header.
