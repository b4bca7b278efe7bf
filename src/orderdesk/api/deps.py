"""
orderdesk.api.deps

FastAPI dependency wiring shared by the services.

Responsibilities:
- Encapsulate app.state access patterns (settings, per-service components).
"""

from __future__ import annotations

from fastapi import Request

from orderdesk.settings import Settings


def settings_dep(request: Request) -> Settings:
    # Set by each app factory; there is no process-global settings lookup here.
    return request.app.state.settings  # type: ignore[no-any-return]
