from __future__ import annotations

from fastapi import APIRouter, Depends

from orderdesk.api.deps import settings_dep
from orderdesk.settings import Settings

router = APIRouter()


@router.get("/healthz")
async def healthz(settings: Settings = Depends(settings_dep)) -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok", "service": settings.service_name}
