"""Health and version endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from matka.config import Settings
from matka.dependencies import get_app_settings

router = APIRouter()


@router.get("/api/health")
async def health() -> dict[str, str]:
    """Liveness probe — returns 200 if the process is alive."""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/api/version")
async def version(settings: Settings = Depends(get_app_settings)) -> dict[str, str]:  # noqa: B008
    """Return API version and environment."""
    return {
        "version": settings.app_version,
        "environment": settings.environment,
    }
