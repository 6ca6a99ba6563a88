from datetime import datetime, timezone

from fastapi import APIRouter

from oauth_relay.api.dependencies import SettingsDep
from oauth_relay.api.schemas import HealthResponse


router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: SettingsDep):
    return HealthResponse(
        status="healthy",
        name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        tenants=len(settings.tenants.labels),
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/health/live")
async def liveness_check():
    return {"status": "alive"}
