from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from src.adapters.api.dependencies import get_realtime_update_service
from src.adapters.api.schemas.realtime import RefreshResponseSchema
from src.app.services.realtime_update_service import RealtimeUpdateService

router = APIRouter(prefix="/realtime", tags=["realtime"])


@router.post("/refresh", response_model=RefreshResponseSchema)
async def refresh_realtime(
    service: RealtimeUpdateService = Depends(get_realtime_update_service),
) -> RefreshResponseSchema:
    updated = await service.refresh()
    return RefreshResponseSchema(
        fetched_at=datetime.now(timezone.utc), updated_trips=updated
    )
