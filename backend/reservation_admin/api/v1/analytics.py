"""Dashboard analytics endpoint."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from reservation_admin.api import deps
from reservation_admin.schemas.analytics import AnalyticsData
from reservation_admin.services import analytics_service, snapshot_service

router = APIRouter(prefix="/analytics")


@router.get("", response_model=AnalyticsData, summary="Reservation analytics roll-up")
async def get_analytics(
    snapshot: Annotated[snapshot_service.Snapshot, Depends(deps.get_snapshot)],
    today: Annotated[date, Depends(deps.get_today)],
    timeframe: str = Query(default=analytics_service.DEFAULT_TIMEFRAME),
) -> AnalyticsData:
    data = analytics_service.build_analytics(
        snapshot.reservations,
        snapshot.config,
        timeframe=timeframe,
        today=today,
    )
    return AnalyticsData.model_validate(data)
