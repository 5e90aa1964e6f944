"""Restaurant configuration endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from reservation_admin.api import deps
from reservation_admin.core.config import Settings
from reservation_admin.schemas.settings import (
    AutoConfirmation,
    BulkSettingsResult,
    BulkSettingsUpdate,
    BusinessHours,
    ClosureConfig,
    OperatingDays,
    RestaurantConfig,
    SeatPool,
    SettingsRead,
)
from reservation_admin.services import settings_service

router = APIRouter(prefix="/settings")


async def _save(
    session: AsyncSession, key: str, value: SeatPool | BusinessHours | ClosureConfig | OperatingDays
) -> RestaurantConfig:
    try:
        return await settings_service.save_setting(session, key, value)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc


@router.get("", response_model=SettingsRead, summary="Current configuration")
async def read_settings(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    app_settings: Annotated[Settings, Depends(deps.get_app_settings)],
) -> SettingsRead:
    config, sources = await settings_service.load_config(session)
    return SettingsRead(
        config=config,
        sources=sources,
        auto_confirmation=AutoConfirmation(
            auto_confirm_omakase=app_settings.auto_confirm_omakase,
            auto_confirm_dining=app_settings.auto_confirm_dining,
        ),
    )


@router.put(
    "/seat-capacity", response_model=RestaurantConfig, summary="Save seat pools"
)
async def save_seat_capacity(
    payload: SeatPool,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> RestaurantConfig:
    return await _save(session, settings_service.SEAT_CAPACITY_KEY, payload)


@router.put(
    "/business-hours", response_model=RestaurantConfig, summary="Save business hours"
)
async def save_business_hours(
    payload: BusinessHours,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> RestaurantConfig:
    return await _save(session, settings_service.BUSINESS_HOURS_KEY, payload)


@router.put("/closures", response_model=RestaurantConfig, summary="Save closure rules")
async def save_closures(
    payload: ClosureConfig,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> RestaurantConfig:
    return await _save(session, settings_service.CLOSURES_KEY, payload)


@router.put(
    "/operating-days",
    response_model=RestaurantConfig,
    summary="Save the weekdays each reservation type runs",
)
async def save_operating_days(
    payload: OperatingDays,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> RestaurantConfig:
    return await _save(session, settings_service.OPERATING_DAYS_KEY, payload)


@router.post(
    "/bulk", response_model=BulkSettingsResult, summary="Apply several updates at once"
)
async def bulk_update_settings(
    payload: BulkSettingsUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> BulkSettingsResult:
    applied, errors, config = await settings_service.apply_bulk_updates(
        session, payload.updates
    )
    return BulkSettingsResult.model_validate(
        {"applied": applied, "errors": errors, "config": config}
    )
