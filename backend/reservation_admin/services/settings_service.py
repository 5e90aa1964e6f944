"""Load and persist the restaurant configuration blobs."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reservation_admin.models.admin_setting import AdminSetting
from reservation_admin.schemas.settings import (
    BusinessHours,
    ClosureConfig,
    OperatingDays,
    RestaurantConfig,
    SeatPool,
    SettingUpdate,
)

logger = logging.getLogger(__name__)

SEAT_CAPACITY_KEY = "seat_capacity"
BUSINESS_HOURS_KEY = "business_hours"
CLOSURES_KEY = "closed_dates"
OPERATING_DAYS_KEY = "availability_settings"

# Stored key -> (config model, RestaurantConfig field).
SETTING_MODELS: dict[str, tuple[type[BaseModel], str]] = {
    SEAT_CAPACITY_KEY: (SeatPool, "seat_pool"),
    BUSINESS_HOURS_KEY: (BusinessHours, "business_hours"),
    CLOSURES_KEY: (ClosureConfig, "closures"),
    OPERATING_DAYS_KEY: (OperatingDays, "operating_days"),
}


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"]) or "value"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def parse_setting(key: str, value: Any) -> BaseModel:
    """Validate one stored or submitted blob; raises ``ValueError`` when bad."""
    if key not in SETTING_MODELS:
        raise ValueError(f"Unknown setting key: {key}")
    model, _ = SETTING_MODELS[key]
    try:
        return model.model_validate(value)
    except ValidationError as exc:
        raise ValueError(_format_validation_error(exc)) from exc


async def _stored_settings(session: AsyncSession) -> dict[str, AdminSetting]:
    result = await session.execute(
        select(AdminSetting).where(AdminSetting.setting_key.in_(SETTING_MODELS))
    )
    return {row.setting_key: row for row in result.scalars().all()}


async def load_config(
    session: AsyncSession,
) -> tuple[RestaurantConfig, dict[str, str]]:
    """Return the configuration plus whether each blob came from the database.

    Missing blobs and blobs that no longer validate fall back to defaults.
    """
    stored = await _stored_settings(session)
    values: dict[str, BaseModel] = {}
    sources: dict[str, str] = {}
    for key, (model, field_name) in SETTING_MODELS.items():
        row = stored.get(key)
        if row is None:
            values[field_name] = model()
            sources[key] = "default"
            continue
        try:
            values[field_name] = parse_setting(key, row.setting_value)
            sources[key] = "database"
        except ValueError as exc:
            logger.warning("Ignoring invalid %s setting, using defaults: %s", key, exc)
            values[field_name] = model()
            sources[key] = "default"
    return RestaurantConfig(**values), sources


async def _upsert(session: AsyncSession, key: str, value: BaseModel) -> None:
    payload = value.model_dump(mode="json")
    existing = (
        await session.execute(select(AdminSetting).where(AdminSetting.setting_key == key))
    ).scalar_one_or_none()
    if existing is None:
        session.add(AdminSetting(setting_key=key, setting_value=payload))
    else:
        existing.setting_value = payload


async def save_setting(
    session: AsyncSession, key: str, value: dict[str, Any] | BaseModel
) -> RestaurantConfig:
    """Validate and persist a single blob, returning the resulting config."""
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    parsed = parse_setting(key, value)
    await _upsert(session, key, parsed)
    await session.commit()
    logger.info("Saved %s setting", key)
    config, _ = await load_config(session)
    return config


async def apply_bulk_updates(
    session: AsyncSession, updates: Sequence[SettingUpdate]
) -> tuple[list[str], list[dict[str, Any]], RestaurantConfig]:
    """Apply every valid update and report the rest as ``{input, error}`` pairs.

    One bad item never blocks the others; valid items are committed together.
    """
    applied: list[str] = []
    errors: list[dict[str, Any]] = []
    for update in updates:
        try:
            parsed = parse_setting(update.key, update.value)
        except ValueError as exc:
            errors.append({"input": update.model_dump(mode="json"), "error": str(exc)})
            continue
        await _upsert(session, update.key, parsed)
        applied.append(update.key)

    if applied:
        await session.commit()
        logger.info("Bulk settings update applied %s", ", ".join(applied))
    if errors:
        logger.warning("Bulk settings update rejected %d item(s)", len(errors))
    config, _ = await load_config(session)
    return applied, errors, config
