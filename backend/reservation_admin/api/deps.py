"""Common API dependencies."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date
from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from reservation_admin.core.clock import today_in
from reservation_admin.core.config import Settings, get_settings
from reservation_admin.db.session import get_session
from reservation_admin.services import snapshot_service


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


def get_app_settings() -> Settings:
    return get_settings()


def get_today(settings: Annotated[Settings, Depends(get_app_settings)]) -> date:
    """Today's date in the restaurant's timezone."""
    return today_in(settings.restaurant_timezone)


def snapshot_unavailable(
    exc: snapshot_service.SnapshotUnavailableError, settings: Settings
) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=str(exc),
        headers={"Retry-After": str(settings.snapshot_retry_after_seconds)},
    )


async def get_snapshot(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> snapshot_service.Snapshot:
    """Load the full reservation snapshot or fail the request with a 503."""
    try:
        return await snapshot_service.load_snapshot(
            session, timeout=settings.snapshot_timeout_seconds
        )
    except snapshot_service.SnapshotUnavailableError as exc:
        raise snapshot_unavailable(exc, settings) from exc
