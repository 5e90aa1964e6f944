"""Read a consistent snapshot of reservations and configuration."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from reservation_admin.models.reservation import Reservation
from reservation_admin.schemas.settings import RestaurantConfig
from reservation_admin.services import settings_service

logger = logging.getLogger(__name__)


class SnapshotUnavailableError(RuntimeError):
    """The store could not be read in time; the caller may retry."""


@dataclass(slots=True, frozen=True)
class Snapshot:
    reservations: Sequence[Reservation]
    config: RestaurantConfig


async def _read(
    session: AsyncSession, start_date: date | None, end_date: date | None
) -> Snapshot:
    stmt = select(Reservation).order_by(
        Reservation.reservation_date.asc(),
        Reservation.reservation_time.asc(),
        Reservation.created_at.asc(),
    )
    if start_date is not None:
        stmt = stmt.where(Reservation.reservation_date >= start_date)
    if end_date is not None:
        stmt = stmt.where(Reservation.reservation_date <= end_date)
    reservations = (await session.execute(stmt)).scalars().all()
    config, _ = await settings_service.load_config(session)
    return Snapshot(reservations=reservations, config=config)


async def load_snapshot(
    session: AsyncSession,
    *,
    timeout: float,
    start_date: date | None = None,
    end_date: date | None = None,
) -> Snapshot:
    """Load reservations (optionally bounded by date) and the configuration.

    Either everything is returned or :class:`SnapshotUnavailableError` is
    raised; no caller ever computes from half a snapshot.
    """
    try:
        return await asyncio.wait_for(_read(session, start_date, end_date), timeout)
    except TimeoutError as exc:
        logger.warning("Snapshot read timed out after %.1fs", timeout)
        raise SnapshotUnavailableError("Reservation data is temporarily unavailable") from exc
    except SQLAlchemyError as exc:
        logger.exception("Snapshot read failed")
        raise SnapshotUnavailableError("Reservation data is temporarily unavailable") from exc
