"""Seat utilization and admission decisions."""

from __future__ import annotations

import asyncio
import logging
import uuid
import weakref
from collections.abc import Iterable, Sequence
from datetime import date, time, timedelta
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reservation_admin.core.rounding import round_one, safe_ratio
from reservation_admin.models.reservation import (
    SEAT_HOLDING_STATUSES,
    Reservation,
    ReservationType,
)
from reservation_admin.schemas.settings import RestaurantConfig, SeatPool
from reservation_admin.services import closure_service, time_slot_service

logger = logging.getLogger(__name__)

MAX_PARTY_SIZE = 15


class CapacityExceededError(ValueError):
    """Raised when a booking does not fit in the remaining seats."""


def pool_capacity(seat_pool: SeatPool, reservation_type: ReservationType) -> int:
    if reservation_type == ReservationType.OMAKASE:
        return seat_pool.omakase_capacity
    return seat_pool.dining_capacity


def utilization(
    day_reservations: Iterable[Reservation], seat_pool: SeatPool
) -> dict[str, Any]:
    """Aggregate one day's active reservations against the seat pools.

    The used counts are never clamped, so an oversold day reports more seats
    than capacity while the percentage stays capped at 100.
    """
    used = {reservation_type: 0 for reservation_type in ReservationType}
    for reservation in day_reservations:
        if not reservation.is_active:
            continue
        used[reservation.reservation_type] += reservation.party_size

    total_used = sum(used.values())
    total_capacity = seat_pool.total_capacity
    percentage = min(100.0, 100 * safe_ratio(total_used, total_capacity))
    return {
        "omakase_used": used[ReservationType.OMAKASE],
        "dining_used": used[ReservationType.DINING],
        "total_used": total_used,
        "total_capacity": total_capacity,
        "percentage": round_one(percentage),
    }


def utilization_by_date(
    reservations: Iterable[Reservation],
    seat_pool: SeatPool,
    start_date: date,
    end_date: date,
) -> list[dict[str, Any]]:
    """Return one utilization entry per day in ``[start_date, end_date]``."""
    if start_date > end_date:
        raise ValueError("start_date must be on or before end_date")
    if (end_date - start_date).days >= closure_service.MAX_CALENDAR_DAYS:
        raise ValueError(
            f"Date range cannot exceed {closure_service.MAX_CALENDAR_DAYS} days"
        )

    by_day: dict[date, list[Reservation]] = {}
    for reservation in reservations:
        if start_date <= reservation.reservation_date <= end_date:
            by_day.setdefault(reservation.reservation_date, []).append(reservation)

    entries: list[dict[str, Any]] = []
    current = start_date
    while current <= end_date:
        entry = utilization(by_day.get(current, []), seat_pool)
        entry["date"] = current
        entries.append(entry)
        current += timedelta(days=1)
    return entries


def slot_usage(
    reservations: Iterable[Reservation],
    *,
    reservation_type: ReservationType,
    day: date,
    slot: time,
) -> int:
    """Seats held at one seating by pending, confirmed and seated bookings."""
    return sum(
        reservation.party_size
        for reservation in reservations
        if reservation.reservation_type == reservation_type
        and reservation.reservation_date == day
        and reservation.reservation_time == slot
        and reservation.holds_seats
    )


def _unavailable(reason: str, **extra: Any) -> dict[str, Any]:
    return {"available": False, "reason": reason, "message": reason, **extra}


def check_capacity(
    reservations: Iterable[Reservation],
    seat_pool: SeatPool,
    *,
    day: date,
    slot: time,
    party_size: int,
    reservation_type: ReservationType,
) -> dict[str, Any]:
    """Recount the seats left at one seating, ignoring calendar rules."""
    total = pool_capacity(seat_pool, reservation_type)
    remaining = total - slot_usage(
        reservations, reservation_type=reservation_type, day=day, slot=slot
    )
    base: dict[str, Any] = {
        "date": day,
        "time": slot.strftime("%H:%M"),
        "party_size": party_size,
        "reservation_type": reservation_type,
    }
    capacity_info = {"requested": party_size, "available": remaining, "total": total}
    if remaining < party_size:
        return _unavailable(
            f"Not enough capacity. {max(remaining, 0)} seats available.",
            capacity_info=capacity_info,
            alternative_times=[],
            **base,
        )
    return {
        "available": True,
        "reason": None,
        "message": f"Table available for {party_size} guests",
        "capacity_info": capacity_info,
        "alternative_times": [],
        **base,
    }


def check_availability(
    reservations: Sequence[Reservation],
    config: RestaurantConfig,
    *,
    day: date,
    slot: time,
    party_size: int,
    reservation_type: ReservationType,
    today: date,
) -> dict[str, Any]:
    """Decide whether a party fits at a slot.

    The result is advisory; the write path repeats the capacity part of this
    check inside its own transaction.
    """
    if not 1 <= party_size <= MAX_PARTY_SIZE:
        raise ValueError(f"Party size must be between 1 and {MAX_PARTY_SIZE}")

    slot_label = slot.strftime("%H:%M")
    base: dict[str, Any] = {
        "date": day,
        "time": slot_label,
        "party_size": party_size,
        "reservation_type": reservation_type,
    }
    total = pool_capacity(config.seat_pool, reservation_type)

    if day < today:
        return _unavailable(
            "Cannot make reservations for past dates",
            capacity_info=None,
            alternative_times=[],
            **base,
        )
    reason = closure_service.closure_reason(day, config.closures)
    if reason is not None:
        return _unavailable(
            f"Closed: {reason}", capacity_info=None, alternative_times=[], **base
        )
    if not closure_service.is_type_offered(day, reservation_type, config.operating_days):
        weekday = closure_service.WEEKDAY_NAMES[closure_service.weekday_index(day)]
        return _unavailable(
            f"{reservation_type.value.capitalize()} is not offered on {weekday}s",
            capacity_info=None,
            alternative_times=[],
            **base,
        )

    candidates = time_slot_service.bookable_slots(
        day,
        reservation_type,
        party_size,
        config.business_hours,
        config.closures,
    )

    def remaining_at(label: str) -> int:
        held = slot_usage(
            reservations,
            reservation_type=reservation_type,
            day=day,
            slot=time_slot_service.parse_slot(label),
        )
        return total - held

    alternatives = [
        label
        for label in candidates
        if label != slot_label and remaining_at(label) >= party_size
    ]
    if slot_label not in candidates:
        return _unavailable(
            f"{slot_label} is not a bookable time for this party",
            capacity_info=None,
            alternative_times=alternatives,
            **base,
        )

    decision = check_capacity(
        reservations,
        config.seat_pool,
        day=day,
        slot=slot,
        party_size=party_size,
        reservation_type=reservation_type,
    )
    if not decision["available"]:
        decision["alternative_times"] = alternatives
    return decision


_admission_locks: weakref.WeakKeyDictionary[
    asyncio.AbstractEventLoop, dict[tuple[ReservationType, date], asyncio.Lock]
] = weakref.WeakKeyDictionary()


def _admission_lock(
    reservation_type: ReservationType, day: date, today: date
) -> asyncio.Lock:
    locks = _admission_locks.setdefault(asyncio.get_running_loop(), {})
    # Idle locks for dates before today are dropped so the registry stays small.
    stale = [key for key, lock in locks.items() if key[1] < today and not lock.locked()]
    for key in stale:
        del locks[key]
    return locks.setdefault((reservation_type, day), asyncio.Lock())


async def _day_reservations(
    session: AsyncSession,
    *,
    reservation_type: ReservationType,
    day: date,
    exclude_id: uuid.UUID | None,
) -> list[Reservation]:
    stmt = select(Reservation).where(
        Reservation.reservation_type == reservation_type,
        Reservation.reservation_date == day,
        Reservation.status.in_(SEAT_HOLDING_STATUSES),
    )
    if exclude_id is not None:
        stmt = stmt.where(Reservation.id != exclude_id)
    return list((await session.execute(stmt)).scalars().all())


async def reserve_if_available(
    session: AsyncSession,
    reservation: Reservation,
    config: RestaurantConfig,
    *,
    today: date,
    capacity_only: bool = False,
) -> Reservation:
    """Admit ``reservation`` only if it still fits, then commit it.

    Usage is recounted and the row written while holding the lock for the
    reservation's type and date, so two requests for the last seats cannot
    both be admitted by this process. With ``capacity_only`` the calendar
    rules (past date, closures, operating days, slot grid) are skipped and
    only the remaining seats are checked.
    """
    reservation_type = reservation.reservation_type
    day = reservation.reservation_date
    slot = reservation.reservation_time
    party_size = reservation.party_size
    async with _admission_lock(reservation_type, day, today):
        held = await _day_reservations(
            session,
            reservation_type=reservation_type,
            day=day,
            exclude_id=reservation.id,
        )
        if capacity_only:
            decision = check_capacity(
                held,
                config.seat_pool,
                day=day,
                slot=slot,
                party_size=party_size,
                reservation_type=reservation_type,
            )
        else:
            decision = check_availability(
                held,
                config,
                day=day,
                slot=slot,
                party_size=party_size,
                reservation_type=reservation_type,
                today=today,
            )
        if not decision["available"]:
            logger.info(
                "Rejected %s booking for %d on %s %s: %s",
                reservation_type.value,
                party_size,
                day.isoformat(),
                decision["time"],
                decision["reason"],
            )
            # Expires every loaded instance, so nothing on ``reservation`` is read after this.
            await session.rollback()
            if decision["capacity_info"] is not None:
                raise CapacityExceededError(decision["message"])
            raise ValueError(decision["message"])
        session.add(reservation)
        await session.commit()
    await session.refresh(reservation)
    return reservation
