"""Reservation management service helpers."""
from __future__ import annotations

import logging
import secrets
import string
import uuid
from collections.abc import Sequence
from datetime import date, time

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from reservation_admin.core.config import Settings, get_settings
from reservation_admin.models.reservation import (
    RESERVATION_CLASSES,
    SEAT_HOLDING_STATUSES,
    DiningReservation,
    Reservation,
    ReservationStatus,
    ReservationType,
)
from reservation_admin.services import capacity_service, settings_service

logger = logging.getLogger(__name__)

CONFIRMATION_CODE_LENGTH = 8
_CODE_ALPHABET = string.ascii_uppercase + string.digits

_ALLOWED_STATUS_TRANSITIONS: dict[ReservationStatus, set[ReservationStatus]] = {
    ReservationStatus.PENDING: {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED},
    ReservationStatus.CONFIRMED: {
        ReservationStatus.SEATED,
        ReservationStatus.CANCELLED,
        ReservationStatus.NO_SHOW,
    },
    ReservationStatus.SEATED: {ReservationStatus.COMPLETED},
    ReservationStatus.COMPLETED: set(),
    ReservationStatus.CANCELLED: set(),
    ReservationStatus.NO_SHOW: set(),
}

_CREATABLE_STATUSES = {ReservationStatus.PENDING, ReservationStatus.CONFIRMED}


def generate_confirmation_code() -> str:
    return "".join(
        secrets.choice(_CODE_ALPHABET) for _ in range(CONFIRMATION_CODE_LENGTH)
    )


def initial_status(
    reservation_type: ReservationType, settings: Settings | None = None
) -> ReservationStatus:
    """Starting status for a new booking: confirmed only where auto-confirm is on."""
    settings = settings or get_settings()
    if reservation_type == ReservationType.OMAKASE:
        auto_confirm = settings.auto_confirm_omakase
    else:
        auto_confirm = settings.auto_confirm_dining
    return ReservationStatus.CONFIRMED if auto_confirm else ReservationStatus.PENDING


def _filtered_query(
    *,
    start_date: date | None,
    end_date: date | None,
    reservation_type: ReservationType | None,
    status: ReservationStatus | None,
    search: str | None,
):
    stmt = select(Reservation)
    if start_date is not None:
        stmt = stmt.where(Reservation.reservation_date >= start_date)
    if end_date is not None:
        stmt = stmt.where(Reservation.reservation_date <= end_date)
    if reservation_type is not None:
        stmt = stmt.where(Reservation.reservation_type == reservation_type)
    if status is not None:
        stmt = stmt.where(Reservation.status == status)
    if search:
        pattern = f"%{search.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Reservation.customer_name).like(pattern),
                func.lower(Reservation.customer_email).like(pattern),
                Reservation.customer_phone.like(f"%{search}%"),
                func.lower(Reservation.confirmation_code).like(pattern),
            )
        )
    return stmt


async def list_reservations(
    session: AsyncSession,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
    reservation_type: ReservationType | None = None,
    status: ReservationStatus | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 50,
) -> tuple[Sequence[Reservation], int]:
    """Return one page of reservations, newest first, and the filtered total."""
    if start_date is not None and end_date is not None and start_date > end_date:
        raise ValueError("start_date must be on or before end_date")
    filters = dict(
        start_date=start_date,
        end_date=end_date,
        reservation_type=reservation_type,
        status=status,
        search=search,
    )
    stmt = (
        _filtered_query(**filters)
        .order_by(
            Reservation.reservation_date.desc(),
            Reservation.reservation_time.desc(),
            Reservation.created_at.desc(),
        )
        .offset(skip)
        .limit(limit)
    )
    items = (await session.execute(stmt)).scalars().all()
    count_stmt = select(func.count()).select_from(_filtered_query(**filters).subquery())
    total = (await session.execute(count_stmt)).scalar_one()
    return items, total


async def get_reservation(
    session: AsyncSession, *, reservation_id: uuid.UUID
) -> Reservation | None:
    return await session.get(Reservation, reservation_id)


async def create_reservation(
    session: AsyncSession,
    *,
    reservation_type: ReservationType,
    reservation_date: date,
    reservation_time: time,
    party_size: int,
    customer_name: str,
    today: date,
    customer_email: str | None = None,
    customer_phone: str | None = None,
    special_requests: str | None = None,
    notes: str | None = None,
    status: ReservationStatus | None = None,
) -> Reservation:
    """Admit and store a new booking.

    Without an explicit ``status`` the booking starts out as decided by
    :func:`initial_status`.

    Raises ``CapacityExceededError`` when the slot is full and ``ValueError``
    for any other reason the booking cannot be taken.
    """
    if status is None:
        status = initial_status(reservation_type)
    if status not in _CREATABLE_STATUSES:
        raise ValueError(f"New reservations must be pending or confirmed, not {status.value}")
    if not customer_email and not customer_phone:
        raise ValueError("A customer email or phone number is required")

    config, _ = await settings_service.load_config(session)
    reservation_cls = RESERVATION_CLASSES[reservation_type]
    reservation = reservation_cls(
        reservation_type=reservation_type,
        reservation_date=reservation_date,
        reservation_time=reservation_time,
        party_size=party_size,
        status=status,
        customer_name=customer_name,
        customer_email=customer_email,
        customer_phone=customer_phone,
        special_requests=special_requests,
        notes=notes,
        confirmation_code=generate_confirmation_code(),
    )
    if reservation_type == ReservationType.DINING:
        reservation.duration_minutes = DiningReservation.duration_for(party_size)

    await capacity_service.reserve_if_available(session, reservation, config, today=today)
    logger.info(
        "Created %s reservation %s for %d guests on %s",
        reservation_type.value,
        reservation.confirmation_code,
        party_size,
        reservation_date.isoformat(),
    )
    return reservation


def _validate_status_transition(current: ReservationStatus, target: ReservationStatus) -> None:
    if target == current:
        return
    allowed = _ALLOWED_STATUS_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise ValueError(
            f"Invalid status transition from {current.value} to {target.value}"
        )


async def update_reservation(
    session: AsyncSession,
    *,
    reservation: Reservation,
    today: date,
    reservation_date: date | None = None,
    reservation_time: time | None = None,
    party_size: int | None = None,
    customer_name: str | None = None,
    customer_email: str | None = None,
    customer_phone: str | None = None,
    special_requests: str | None = None,
    notes: str | None = None,
    status: ReservationStatus | None = None,
) -> Reservation:
    """Apply changes; moving or resizing a seat-holding booking is re-admitted."""
    if status is not None:
        _validate_status_transition(reservation.status, status)

    original_date = reservation.reservation_date
    moved = (
        (reservation_date is not None and reservation_date != reservation.reservation_date)
        or (reservation_time is not None and reservation_time != reservation.reservation_time)
        or (party_size is not None and party_size != reservation.party_size)
    )

    if reservation_date is not None:
        reservation.reservation_date = reservation_date
    if reservation_time is not None:
        reservation.reservation_time = reservation_time
    if party_size is not None:
        reservation.party_size = party_size
        if isinstance(reservation, DiningReservation):
            reservation.duration_minutes = DiningReservation.duration_for(party_size)
    if customer_name is not None:
        reservation.customer_name = customer_name
    if customer_email is not None:
        reservation.customer_email = customer_email
    if customer_phone is not None:
        reservation.customer_phone = customer_phone
    if special_requests is not None:
        reservation.special_requests = special_requests
    if notes is not None:
        reservation.notes = notes
    previous_status = reservation.status
    if status is not None:
        reservation.status = status

    if moved and reservation.status in SEAT_HOLDING_STATUSES:
        config, _ = await settings_service.load_config(session)
        # Bookings already in the past stay where they are; only their seats are recounted.
        capacity_only = (
            reservation.reservation_date == original_date and original_date < today
        )
        await capacity_service.reserve_if_available(
            session, reservation, config, today=today, capacity_only=capacity_only
        )
    else:
        await session.commit()
        await session.refresh(reservation)

    if reservation.status != previous_status:
        logger.info(
            "Reservation %s moved from %s to %s",
            reservation.confirmation_code,
            previous_status.value,
            reservation.status.value,
        )
    return reservation


async def delete_reservation(session: AsyncSession, *, reservation: Reservation) -> None:
    await session.delete(reservation)
    await session.commit()
    logger.info("Deleted reservation %s", reservation.confirmation_code)
