"""Bookable time slot generation."""

from __future__ import annotations

from datetime import date, time

from reservation_admin.models.reservation import DiningReservation, ReservationType
from reservation_admin.schemas.settings import (
    BusinessHours,
    ClosureConfig,
    ShiftName,
    ShiftWindow,
)
from reservation_admin.services import closure_service

OMAKASE_SLOTS: tuple[str, ...] = ("17:00", "19:00")

# The last seating always leaves at least this long before close.
MIN_BUFFER_MINUTES = 30


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_slot(value: str) -> time:
    """Parse an ``HH:MM`` slot string."""
    try:
        hours, minutes = (int(part) for part in value.split(":", 1))
        return time(hours, minutes)
    except ValueError as exc:
        raise ValueError(f"Invalid time slot: {value!r}") from exc


def _shift_slots(window: ShiftWindow, party_size: int, slot_duration: int) -> list[int]:
    buffer_minutes = max(MIN_BUFFER_MINUTES, DiningReservation.duration_for(party_size))
    open_minutes = to_minutes(window.open_time)
    last_seating = to_minutes(window.close_time) - buffer_minutes
    return list(range(open_minutes, last_seating + 1, slot_duration))


def _dining_slots_by_shift(
    party_size: int, business_hours: BusinessHours
) -> dict[ShiftName, list[int]]:
    return {
        shift: _shift_slots(
            business_hours.window(shift), party_size, business_hours.slot_duration
        )
        for shift in ShiftName
    }


def generate(
    reservation_type: ReservationType,
    party_size: int,
    business_hours: BusinessHours,
) -> list[str]:
    """Return every bookable ``HH:MM`` slot for the type and party size."""
    if reservation_type == ReservationType.OMAKASE:
        return list(OMAKASE_SLOTS)
    by_shift = _dining_slots_by_shift(party_size, business_hours)
    minutes = sorted(slot for slots in by_shift.values() for slot in slots)
    return [format_minutes(slot) for slot in minutes]


def bookable_slots(
    day: date,
    reservation_type: ReservationType,
    party_size: int,
    business_hours: BusinessHours,
    closures: ClosureConfig,
) -> list[str]:
    """Slots for ``day`` after removing closed dates and closed shifts."""
    if closure_service.is_date_closed(day, closures):
        return []
    if reservation_type == ReservationType.OMAKASE:
        # Both omakase seatings fall in the dinner service.
        if closure_service.is_shift_closed(day, ShiftName.DINNER, closures):
            return []
        return list(OMAKASE_SLOTS)

    by_shift = _dining_slots_by_shift(party_size, business_hours)
    minutes = sorted(
        slot
        for shift, slots in by_shift.items()
        if not closure_service.is_shift_closed(day, shift, closures)
        for slot in slots
    )
    return [format_minutes(slot) for slot in minutes]
