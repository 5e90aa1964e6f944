"""Closure rules deciding whether a date or a shift can be booked."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from reservation_admin.models.reservation import ReservationType
from reservation_admin.schemas.settings import (
    ClosureConfig,
    OperatingDays,
    ShiftClosureType,
    ShiftName,
)

WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

MAX_CALENDAR_DAYS = 366

_SHIFT_CLOSURE_TYPES: dict[ShiftName, ShiftClosureType] = {
    ShiftName.LUNCH: ShiftClosureType.LUNCH_ONLY,
    ShiftName.DINNER: ShiftClosureType.DINNER_ONLY,
}


def weekday_index(day: date) -> int:
    """Return the weekday of ``day`` counted from Sunday = 0."""
    return day.isoweekday() % 7


def closure_reason(day: date, closures: ClosureConfig) -> str | None:
    """Describe the first rule that closes ``day``, or ``None`` when open."""
    if day in closures.closed_dates:
        return "Closed date"
    weekday = weekday_index(day)
    if weekday in closures.closed_weekdays:
        return f"Closed every {WEEKDAY_NAMES[weekday]}"
    for holiday in closures.holidays:
        if holiday.closed and holiday.date == day:
            return holiday.name
    shift_closure = closures.shift_closure_on(day)
    if shift_closure is not None and shift_closure.type == ShiftClosureType.FULL_DAY:
        return "Full day closure"
    return None


def is_date_closed(day: date, closures: ClosureConfig) -> bool:
    """Return True when any of the four closure rules matches ``day``."""
    return closure_reason(day, closures) is not None


def is_shift_closed(day: date, shift: ShiftName, closures: ClosureConfig) -> bool:
    """Return True when a shift closure for ``day`` removes ``shift``.

    Only the single-date shift overrides are consulted here; callers combine
    this with :func:`is_date_closed` for the whole-day rules.
    """
    closure = closures.shift_closure_on(day)
    if closure is None:
        return False
    return closure.type in (ShiftClosureType.FULL_DAY, _SHIFT_CLOSURE_TYPES[shift])


def is_type_offered(
    day: date, reservation_type: ReservationType, operating_days: OperatingDays
) -> bool:
    """Return True when ``reservation_type`` runs on the weekday of ``day``."""
    if reservation_type == ReservationType.OMAKASE:
        allowed = operating_days.omakase_days
    else:
        allowed = operating_days.dining_days
    return weekday_index(day) in allowed


def calendar_status(
    start_date: date, end_date: date, closures: ClosureConfig
) -> list[dict[str, Any]]:
    """Return per-day closure flags for calendar rendering."""
    if start_date > end_date:
        raise ValueError("start_date must be on or before end_date")
    if (end_date - start_date).days >= MAX_CALENDAR_DAYS:
        raise ValueError(f"Date range cannot exceed {MAX_CALENDAR_DAYS} days")

    days: list[dict[str, Any]] = []
    current = start_date
    while current <= end_date:
        reason = closure_reason(current, closures)
        closed = reason is not None
        days.append(
            {
                "date": current,
                "is_closed": closed,
                "lunch_closed": closed
                or is_shift_closed(current, ShiftName.LUNCH, closures),
                "dinner_closed": closed
                or is_shift_closed(current, ShiftName.DINNER, closures),
                "reason": reason,
            }
        )
        current += timedelta(days=1)
    return days
