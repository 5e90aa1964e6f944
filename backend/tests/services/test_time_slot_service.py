"""Time slot generation tests."""
from __future__ import annotations

from datetime import date, time

import pytest

from reservation_admin.models.reservation import ReservationType
from reservation_admin.schemas.settings import (
    BusinessHours,
    ClosureConfig,
    ShiftClosure,
    ShiftClosureType,
    ShiftWindow,
)
from reservation_admin.services import time_slot_service

THURSDAY = date(2026, 3, 12)


@pytest.mark.parametrize("party_size", [1, 4, 5, 15])
def test_omakase_always_has_two_seatings(party_size: int) -> None:
    odd_hours = BusinessHours(
        lunch=ShiftWindow(open_time=time(11, 0), close_time=time(12, 0)),
        dinner=ShiftWindow(open_time=time(18, 0), close_time=time(19, 0)),
        slot_duration=45,
    )
    for hours in (BusinessHours(), odd_hours):
        assert time_slot_service.generate(ReservationType.OMAKASE, party_size, hours) == [
            "17:00",
            "19:00",
        ]


def test_small_dining_party_default_hours() -> None:
    slots = time_slot_service.generate(ReservationType.DINING, 2, BusinessHours())
    assert slots == [
        "12:00",
        "12:30",
        "13:00",
        "13:30",
        "14:00",
        "17:00",
        "17:30",
        "18:00",
        "18:30",
        "19:00",
        "19:30",
        "20:00",
        "20:30",
        "21:00",
    ]


def test_large_dining_party_leaves_ninety_minutes() -> None:
    slots = time_slot_service.generate(ReservationType.DINING, 5, BusinessHours())
    lunch = [slot for slot in slots if slot < "16:00"]
    dinner = [slot for slot in slots if slot >= "16:00"]
    assert lunch[-1] == "13:30"
    assert all(slot <= "14:00" for slot in lunch)
    assert dinner[-1] == "20:30"
    assert slots == sorted(slots)


def test_short_shift_contributes_nothing() -> None:
    hours = BusinessHours(
        lunch=ShiftWindow(open_time=time(12, 0), close_time=time(12, 45)),
    )
    slots = time_slot_service.generate(ReservationType.DINING, 6, hours)
    assert slots[0] == "17:00"


def test_slot_duration_controls_spacing() -> None:
    hours = BusinessHours(slot_duration=60)
    slots = time_slot_service.generate(ReservationType.DINING, 2, hours)
    assert slots == ["12:00", "13:00", "14:00", "17:00", "18:00", "19:00", "20:00", "21:00"]


def test_bookable_slots_respect_closures() -> None:
    hours = BusinessHours()
    closed = ClosureConfig(closed_dates=(THURSDAY,))
    assert time_slot_service.bookable_slots(
        THURSDAY, ReservationType.DINING, 2, hours, closed
    ) == []

    no_lunch = ClosureConfig(
        shift_closures=(ShiftClosure(date=THURSDAY, type=ShiftClosureType.LUNCH_ONLY),)
    )
    slots = time_slot_service.bookable_slots(
        THURSDAY, ReservationType.DINING, 2, hours, no_lunch
    )
    assert slots[0] == "17:00"
    assert time_slot_service.bookable_slots(
        THURSDAY, ReservationType.OMAKASE, 2, hours, no_lunch
    ) == ["17:00", "19:00"]

    no_dinner = ClosureConfig(
        shift_closures=(ShiftClosure(date=THURSDAY, type=ShiftClosureType.DINNER_ONLY),)
    )
    assert time_slot_service.bookable_slots(
        THURSDAY, ReservationType.OMAKASE, 2, hours, no_dinner
    ) == []
    assert time_slot_service.bookable_slots(
        THURSDAY, ReservationType.DINING, 2, hours, no_dinner
    )[-1] == "14:00"


def test_parse_slot() -> None:
    assert time_slot_service.parse_slot("19:30") == time(19, 30)
    with pytest.raises(ValueError):
        time_slot_service.parse_slot("7pm")
    with pytest.raises(ValueError):
        time_slot_service.parse_slot("25:00")
