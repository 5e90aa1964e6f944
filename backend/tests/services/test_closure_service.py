"""Closure rule tests."""
from __future__ import annotations

from datetime import date

import pytest

from reservation_admin.models.reservation import ReservationType
from reservation_admin.schemas.settings import (
    ClosureConfig,
    Holiday,
    OperatingDays,
    ShiftClosure,
    ShiftClosureType,
    ShiftName,
)
from reservation_admin.services import closure_service

THURSDAY = date(2026, 3, 12)
MONDAY = date(2026, 3, 9)


def test_weekday_index_counts_from_sunday() -> None:
    assert closure_service.weekday_index(date(2026, 3, 8)) == 0
    assert closure_service.weekday_index(THURSDAY) == 4
    assert closure_service.weekday_index(date(2026, 3, 14)) == 6


def test_default_config_closes_nothing() -> None:
    closures = ClosureConfig()
    assert not closure_service.is_date_closed(THURSDAY, closures)
    assert not closure_service.is_shift_closed(THURSDAY, ShiftName.LUNCH, closures)
    assert closure_service.closure_reason(THURSDAY, closures) is None


@pytest.mark.parametrize(
    ("closures", "reason"),
    [
        (ClosureConfig(closed_dates=(THURSDAY,)), "Closed date"),
        (ClosureConfig(closed_weekdays=(4,)), "Closed every Thursday"),
        (
            ClosureConfig(holidays=(Holiday(date=THURSDAY, name="Staff Party"),)),
            "Staff Party",
        ),
        (
            ClosureConfig(
                shift_closures=(
                    ShiftClosure(date=THURSDAY, type=ShiftClosureType.FULL_DAY),
                )
            ),
            "Full day closure",
        ),
    ],
)
def test_each_rule_closes_the_date(closures: ClosureConfig, reason: str) -> None:
    assert closure_service.is_date_closed(THURSDAY, closures)
    assert closure_service.closure_reason(THURSDAY, closures) == reason
    assert not closure_service.is_date_closed(MONDAY, closures)


def test_open_holiday_does_not_close() -> None:
    closures = ClosureConfig(
        holidays=(Holiday(date=THURSDAY, name="Pi Day Eve", closed=False),)
    )
    assert not closure_service.is_date_closed(THURSDAY, closures)


def test_shift_closure_only_removes_matching_shift() -> None:
    closures = ClosureConfig(
        shift_closures=(ShiftClosure(date=THURSDAY, type=ShiftClosureType.LUNCH_ONLY),)
    )
    assert not closure_service.is_date_closed(THURSDAY, closures)
    assert closure_service.is_shift_closed(THURSDAY, ShiftName.LUNCH, closures)
    assert not closure_service.is_shift_closed(THURSDAY, ShiftName.DINNER, closures)
    assert not closure_service.is_shift_closed(MONDAY, ShiftName.LUNCH, closures)


def test_full_day_shift_closure_closes_both_shifts() -> None:
    closures = ClosureConfig(
        shift_closures=(ShiftClosure(date=THURSDAY, type=ShiftClosureType.FULL_DAY),)
    )
    assert closure_service.is_shift_closed(THURSDAY, ShiftName.LUNCH, closures)
    assert closure_service.is_shift_closed(THURSDAY, ShiftName.DINNER, closures)


def test_adding_rules_never_reopens_a_date() -> None:
    days = [date(2026, 3, day) for day in range(1, 32)]
    steps = [
        ClosureConfig(),
        ClosureConfig(closed_dates=(date(2026, 3, 3),)),
        ClosureConfig(closed_dates=(date(2026, 3, 3),), closed_weekdays=(1,)),
        ClosureConfig(
            closed_dates=(date(2026, 3, 3),),
            closed_weekdays=(1,),
            holidays=(Holiday(date=date(2026, 3, 17), name="St. Patrick's Day"),),
        ),
    ]
    previous: set[date] = set()
    for closures in steps:
        closed = {day for day in days if closure_service.is_date_closed(day, closures)}
        assert previous <= closed
        previous = closed
    assert date(2026, 3, 17) in previous
    assert date(2026, 3, 9) in previous


def test_only_one_shift_closure_per_date() -> None:
    with pytest.raises(ValueError):
        ClosureConfig(
            shift_closures=(
                ShiftClosure(date=THURSDAY, type=ShiftClosureType.LUNCH_ONLY),
                ShiftClosure(date=THURSDAY, type=ShiftClosureType.DINNER_ONLY),
            )
        )


def test_type_offered_follows_operating_days() -> None:
    operating_days = OperatingDays()
    assert closure_service.is_type_offered(THURSDAY, ReservationType.OMAKASE, operating_days)
    assert not closure_service.is_type_offered(MONDAY, ReservationType.OMAKASE, operating_days)
    assert closure_service.is_type_offered(MONDAY, ReservationType.DINING, operating_days)


def test_dining_needs_at_least_one_day() -> None:
    with pytest.raises(ValueError):
        OperatingDays(dining_days=())


def test_calendar_status_reports_each_day() -> None:
    closures = ClosureConfig(
        closed_weekdays=(1,),
        shift_closures=(
            ShiftClosure(date=date(2026, 3, 11), type=ShiftClosureType.DINNER_ONLY),
        ),
    )
    days = closure_service.calendar_status(MONDAY, THURSDAY, closures)

    assert [day["date"] for day in days] == [date(2026, 3, d) for d in range(9, 13)]
    assert days[0]["is_closed"] and days[0]["reason"] == "Closed every Monday"
    assert days[0]["lunch_closed"] and days[0]["dinner_closed"]
    wednesday = days[2]
    assert not wednesday["is_closed"]
    assert not wednesday["lunch_closed"]
    assert wednesday["dinner_closed"]


def test_calendar_status_rejects_bad_ranges() -> None:
    with pytest.raises(ValueError):
        closure_service.calendar_status(THURSDAY, MONDAY, ClosureConfig())
    with pytest.raises(ValueError):
        closure_service.calendar_status(date(2026, 1, 1), date(2027, 1, 2), ClosureConfig())
