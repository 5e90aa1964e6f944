"""Analytics roll-up tests."""
from __future__ import annotations

import json
from datetime import UTC, date, datetime, time, timedelta

import pytest

from reservation_admin.models.reservation import ReservationStatus, ReservationType
from reservation_admin.schemas.analytics import AnalyticsData
from reservation_admin.schemas.settings import RestaurantConfig, SeatPool
from reservation_admin.services import analytics_service

TODAY = date(2026, 3, 12)


@pytest.fixture()
def scenario(make_reservation):
    """Three confirmed omakase bookings and one cancelled dining booking."""
    return [
        make_reservation(
            party_size=2,
            reservation_date=TODAY - timedelta(days=2),
            customer_email="ana@example.com",
        ),
        make_reservation(
            party_size=2,
            reservation_date=TODAY - timedelta(days=1),
            customer_email="ana@example.com",
        ),
        make_reservation(
            party_size=4,
            reservation_date=TODAY,
            customer_email="bo@example.com",
        ),
        make_reservation(
            ReservationType.DINING,
            party_size=4,
            reservation_time=time(18, 30),
            reservation_date=TODAY - timedelta(days=3),
            status=ReservationStatus.CANCELLED,
            customer_email="cy@example.com",
        ),
    ]


def _build(reservations, config=None, timeframe="30d"):
    return analytics_service.build_analytics(
        reservations, config or RestaurantConfig(), timeframe=timeframe, today=TODAY
    )


def test_thirty_day_scenario(scenario) -> None:
    data = _build(scenario)

    overview = data["overview"]
    assert overview["total_reservations"] == 3
    assert overview["total_revenue_potential"] == 1600
    assert overview["average_party_size"] == 2.7
    assert overview["arpc"] == 533.33
    assert overview["capacity_utilization"] == 0.5
    assert data["revenue_breakdown"]["by_status"] == {
        "confirmed": 1600,
        "completed": 0,
        "cancelled": 320,
        "pending": 0,
    }
    assert data["revenue_breakdown"]["by_type"] == {"omakase": 1600, "dining": 0}
    assert data["revenue_breakdown"]["by_party_size"] == [
        {"size": 2, "count": 2, "revenue": 800},
        {"size": 4, "count": 1, "revenue": 800},
    ]
    assert data["operational"]["cancellation_rate"] == 33.3
    assert data["operational"]["no_show_rate"] == 0.0


def test_pending_is_excluded_everywhere_but_by_status(scenario, make_reservation) -> None:
    baseline = _build(scenario)
    scenario.append(
        make_reservation(
            party_size=6,
            reservation_date=TODAY,
            status=ReservationStatus.PENDING,
            customer_email="dee@example.com",
        )
    )
    data = _build(scenario)

    assert data["overview"] == baseline["overview"]
    assert data["operational"]["capacity_by_day"] == baseline["operational"]["capacity_by_day"]
    assert data["revenue_breakdown"]["by_status"]["pending"] == 1200
    assert data["customer_insights"] == baseline["customer_insights"]


def test_empty_snapshot_yields_zeros() -> None:
    data = _build([])
    assert data["overview"] == {
        "total_reservations": 0,
        "total_revenue_potential": 0,
        "average_party_size": 0,
        "capacity_utilization": 0,
        "period_growth": 0,
        "arpc": 0,
    }
    assert data["operational"]["peak_hours"] == []
    assert len(data["operational"]["peak_days"]) == 7
    assert data["operational"]["cancellation_rate"] == 0
    assert data["customer_insights"]["repeat_customer_rate"] == 0
    assert data["forecasting"]["next_week_projection"] == 0


def test_window_and_weekly_buckets() -> None:
    thirty = _build([])
    assert len(thirty["trends"]["daily_reservations"]) == 31
    assert thirty["trends"]["daily_reservations"][0]["date"] == date(2026, 2, 10)
    assert thirty["trends"]["daily_reservations"][-1]["date"] == TODAY
    assert [w["week"] for w in thirty["trends"]["weekly_revenue"]] == [
        "Week 1",
        "Week 2",
        "Week 3",
        "Week 4",
        "Week 5",
    ]
    assert [m["month"] for m in thirty["trends"]["monthly_comparison"]] == [
        "2026-02",
        "2026-03",
    ]

    ninety = _build([], timeframe="90d")
    assert len(ninety["trends"]["weekly_revenue"]) == 8
    week = _build([], timeframe="7d")
    assert len(week["trends"]["daily_reservations"]) == 8
    assert len(week["trends"]["weekly_revenue"]) == 1


def test_unknown_timeframe_falls_back_to_thirty_days() -> None:
    data = _build([], timeframe="365d")
    assert len(data["trends"]["daily_reservations"]) == 31


def test_weekly_revenue_is_chronological(scenario, make_reservation) -> None:
    scenario.append(
        make_reservation(
            ReservationType.DINING,
            party_size=5,
            reservation_time=time(12, 0),
            reservation_date=TODAY - timedelta(days=20),
        )
    )
    weeks = _build(scenario)["trends"]["weekly_revenue"]
    assert weeks[-1] == {"week": "Week 5", "omakase": 1600, "dining": 0}
    assert weeks[2] == {"week": "Week 3", "omakase": 0, "dining": 400}


def test_period_growth_against_previous_window(scenario, make_reservation) -> None:
    for offset in (35, 40):
        scenario.append(make_reservation(reservation_date=TODAY - timedelta(days=offset)))
    data = _build(scenario)
    assert data["overview"]["period_growth"] == 50.0


def test_peaks_and_customer_insights(scenario) -> None:
    data = _build(scenario)

    assert data["operational"]["peak_hours"] == [{"hour": 17, "count": 3}]
    peak_days = data["operational"]["peak_days"]
    assert peak_days[:3] == [
        {"day": "Tuesday", "count": 1},
        {"day": "Wednesday", "count": 1},
        {"day": "Thursday", "count": 1},
    ]
    assert sum(day["count"] for day in peak_days) == 3
    assert {day["day"] for day in peak_days} == {
        "Sunday",
        "Monday",
        "Tuesday",
        "Wednesday",
        "Thursday",
        "Friday",
        "Saturday",
    }

    insights = data["customer_insights"]
    assert insights["new_vs_returning"] == {"new": 1, "returning": 1}
    assert insights["repeat_customer_rate"] == 50.0
    assert insights["tier_distribution"] == {
        "new": 1,
        "regular": 1,
        "vip": 0,
        "platinum": 0,
    }


def test_average_booking_window(make_reservation) -> None:
    reservations = [
        make_reservation(
            reservation_date=TODAY,
            created_at=datetime(2026, 3, 2, 20, 0, tzinfo=UTC),
        ),
        make_reservation(
            reservation_date=TODAY - timedelta(days=1),
            created_at=datetime(2026, 3, 10, tzinfo=UTC),
        ),
    ]
    data = _build(reservations)
    assert data["customer_insights"]["average_booking_window"] == 5.5


def test_forecast_and_recommendations(make_reservation) -> None:
    config = RestaurantConfig(seat_pool=SeatPool(omakase_capacity=2, dining_capacity=0))
    thursdays = [TODAY - timedelta(days=7 * weeks) for weeks in range(5)]
    reservations = [make_reservation(reservation_date=day) for day in thursdays]
    data = _build(reservations, config)

    assert data["forecasting"]["next_week_projection"] == 1
    assert data["forecasting"]["capacity_recommendations"] == [
        {
            "date": date(2026, 3, 19),
            "recommended_slots": 16,
            "reason": "High demand: Thursdays averaged 100.0% utilization",
        }
    ]
    by_day = {entry["date"]: entry for entry in data["operational"]["capacity_by_day"]}
    assert by_day[TODAY]["omakase_utilization"] == 100.0
    assert by_day[TODAY]["dining_utilization"] == 0.0


def test_short_window_uses_smaller_multiplier(make_reservation) -> None:
    reservations = [
        make_reservation(reservation_date=TODAY - timedelta(days=offset)) for offset in range(7)
    ]
    assert _build(reservations, timeframe="7d")["forecasting"]["next_week_projection"] == 7
    assert _build(reservations, timeframe="30d")["forecasting"]["next_week_projection"] == 8


def test_repeated_runs_are_identical(scenario) -> None:
    first = AnalyticsData.model_validate(_build(scenario)).model_dump_json()
    second = AnalyticsData.model_validate(_build(scenario)).model_dump_json()
    assert first == second
    assert json.loads(first)["overview"]["total_reservations"] == 3
