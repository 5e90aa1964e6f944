"""Reporting and analytics services.

Every metric is a pure reduction over the reservations whose date falls in
``[today - days_back, today]``. Cancelled and pending bookings are dropped
before anything is counted, except in ``revenue_breakdown.by_status`` where
they stay visible as revenue that was not realized.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import UTC, date, timedelta
from typing import Any

from reservation_admin.core.rounding import round_money, round_one, round_whole, safe_ratio
from reservation_admin.models.reservation import (
    Reservation,
    ReservationStatus,
    ReservationType,
)
from reservation_admin.schemas.settings import RestaurantConfig
from reservation_admin.services import (
    capacity_service,
    closure_service,
    customer_service,
    time_slot_service,
)

TIMEFRAME_DAYS: dict[str, int] = {"7d": 7, "30d": 30, "90d": 90}
DEFAULT_TIMEFRAME = "30d"

MAX_WEEKLY_BUCKETS = 8
MAX_PEAK_HOURS = 6
MAX_PARTY_SIZE_BUCKET = 15
FORECAST_DAYS = 7
HIGH_DEMAND_THRESHOLD = 80.0

_REPORTED_STATUSES = (
    ReservationStatus.CONFIRMED,
    ReservationStatus.COMPLETED,
    ReservationStatus.CANCELLED,
    ReservationStatus.PENDING,
)


def days_for_timeframe(timeframe: str) -> int:
    """Map a ``7d``/``30d``/``90d`` selector to days, defaulting to 30."""
    return TIMEFRAME_DAYS.get(timeframe, TIMEFRAME_DAYS[DEFAULT_TIMEFRAME])


def _revenue(reservations: Iterable[Reservation]) -> int:
    return sum(reservation.revenue for reservation in reservations)


def _between(
    reservations: Iterable[Reservation], start: date, end: date
) -> list[Reservation]:
    return [r for r in reservations if start <= r.reservation_date <= end]


def _days(start: date, end: date) -> list[date]:
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def _overview(
    active: Sequence[Reservation],
    previous_count: int,
    config: RestaurantConfig,
    days_back: int,
) -> dict[str, Any]:
    total = len(active)
    total_party_size = sum(r.party_size for r in active)
    revenue = _revenue(active)
    seats_available = config.seat_pool.total_capacity * days_back
    growth = 0.0
    if previous_count:
        growth = 100 * (total - previous_count) / previous_count
    return {
        "total_reservations": total,
        "total_revenue_potential": round_money(revenue),
        "average_party_size": round_one(safe_ratio(total_party_size, total)),
        "capacity_utilization": round_one(100 * safe_ratio(total_party_size, seats_available)),
        "period_growth": round_one(growth),
        "arpc": round_money(safe_ratio(revenue, total)),
    }


def _daily_reservations(
    active: Sequence[Reservation], window: list[date]
) -> list[dict[str, Any]]:
    by_day: dict[date, list[Reservation]] = {}
    for reservation in active:
        by_day.setdefault(reservation.reservation_date, []).append(reservation)
    return [
        {
            "date": day,
            "count": len(by_day.get(day, [])),
            "revenue": round_money(_revenue(by_day.get(day, []))),
        }
        for day in window
    ]


def _weekly_revenue(
    active: Sequence[Reservation], today: date, cutoff: date, days_back: int
) -> list[dict[str, Any]]:
    weeks = min(math.ceil(days_back / 7), MAX_WEEKLY_BUCKETS)
    buckets: list[dict[str, Any]] = []
    # Bucket i covers (today - 7(i+1), today - 7i], most recent first.
    for index in range(weeks):
        week_end = today - timedelta(days=index * 7)
        week_start = today - timedelta(days=(index + 1) * 7)
        in_week = [
            r
            for r in active
            if week_start < r.reservation_date <= week_end and r.reservation_date >= cutoff
        ]
        buckets.append(
            {
                "week": f"Week {weeks - index}",
                "omakase": round_money(
                    _revenue(r for r in in_week if r.reservation_type == ReservationType.OMAKASE)
                ),
                "dining": round_money(
                    _revenue(r for r in in_week if r.reservation_type == ReservationType.DINING)
                ),
            }
        )
    buckets.reverse()
    return buckets


def _monthly_comparison(
    active: Sequence[Reservation], window: list[date]
) -> list[dict[str, Any]]:
    months: dict[str, list[Reservation]] = {}
    for day in window:
        months.setdefault(day.strftime("%Y-%m"), [])
    for reservation in active:
        months[reservation.reservation_date.strftime("%Y-%m")].append(reservation)
    return [
        {
            "month": month,
            "reservations": len(entries),
            "revenue": round_money(_revenue(entries)),
        }
        for month, entries in months.items()
    ]


def _booking_window_days(reservation: Reservation) -> int | None:
    created_at = reservation.created_at
    if created_at is None:
        return None
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    lead = (reservation.reservation_date - created_at.astimezone(UTC).date()).days
    return max(lead, 0)


def _customer_insights(active: Sequence[Reservation]) -> dict[str, Any]:
    summaries = customer_service.summarize_all(active)
    new = sum(1 for summary in summaries if summary.visit_count == 1)
    returning = sum(1 for summary in summaries if summary.visit_count > 1)
    windows = [
        lead for lead in (_booking_window_days(r) for r in active) if lead is not None
    ]
    return {
        "new_vs_returning": {"new": new, "returning": returning},
        "tier_distribution": customer_service.tier_distribution(summaries),
        "average_booking_window": round_one(safe_ratio(sum(windows), len(windows))),
        "repeat_customer_rate": round_one(100 * safe_ratio(returning, new + returning)),
    }


def _peak_hours(active: Sequence[Reservation]) -> list[dict[str, int]]:
    counts = [0] * 24
    for reservation in active:
        counts[reservation.reservation_time.hour] += 1
    hours = [{"hour": hour, "count": count} for hour, count in enumerate(counts) if count]
    hours.sort(key=lambda entry: entry["count"], reverse=True)
    return hours[:MAX_PEAK_HOURS]


def _peak_days(active: Sequence[Reservation]) -> list[dict[str, Any]]:
    counts = [0] * 7
    for reservation in active:
        counts[closure_service.weekday_index(reservation.reservation_date)] += 1
    days = [
        {"day": name, "count": counts[index]}
        for index, name in enumerate(closure_service.WEEKDAY_NAMES)
    ]
    days.sort(key=lambda entry: entry["count"], reverse=True)
    return days


def _capacity_by_day(
    active: Sequence[Reservation], window: list[date], config: RestaurantConfig
) -> list[dict[str, Any]]:
    pool = config.seat_pool
    entries = []
    for usage in capacity_service.utilization_by_date(active, pool, window[0], window[-1]):
        entries.append(
            {
                "date": usage["date"],
                "omakase_utilization": round_one(
                    min(100.0, 100 * safe_ratio(usage["omakase_used"], pool.omakase_capacity))
                ),
                "dining_utilization": round_one(
                    min(100.0, 100 * safe_ratio(usage["dining_used"], pool.dining_capacity))
                ),
            }
        )
    return entries


def _operational(
    active: Sequence[Reservation],
    in_window: Sequence[Reservation],
    window: list[date],
    config: RestaurantConfig,
) -> dict[str, Any]:
    total = len(active)
    cancelled = sum(1 for r in in_window if r.status == ReservationStatus.CANCELLED)
    no_shows = sum(1 for r in in_window if r.status == ReservationStatus.NO_SHOW)
    return {
        "peak_hours": _peak_hours(active),
        "peak_days": _peak_days(active),
        "cancellation_rate": round_one(100 * safe_ratio(cancelled, total)),
        "no_show_rate": round_one(100 * safe_ratio(no_shows, total)),
        "capacity_by_day": _capacity_by_day(active, window, config),
    }


def _revenue_breakdown(
    active: Sequence[Reservation], in_window: Sequence[Reservation]
) -> dict[str, Any]:
    by_party_size = []
    for size in range(1, MAX_PARTY_SIZE_BUCKET + 1):
        matching = [r for r in active if r.party_size == size]
        if matching:
            by_party_size.append(
                {"size": size, "count": len(matching), "revenue": round_money(_revenue(matching))}
            )
    return {
        "by_type": {
            reservation_type.value: round_money(
                _revenue(r for r in active if r.reservation_type == reservation_type)
            )
            for reservation_type in ReservationType
        },
        "by_party_size": by_party_size,
        # Cancelled and pending stay in on purpose: this is where lost revenue shows.
        "by_status": {
            status.value: round_money(_revenue(r for r in in_window if r.status == status))
            for status in _REPORTED_STATUSES
        },
    }


def _capacity_recommendations(
    capacity_by_day: Sequence[dict[str, Any]],
    config: RestaurantConfig,
    today: date,
) -> list[dict[str, Any]]:
    pool = config.seat_pool
    totals: dict[int, list[float]] = {}
    for entry in capacity_by_day:
        combined = 100 * safe_ratio(
            entry["omakase_utilization"] * pool.omakase_capacity
            + entry["dining_utilization"] * pool.dining_capacity,
            100 * pool.total_capacity,
        )
        totals.setdefault(closure_service.weekday_index(entry["date"]), []).append(combined)

    recommended_slots = len(
        time_slot_service.generate(ReservationType.DINING, 2, config.business_hours)
    ) + len(time_slot_service.OMAKASE_SLOTS)

    recommendations = []
    for offset in range(1, FORECAST_DAYS + 1):
        day = today + timedelta(days=offset)
        if closure_service.is_date_closed(day, config.closures):
            continue
        weekday = closure_service.weekday_index(day)
        history = totals.get(weekday, [])
        average = safe_ratio(sum(history), len(history))
        if average >= HIGH_DEMAND_THRESHOLD:
            recommendations.append(
                {
                    "date": day,
                    "recommended_slots": recommended_slots,
                    "reason": (
                        f"High demand: {closure_service.WEEKDAY_NAMES[weekday]}s averaged "
                        f"{round_one(average)}% utilization"
                    ),
                }
            )
    return recommendations


def build_analytics(
    reservations: Sequence[Reservation],
    config: RestaurantConfig,
    *,
    timeframe: str = DEFAULT_TIMEFRAME,
    today: date,
) -> dict[str, Any]:
    """Roll the full reservation history up into the analytics document."""
    days_back = days_for_timeframe(timeframe)
    cutoff = today - timedelta(days=days_back)
    window = _days(cutoff, today)

    in_window = _between(reservations, cutoff, today)
    active = [r for r in in_window if r.is_active]
    previous_count = sum(
        1
        for r in reservations
        if cutoff - timedelta(days=days_back) <= r.reservation_date < cutoff and r.is_active
    )

    recent_start = today - timedelta(days=min(FORECAST_DAYS, days_back))
    recent_count = sum(1 for r in active if r.reservation_date > recent_start)
    multiplier = 1.10 if days_back >= 14 else 1.05

    operational = _operational(active, in_window, window, config)
    return {
        "overview": _overview(active, previous_count, config, days_back),
        "trends": {
            "daily_reservations": _daily_reservations(active, window),
            "weekly_revenue": _weekly_revenue(active, today, cutoff, days_back),
            "monthly_comparison": _monthly_comparison(active, window),
        },
        "customer_insights": _customer_insights(active),
        "operational": operational,
        "revenue_breakdown": _revenue_breakdown(active, in_window),
        "forecasting": {
            "next_week_projection": round_whole(recent_count * multiplier),
            "capacity_recommendations": _capacity_recommendations(
                operational["capacity_by_day"], config, today
            ),
        },
    }

