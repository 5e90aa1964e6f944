"""Customer identities, loyalty tiers and CRM profiles.

Customers are never stored. Every request regroups the current reservations
by :class:`CustomerKey` and derives the aggregates from scratch.
"""

from __future__ import annotations

import enum
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from reservation_admin.core.rounding import round_one, round_whole, safe_ratio
from reservation_admin.models.reservation import (
    PRICE_PER_PERSON,
    Reservation,
    ReservationStatus,
    ReservationType,
)
from reservation_admin.security.redact import mask_email, mask_phone

BOTH_TYPES = "both"

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

_SORT_FIELDS = {"last_visit_date", "total_visits", "total_revenue_potential", "customer_name"}


class CustomerTier(str, enum.Enum):
    NEW = "new"
    REGULAR = "regular"
    VIP = "vip"
    PLATINUM = "platinum"


@dataclass(slots=True, frozen=True, order=True)
class CustomerKey:
    """Identity of a guest: the lowercased email, else the raw phone number."""

    value: str

    def __str__(self) -> str:
        return self.value


def customer_key(email: str | None, phone: str | None) -> CustomerKey | None:
    """Normalize contact details into a key, or ``None`` when both are missing."""
    if email and email.strip():
        return CustomerKey(email.strip().lower())
    if phone:
        return CustomerKey(phone)
    return None


def group_by_customer(
    reservations: Iterable[Reservation],
) -> dict[CustomerKey, list[Reservation]]:
    """Group reservations by customer in first-seen order.

    Reservations without an email or phone cannot be attributed and are left
    out.
    """
    groups: dict[CustomerKey, list[Reservation]] = {}
    for reservation in reservations:
        key = customer_key(reservation.customer_email, reservation.customer_phone)
        if key is None:
            continue
        groups.setdefault(key, []).append(reservation)
    return groups


def classify_tier(visit_count: int, total_party_size: int) -> CustomerTier:
    """First matching rule wins: platinum, vip, regular, then new."""
    if visit_count >= 10 or total_party_size >= 40:
        return CustomerTier.PLATINUM
    if visit_count >= 5 or total_party_size >= 20:
        return CustomerTier.VIP
    if visit_count >= 2:
        return CustomerTier.REGULAR
    return CustomerTier.NEW


def favorite_type(reservations: Iterable[Reservation]) -> str:
    """Most booked reservation type, or ``"both"`` on a tie."""
    counts = Counter(reservation.reservation_type for reservation in reservations)
    omakase = counts[ReservationType.OMAKASE]
    dining = counts[ReservationType.DINING]
    if omakase > dining:
        return ReservationType.OMAKASE.value
    if dining > omakase:
        return ReservationType.DINING.value
    return BOTH_TYPES


@dataclass(slots=True, frozen=True)
class CustomerSummary:
    key: CustomerKey
    visit_count: int
    total_party_size: int
    favorite_type: str
    tier: CustomerTier


def summarize(key: CustomerKey, reservations: Sequence[Reservation]) -> CustomerSummary:
    visit_count = len(reservations)
    total_party_size = sum(reservation.party_size for reservation in reservations)
    return CustomerSummary(
        key=key,
        visit_count=visit_count,
        total_party_size=total_party_size,
        favorite_type=favorite_type(reservations),
        tier=classify_tier(visit_count, total_party_size),
    )


def summarize_all(reservations: Iterable[Reservation]) -> list[CustomerSummary]:
    return [
        summarize(key, group) for key, group in group_by_customer(reservations).items()
    ]


def tier_distribution(summaries: Iterable[CustomerSummary]) -> dict[str, int]:
    distribution = {tier.value: 0 for tier in CustomerTier}
    for summary in summaries:
        distribution[summary.tier.value] += 1
    return distribution


def _coerce_utc(value: datetime | None) -> datetime:
    if value is None:
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def revenue_potential(visit_count: int, average_party_size: float, favorite: str) -> int:
    """Estimated lifetime value from visits, party size and preferred type."""
    if favorite == ReservationType.OMAKASE.value:
        base = PRICE_PER_PERSON[ReservationType.OMAKASE]
    elif favorite == ReservationType.DINING.value:
        base = PRICE_PER_PERSON[ReservationType.DINING]
    else:
        base = sum(PRICE_PER_PERSON.values()) / len(PRICE_PER_PERSON)
    return round_whole(visit_count * average_party_size * base)


def _profile(key: CustomerKey, reservations: list[Reservation]) -> dict[str, Any]:
    summary = summarize(key, reservations)
    latest = max(reservations, key=lambda reservation: _coerce_utc(reservation.created_at))
    average_party_size = round_one(summary.total_party_size / summary.visit_count)

    status_breakdown = {status.value: 0 for status in ReservationStatus}
    for reservation in reservations:
        status_breakdown[reservation.status.value] += 1

    visit_dates = sorted(reservation.reservation_date for reservation in reservations)
    history = sorted(
        reservations,
        key=lambda reservation: (reservation.reservation_date, reservation.reservation_time),
        reverse=True,
    )
    return {
        "id": key.value,
        "customer_name": latest.customer_name,
        "customer_email": latest.customer_email or "",
        "customer_phone": latest.customer_phone or "",
        "total_visits": summary.visit_count,
        "total_party_size": summary.total_party_size,
        "average_party_size": average_party_size,
        "first_visit_date": visit_dates[0],
        "last_visit_date": visit_dates[-1],
        "favorite_reservation_type": summary.favorite_type,
        "status_breakdown": status_breakdown,
        "total_revenue_potential": revenue_potential(
            summary.visit_count, average_party_size, summary.favorite_type
        ),
        "customer_tier": summary.tier.value,
        "reservations": [
            {
                "id": reservation.id,
                "reservation_date": reservation.reservation_date,
                "reservation_time": reservation.reservation_time.strftime("%H:%M"),
                "party_size": reservation.party_size,
                "type": reservation.reservation_type.value,
                "status": reservation.status.value,
                "special_requests": reservation.special_requests,
                "notes": reservation.notes,
                "confirmation_code": reservation.confirmation_code,
            }
            for reservation in history
        ],
    }


def build_profiles(reservations: Iterable[Reservation]) -> list[dict[str, Any]]:
    """Return one CRM profile per customer found in ``reservations``."""
    return [
        _profile(key, group) for key, group in group_by_customer(reservations).items()
    ]


def _sort_value(profile: dict[str, Any], sort_by: str) -> Any:
    if sort_by == "customer_name":
        return profile["customer_name"].lower()
    return profile[sort_by]


def search_customers(
    profiles: Sequence[dict[str, Any]],
    *,
    search: str | None = None,
    tier: CustomerTier | None = None,
    favorite: str | None = None,
    sort_by: str = "last_visit_date",
    sort_order: str = "desc",
    limit: int = 100,
    offset: int = 0,
    total_reservations: int = 0,
) -> dict[str, Any]:
    """Filter, sort and paginate CRM profiles and summarize the filtered set."""
    if sort_by not in _SORT_FIELDS:
        raise ValueError(f"Unsupported sort field: {sort_by}")
    if sort_order not in {"asc", "desc"}:
        raise ValueError("sort_order must be 'asc' or 'desc'")

    filtered = list(profiles)
    if search:
        needle = search.lower()
        filtered = [
            profile
            for profile in filtered
            if needle in profile["customer_name"].lower()
            or needle in profile["customer_email"].lower()
            or search in profile["customer_phone"]
        ]
    if tier is not None:
        filtered = [p for p in filtered if p["customer_tier"] == tier.value]
    if favorite is not None:
        filtered = [p for p in filtered if p["favorite_reservation_type"] == favorite]

    filtered.sort(
        key=lambda profile: _sort_value(profile, sort_by),
        reverse=sort_order == "desc",
    )
    page = filtered[offset : offset + limit]

    summary = {
        "total_customers": len(filtered),
        "total_reservations": total_reservations,
        "tier_breakdown": {
            tier_value.value: sum(
                1 for p in filtered if p["customer_tier"] == tier_value.value
            )
            for tier_value in CustomerTier
        },
        "type_preference": {
            preference: sum(
                1 for p in filtered if p["favorite_reservation_type"] == preference
            )
            for preference in (
                ReservationType.OMAKASE.value,
                ReservationType.DINING.value,
                BOTH_TYPES,
            )
        },
        "total_revenue_potential": sum(
            p["total_revenue_potential"] for p in filtered
        ),
        "repeat_customer_rate": round_one(
            100
            * safe_ratio(
                sum(1 for p in filtered if p["total_visits"] > 1), len(filtered)
            )
        ),
    }
    return {
        "customers": page,
        "summary": summary,
        "pagination": {
            "total": len(filtered),
            "limit": limit,
            "offset": offset,
            "has_more": offset + limit < len(filtered),
        },
    }


def export_rows(
    profiles: Iterable[dict[str, Any]], *, redact: bool = True
) -> list[list[str]]:
    """Flatten CRM profiles into CSV rows, masking contact details if asked."""
    output: list[list[str]] = [
        [
            "customer_id",
            "customer_name",
            "customer_email",
            "customer_phone",
            "customer_tier",
            "total_visits",
            "total_party_size",
            "favorite_reservation_type",
            "first_visit_date",
            "last_visit_date",
            "total_revenue_potential",
        ]
    ]
    for profile in profiles:
        email = profile["customer_email"]
        phone = profile["customer_phone"]
        identifier = profile["id"]
        if redact:
            email = mask_email(email) or ""
            phone = mask_phone(phone) or ""
            identifier = mask_email(identifier) if "@" in identifier else mask_phone(identifier)
        output.append(
            [
                identifier or "",
                profile["customer_name"],
                email,
                phone,
                profile["customer_tier"],
                str(profile["total_visits"]),
                str(profile["total_party_size"]),
                profile["favorite_reservation_type"],
                profile["first_visit_date"].isoformat(),
                profile["last_visit_date"].isoformat(),
                str(profile["total_revenue_potential"]),
            ]
        )
    return output
