"""Schemas for the customer CRM views."""

from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel

from reservation_admin.models.reservation import ReservationStatus, ReservationType


class CustomerReservation(BaseModel):
    id: uuid.UUID
    reservation_date: date
    reservation_time: str
    party_size: int
    type: ReservationType
    status: ReservationStatus
    special_requests: str | None = None
    notes: str | None = None
    confirmation_code: str | None = None


class CustomerProfile(BaseModel):
    """Everything known about one guest, derived from their reservations."""

    id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    total_visits: int
    total_party_size: int
    average_party_size: float
    first_visit_date: date
    last_visit_date: date
    favorite_reservation_type: str
    status_breakdown: dict[str, int]
    total_revenue_potential: int
    customer_tier: str
    reservations: list[CustomerReservation]


class CustomerSummaryStats(BaseModel):
    total_customers: int
    total_reservations: int
    tier_breakdown: dict[str, int]
    type_preference: dict[str, int]
    total_revenue_potential: int
    repeat_customer_rate: float


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class CustomerList(BaseModel):
    customers: list[CustomerProfile]
    summary: CustomerSummaryStats
    pagination: Pagination
