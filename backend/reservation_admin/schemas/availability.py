"""Schemas for availability lookups."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from reservation_admin.models.reservation import ReservationType


class CalendarDay(BaseModel):
    date: date
    is_closed: bool
    lunch_closed: bool
    dinner_closed: bool
    reason: str | None = None


class SlotList(BaseModel):
    date: date
    reservation_type: ReservationType
    party_size: int
    slots: list[str]


class DayUtilization(BaseModel):
    date: date
    omakase_used: int
    dining_used: int
    total_used: int
    total_capacity: int
    percentage: float


class AvailabilityRequest(BaseModel):
    """Payload for checking whether a party fits at a given time."""

    date: date
    time: str = Field(pattern=r"^\d{2}:\d{2}$")
    party_size: int = Field(ge=1, le=15)
    reservation_type: ReservationType


class CapacityInfo(BaseModel):
    requested: int
    available: int
    total: int


class AvailabilityResult(BaseModel):
    available: bool
    reason: str | None = None
    message: str
    capacity_info: CapacityInfo | None = None
    alternative_times: list[str] = Field(default_factory=list)
    date: date
    time: str
    party_size: int
    reservation_type: ReservationType
