"""Pydantic schemas for reservations."""
from __future__ import annotations

import uuid
from datetime import date, datetime, time

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_serializer

from reservation_admin.models.reservation import ReservationStatus, ReservationType


class ReservationBase(BaseModel):
    """Shared reservation fields."""

    reservation_type: ReservationType
    reservation_date: date
    reservation_time: time
    party_size: int = Field(ge=1, le=15)
    customer_name: str = Field(min_length=1, max_length=255)
    customer_email: EmailStr | None = None
    customer_phone: str | None = Field(default=None, max_length=32)
    special_requests: str | None = Field(default=None, max_length=1024)
    notes: str | None = Field(default=None, max_length=1024)


class ReservationCreate(ReservationBase):
    """Payload for creating reservations; ``status`` defaults per type."""

    status: ReservationStatus | None = None


class ReservationUpdate(BaseModel):
    """Mutable reservation fields."""

    reservation_date: date | None = None
    reservation_time: time | None = None
    party_size: int | None = Field(default=None, ge=1, le=15)
    customer_name: str | None = Field(default=None, min_length=1, max_length=255)
    customer_email: EmailStr | None = None
    customer_phone: str | None = Field(default=None, max_length=32)
    special_requests: str | None = Field(default=None, max_length=1024)
    notes: str | None = Field(default=None, max_length=1024)
    status: ReservationStatus | None = None


class ReservationRead(ReservationBase):
    """Serialized reservation representation."""

    id: uuid.UUID
    customer_email: str | None = None
    status: ReservationStatus
    confirmation_code: str | None = None
    duration_minutes: int | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("reservation_time")
    def _serialize_time(self, value: time) -> str:
        return value.strftime("%H:%M")


class ReservationList(BaseModel):
    items: list[ReservationRead]
    total: int
    limit: int
    offset: int
