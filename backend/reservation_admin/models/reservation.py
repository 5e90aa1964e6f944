"""Reservation models.

Omakase and dining bookings share one table and are told apart by the
``reservation_type`` discriminator. Anything that differs per type (price per
person, seating duration) lives on the subclasses.
"""
from __future__ import annotations

import enum
import uuid
from datetime import date, time
from typing import ClassVar

from sqlalchemy import Date, Enum, Integer, String, Time
from sqlalchemy.orm import Mapped, mapped_column

from reservation_admin.db.base import Base
from reservation_admin.models.mixins import TimestampMixin


class ReservationStatus(str, enum.Enum):
    """Lifecycle states for reservations."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    SEATED = "seated"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


class ReservationType(str, enum.Enum):
    """Bookable experiences, each with its own seat pool."""

    OMAKASE = "omakase"
    DINING = "dining"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Reservation(TimestampMixin, Base):
    """A guest booking for one of the two reservation types."""

    __tablename__ = "reservations"

    price_per_person: ClassVar[int] = 0

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    reservation_type: Mapped[ReservationType] = mapped_column(
        Enum(
            ReservationType,
            native_enum=False,
            length=16,
            values_callable=_enum_values,
        ),
        nullable=False,
        index=True,
    )
    status: Mapped[ReservationStatus] = mapped_column(
        Enum(
            ReservationStatus,
            native_enum=False,
            length=16,
            values_callable=_enum_values,
        ),
        default=ReservationStatus.PENDING,
        nullable=False,
    )
    reservation_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    reservation_time: Mapped[time] = mapped_column(Time(), nullable=False)
    party_size: Mapped[int] = mapped_column(Integer, nullable=False)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    customer_email: Mapped[str | None] = mapped_column(String(320))
    customer_phone: Mapped[str | None] = mapped_column(String(32))
    special_requests: Mapped[str | None] = mapped_column(String(1024))
    notes: Mapped[str | None] = mapped_column(String(1024))
    confirmation_code: Mapped[str | None] = mapped_column(String(16), unique=True)
    duration_minutes: Mapped[int | None] = mapped_column(Integer)

    __mapper_args__ = {
        "polymorphic_on": "reservation_type",
    }

    @property
    def revenue(self) -> int:
        """Flat per-person price times the party size."""
        return self.party_size * self.price_per_person

    @property
    def holds_seats(self) -> bool:
        return self.status in SEAT_HOLDING_STATUSES

    @property
    def is_active(self) -> bool:
        return self.status not in INACTIVE_STATUSES


class OmakaseReservation(Reservation):
    """Fixed tasting menu seating at one of the two nightly slots."""

    price_per_person: ClassVar[int] = 200

    __mapper_args__ = {"polymorphic_identity": ReservationType.OMAKASE}


class DiningReservation(Reservation):
    """A la carte table booked against the business-hours slot grid."""

    price_per_person: ClassVar[int] = 80

    __mapper_args__ = {"polymorphic_identity": ReservationType.DINING}

    @staticmethod
    def duration_for(party_size: int) -> int:
        """Minutes a table is held for a party of the given size."""
        return 60 if party_size <= 4 else 90


RESERVATION_CLASSES: dict[ReservationType, type[Reservation]] = {
    ReservationType.OMAKASE: OmakaseReservation,
    ReservationType.DINING: DiningReservation,
}

PRICE_PER_PERSON: dict[ReservationType, int] = {
    reservation_type: cls.price_per_person
    for reservation_type, cls in RESERVATION_CLASSES.items()
}

# Excluded from every capacity, revenue and utilization total.
INACTIVE_STATUSES = frozenset({ReservationStatus.CANCELLED, ReservationStatus.PENDING})

# Statuses that occupy a seat when deciding whether a new booking fits.
SEAT_HOLDING_STATUSES = frozenset(
    {ReservationStatus.PENDING, ReservationStatus.CONFIRMED, ReservationStatus.SEATED}
)
