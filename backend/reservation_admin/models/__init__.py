"""ORM models package export."""

from reservation_admin.models.admin_setting import AdminSetting
from reservation_admin.models.reservation import (
    INACTIVE_STATUSES,
    PRICE_PER_PERSON,
    RESERVATION_CLASSES,
    SEAT_HOLDING_STATUSES,
    DiningReservation,
    OmakaseReservation,
    Reservation,
    ReservationStatus,
    ReservationType,
)

__all__ = [
    "AdminSetting",
    "DiningReservation",
    "INACTIVE_STATUSES",
    "OmakaseReservation",
    "PRICE_PER_PERSON",
    "RESERVATION_CLASSES",
    "Reservation",
    "ReservationStatus",
    "ReservationType",
    "SEAT_HOLDING_STATUSES",
]
