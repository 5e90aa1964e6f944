"""Schema exports."""

from reservation_admin.schemas.analytics import AnalyticsData
from reservation_admin.schemas.availability import (
    AvailabilityRequest,
    AvailabilityResult,
    CalendarDay,
    DayUtilization,
    SlotList,
)
from reservation_admin.schemas.customer import CustomerList, CustomerProfile
from reservation_admin.schemas.reservation import (
    ReservationCreate,
    ReservationList,
    ReservationRead,
    ReservationUpdate,
)
from reservation_admin.schemas.settings import (
    AutoConfirmation,
    BulkSettingsResult,
    BulkSettingsUpdate,
    BusinessHours,
    ClosureConfig,
    OperatingDays,
    RestaurantConfig,
    SeatPool,
    SettingsRead,
)

__all__ = [
    "AnalyticsData",
    "AutoConfirmation",
    "AvailabilityRequest",
    "AvailabilityResult",
    "BulkSettingsResult",
    "BulkSettingsUpdate",
    "BusinessHours",
    "CalendarDay",
    "ClosureConfig",
    "CustomerList",
    "CustomerProfile",
    "DayUtilization",
    "OperatingDays",
    "ReservationCreate",
    "ReservationList",
    "ReservationRead",
    "ReservationUpdate",
    "RestaurantConfig",
    "SeatPool",
    "SettingsRead",
    "SlotList",
]
