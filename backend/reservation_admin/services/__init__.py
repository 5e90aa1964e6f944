"""Service layer exports."""
from reservation_admin.services import (
    analytics_service,
    capacity_service,
    closure_service,
    customer_service,
    reservation_service,
    settings_service,
    snapshot_service,
    time_slot_service,
)

__all__ = [
    "analytics_service",
    "capacity_service",
    "closure_service",
    "customer_service",
    "reservation_service",
    "settings_service",
    "snapshot_service",
    "time_slot_service",
]
