"""Versioned API router."""

from fastapi import APIRouter

from . import analytics, availability, customers, health, reservations, settings

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(analytics.router, tags=["analytics"])
router.include_router(availability.router, tags=["availability"])
router.include_router(
    reservations.router, prefix="/reservations", tags=["reservations"]
)
router.include_router(customers.router, tags=["customers"])
router.include_router(settings.router, tags=["settings"])

__all__ = ["router"]
