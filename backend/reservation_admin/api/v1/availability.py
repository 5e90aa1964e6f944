"""Availability endpoints used by the booking calendar."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from reservation_admin.api import deps
from reservation_admin.models.reservation import ReservationType
from reservation_admin.schemas.availability import (
    AvailabilityRequest,
    AvailabilityResult,
    CalendarDay,
    DayUtilization,
    SlotList,
)
from reservation_admin.services import (
    capacity_service,
    closure_service,
    snapshot_service,
    time_slot_service,
)

router = APIRouter(prefix="/availability")

Snapshot = Annotated[snapshot_service.Snapshot, Depends(deps.get_snapshot)]


def _bad_request(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get(
    "/closures", response_model=list[CalendarDay], summary="Closure flags per day"
)
async def closure_calendar(
    snapshot: Snapshot,
    start_date: date = Query(...),
    end_date: date = Query(...),
) -> list[CalendarDay]:
    try:
        days = closure_service.calendar_status(
            start_date, end_date, snapshot.config.closures
        )
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return [CalendarDay.model_validate(day) for day in days]


@router.get("/slots", response_model=SlotList, summary="Bookable times for a party")
async def available_slots(
    snapshot: Snapshot,
    day: date = Query(..., alias="date"),
    reservation_type: ReservationType = Query(...),
    party_size: int = Query(..., ge=1, le=capacity_service.MAX_PARTY_SIZE),
) -> SlotList:
    config = snapshot.config
    slots: list[str] = []
    if closure_service.is_type_offered(day, reservation_type, config.operating_days):
        slots = time_slot_service.bookable_slots(
            day,
            reservation_type,
            party_size,
            config.business_hours,
            config.closures,
        )
    return SlotList(
        date=day,
        reservation_type=reservation_type,
        party_size=party_size,
        slots=slots,
    )


@router.get(
    "/utilization",
    response_model=list[DayUtilization],
    summary="Seat utilization per day",
)
async def utilization_calendar(
    snapshot: Snapshot,
    start_date: date = Query(...),
    end_date: date = Query(...),
) -> list[DayUtilization]:
    try:
        entries = capacity_service.utilization_by_date(
            snapshot.reservations, snapshot.config.seat_pool, start_date, end_date
        )
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return [DayUtilization.model_validate(entry) for entry in entries]


@router.post(
    "/check", response_model=AvailabilityResult, summary="Check if a party fits"
)
async def check_availability(
    payload: AvailabilityRequest,
    snapshot: Snapshot,
    today: Annotated[date, Depends(deps.get_today)],
) -> AvailabilityResult:
    try:
        slot = time_slot_service.parse_slot(payload.time)
        result = capacity_service.check_availability(
            snapshot.reservations,
            snapshot.config,
            day=payload.date,
            slot=slot,
            party_size=payload.party_size,
            reservation_type=payload.reservation_type,
            today=today,
        )
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return AvailabilityResult.model_validate(result)
