"""Reservation management endpoints."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from reservation_admin.api import deps
from reservation_admin.models.reservation import (
    Reservation,
    ReservationStatus,
    ReservationType,
)
from reservation_admin.schemas.reservation import (
    ReservationCreate,
    ReservationList,
    ReservationRead,
    ReservationUpdate,
)
from reservation_admin.services import capacity_service, reservation_service

router = APIRouter()


def _error_response(exc: ValueError) -> HTTPException:
    if isinstance(exc, capacity_service.CapacityExceededError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


async def _get_reservation_or_404(
    session: AsyncSession, reservation_id: uuid.UUID
) -> Reservation:
    reservation = await reservation_service.get_reservation(
        session, reservation_id=reservation_id
    )
    if reservation is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found"
        )
    return reservation


@router.get("", response_model=ReservationList, summary="List reservations")
async def list_reservations(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    reservation_type: ReservationType | None = Query(default=None),
    status_filter: ReservationStatus | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None, max_length=120),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=500),
) -> ReservationList:
    try:
        items, total = await reservation_service.list_reservations(
            session,
            start_date=start_date,
            end_date=end_date,
            reservation_type=reservation_type,
            status=status_filter,
            search=search,
            skip=skip,
            limit=limit,
        )
    except ValueError as exc:
        raise _error_response(exc) from exc
    return ReservationList(
        items=[ReservationRead.model_validate(item) for item in items],
        total=total,
        limit=limit,
        offset=skip,
    )


@router.post(
    "",
    response_model=ReservationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a reservation if seats remain",
)
async def create_reservation(
    payload: ReservationCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    today: Annotated[date, Depends(deps.get_today)],
) -> ReservationRead:
    try:
        reservation = await reservation_service.create_reservation(
            session,
            today=today,
            **payload.model_dump(),
        )
    except ValueError as exc:
        raise _error_response(exc) from exc
    return ReservationRead.model_validate(reservation)


@router.get(
    "/{reservation_id}", response_model=ReservationRead, summary="Get reservation"
)
async def get_reservation(
    reservation_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    reservation = await _get_reservation_or_404(session, reservation_id)
    return ReservationRead.model_validate(reservation)


@router.patch(
    "/{reservation_id}", response_model=ReservationRead, summary="Update reservation"
)
async def update_reservation(
    reservation_id: uuid.UUID,
    payload: ReservationUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    today: Annotated[date, Depends(deps.get_today)],
) -> ReservationRead:
    reservation = await _get_reservation_or_404(session, reservation_id)
    try:
        reservation = await reservation_service.update_reservation(
            session,
            reservation=reservation,
            today=today,
            **payload.model_dump(exclude_unset=True),
        )
    except ValueError as exc:
        raise _error_response(exc) from exc
    return ReservationRead.model_validate(reservation)


@router.delete(
    "/{reservation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete reservation",
)
async def delete_reservation(
    reservation_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> Response:
    reservation = await _get_reservation_or_404(session, reservation_id)
    await reservation_service.delete_reservation(session, reservation=reservation)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
