"""Customer CRM endpoints."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from reservation_admin.api import deps
from reservation_admin.core.config import Settings
from reservation_admin.schemas.customer import CustomerList, CustomerProfile
from reservation_admin.services import customer_service, snapshot_service

router = APIRouter(prefix="/customers")

Snapshot = Annotated[snapshot_service.Snapshot, Depends(deps.get_snapshot)]

SortField = Literal[
    "last_visit_date", "total_visits", "total_revenue_potential", "customer_name"
]


def _to_csv_stream(rows: list[list[str]]) -> Iterable[str]:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    for row in rows:
        buffer.seek(0)
        buffer.truncate(0)
        writer.writerow(row)
        yield buffer.getvalue()


@router.get("", response_model=CustomerList, summary="Search customer profiles")
async def list_customers(
    snapshot: Snapshot,
    search: str | None = Query(default=None, max_length=120),
    tier: customer_service.CustomerTier | None = Query(default=None),
    reservation_type: Literal["omakase", "dining", "both"] | None = Query(
        default=None, alias="type"
    ),
    sort_by: SortField = Query(default="last_visit_date"),
    sort_order: Literal["asc", "desc"] = Query(default="desc"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> CustomerList:
    profiles = customer_service.build_profiles(snapshot.reservations)
    try:
        result = customer_service.search_customers(
            profiles,
            search=search,
            tier=tier,
            favorite=reservation_type,
            sort_by=sort_by,
            sort_order=sort_order,
            limit=limit,
            offset=offset,
            total_reservations=len(snapshot.reservations),
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return CustomerList.model_validate(result)


@router.get("/export.csv", summary="Export customer profiles as CSV")
async def export_customers(
    snapshot: Snapshot,
    settings: Annotated[Settings, Depends(deps.get_app_settings)],
) -> StreamingResponse:
    profiles = customer_service.build_profiles(snapshot.reservations)
    rows = customer_service.export_rows(profiles, redact=settings.export_redact)
    return StreamingResponse(
        _to_csv_stream(rows),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="customers.csv"'},
    )


@router.get(
    "/{customer_id}", response_model=CustomerProfile, summary="Get one customer"
)
async def get_customer(customer_id: str, snapshot: Snapshot) -> CustomerProfile:
    if "@" in customer_id:
        key = customer_service.customer_key(customer_id, None)
    else:
        key = customer_service.customer_key(None, customer_id)
    if key is not None:
        for profile in customer_service.build_profiles(snapshot.reservations):
            if profile["id"] == key.value:
                return CustomerProfile.model_validate(profile)
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
