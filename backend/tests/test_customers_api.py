"""Customer CRM endpoint tests."""
from __future__ import annotations

import csv
import io
from datetime import UTC, date, datetime, time

import pytest
from httpx import AsyncClient

from reservation_admin.db.session import get_sessionmaker
from reservation_admin.models import (
    DiningReservation,
    OmakaseReservation,
    ReservationStatus,
    ReservationType,
)

pytestmark = pytest.mark.asyncio


async def _seed(db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        for index, day in enumerate((date(2026, 2, 5), date(2026, 2, 12), date(2026, 3, 5))):
            session.add(
                OmakaseReservation(
                    reservation_type=ReservationType.OMAKASE,
                    reservation_date=day,
                    reservation_time=time(17, 0),
                    party_size=2,
                    status=ReservationStatus.COMPLETED,
                    customer_name="Ana Lopez",
                    customer_email="Ana@Example.com" if index == 0 else "ana@example.com",
                    confirmation_code=f"ANA{index:05d}",
                    created_at=datetime(2026, 1, index + 1, tzinfo=UTC),
                )
            )
        session.add(
            DiningReservation(
                reservation_type=ReservationType.DINING,
                reservation_date=date(2026, 3, 10),
                reservation_time=time(18, 0),
                party_size=4,
                status=ReservationStatus.CONFIRMED,
                customer_name="Bo Chen",
                customer_phone="319-555-0101",
                confirmation_code="BOC00001",
                duration_minutes=60,
            )
        )
        await session.commit()


async def test_list_customers_groups_by_identity(client: AsyncClient, db_url: str) -> None:
    await _seed(db_url)

    response = await client.get("/api/v1/customers")
    assert response.status_code == 200
    body = response.json()

    assert body["pagination"] == {"total": 2, "limit": 100, "offset": 0, "has_more": False}
    assert body["summary"]["total_reservations"] == 4
    assert body["summary"]["repeat_customer_rate"] == 50.0
    first, second = body["customers"]
    assert first["id"] == "319-555-0101"
    assert second["id"] == "ana@example.com"
    assert second["total_visits"] == 3
    assert second["favorite_reservation_type"] == "omakase"


async def test_list_customers_filters_by_tier_and_type(
    client: AsyncClient, db_url: str
) -> None:
    await _seed(db_url)

    response = await client.get(
        "/api/v1/customers", params={"type": "dining", "sort_by": "customer_name"}
    )
    assert response.status_code == 200
    customers = response.json()["customers"]
    assert [customer["customer_name"] for customer in customers] == ["Bo Chen"]


async def test_get_customer_by_email_and_phone(client: AsyncClient, db_url: str) -> None:
    await _seed(db_url)

    by_email = await client.get("/api/v1/customers/ANA@example.com")
    assert by_email.status_code == 200
    assert by_email.json()["total_visits"] == 3

    by_phone = await client.get("/api/v1/customers/319-555-0101")
    assert by_phone.status_code == 200
    assert by_phone.json()["customer_name"] == "Bo Chen"

    missing = await client.get("/api/v1/customers/nobody@example.com")
    assert missing.status_code == 404


async def test_export_masks_contact_details(client: AsyncClient, db_url: str) -> None:
    await _seed(db_url)

    response = await client.get("/api/v1/customers/export.csv")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")

    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[0][0] == "customer_id"
    assert len(rows) == 3
    exported = {row[1]: row for row in rows[1:]}
    assert exported["Ana Lopez"][2] == "a***@example.com"
    assert exported["Bo Chen"][3] == "***-***-0101"
    assert "ana@example.com" not in response.text
