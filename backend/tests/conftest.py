"""Test fixtures for the reservation admin backend."""
from __future__ import annotations

import os
import uuid
from collections.abc import AsyncIterator, Callable
from datetime import UTC, date, datetime, time

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("RESTAURANT_TIMEZONE", "UTC")

from reservation_admin.api import deps
from reservation_admin.core.config import get_settings
from reservation_admin.db.base import Base
from reservation_admin.db.session import dispose_engine
from reservation_admin.main import app
from reservation_admin.models import (
    RESERVATION_CLASSES,
    DiningReservation,
    Reservation,
    ReservationStatus,
    ReservationType,
)

# A Thursday, the default omakase night.
TODAY = date(2026, 3, 12)


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def client(reset_database: None) -> AsyncIterator[AsyncClient]:
    """Yield an API client whose notion of "today" is pinned to ``TODAY``."""
    app.dependency_overrides[deps.get_today] = lambda: TODAY
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as http:
            yield http
    finally:
        app.dependency_overrides.pop(deps.get_today, None)


@pytest.fixture()
def make_reservation() -> Callable[..., Reservation]:
    """Build unsaved reservations with sensible defaults."""

    def _make(
        reservation_type: ReservationType = ReservationType.OMAKASE,
        reservation_date: date = TODAY,
        reservation_time: time = time(17, 0),
        party_size: int = 2,
        status: ReservationStatus = ReservationStatus.CONFIRMED,
        customer_email: str | None = None,
        customer_phone: str | None = None,
        customer_name: str = "Guest",
        created_at: datetime | None = None,
    ) -> Reservation:
        reservation = RESERVATION_CLASSES[reservation_type](
            id=uuid.uuid4(),
            reservation_type=reservation_type,
            reservation_date=reservation_date,
            reservation_time=reservation_time,
            party_size=party_size,
            status=status,
            customer_name=customer_name,
            customer_email=customer_email,
            customer_phone=customer_phone,
            confirmation_code=uuid.uuid4().hex[:8].upper(),
            created_at=created_at or datetime(2026, 1, 1, tzinfo=UTC),
        )
        if reservation_type == ReservationType.DINING:
            reservation.duration_minutes = DiningReservation.duration_for(party_size)
        return reservation

    return _make
