"""Restaurant-local calendar helpers."""

from __future__ import annotations

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:  # pragma: no cover - depends on system tz database
        return ZoneInfo("UTC")


def today_in(timezone_name: str, now: datetime | None = None) -> date:
    """Current calendar date at the restaurant."""
    current = now or datetime.now(UTC)
    return current.astimezone(resolve_timezone(timezone_name)).date()
