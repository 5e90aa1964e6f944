"""Restaurant configuration values.

Each model is immutable and carries the documented defaults, so a missing
configuration blob simply means "use ``Model()``".
"""

from __future__ import annotations

import enum
import datetime as dt
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Weekday = Annotated[int, Field(ge=0, le=6)]

ALL_WEEKDAYS: tuple[int, ...] = (0, 1, 2, 3, 4, 5, 6)


class ShiftName(str, enum.Enum):
    """Named service windows within a day."""

    LUNCH = "lunch"
    DINNER = "dinner"


class ShiftClosureType(str, enum.Enum):
    """Single-date overrides that remove a whole day or one shift."""

    FULL_DAY = "full_day"
    LUNCH_ONLY = "lunch_only"
    DINNER_ONLY = "dinner_only"


class _ConfigModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class SeatPool(_ConfigModel):
    """Seats available per reservation type. The pools are never shared."""

    omakase_capacity: int = Field(default=12, ge=0, le=200)
    dining_capacity: int = Field(default=40, ge=0, le=200)

    @property
    def total_capacity(self) -> int:
        return self.omakase_capacity + self.dining_capacity


class ShiftWindow(_ConfigModel):
    open_time: dt.time
    close_time: dt.time

    @model_validator(mode="after")
    def _check_order(self) -> "ShiftWindow":
        if self.close_time <= self.open_time:
            raise ValueError("close_time must be after open_time")
        return self


class BusinessHours(_ConfigModel):
    """Lunch and dinner windows plus the spacing between dining slots."""

    lunch: ShiftWindow = Field(
        default_factory=lambda: ShiftWindow(open_time=dt.time(12, 0), close_time=dt.time(15, 0))
    )
    dinner: ShiftWindow = Field(
        default_factory=lambda: ShiftWindow(open_time=dt.time(17, 0), close_time=dt.time(22, 0))
    )
    slot_duration: int = Field(default=30, gt=0, le=240)

    def window(self, shift: ShiftName) -> ShiftWindow:
        return self.lunch if shift == ShiftName.LUNCH else self.dinner


class Holiday(_ConfigModel):
    date: dt.date
    name: str = Field(min_length=1, max_length=120)
    closed: bool = True


class ShiftClosure(_ConfigModel):
    date: dt.date
    type: ShiftClosureType


class ClosureConfig(_ConfigModel):
    """Four additive closure rule sets; any single match closes a date."""

    closed_dates: tuple[dt.date, ...] = ()
    closed_weekdays: tuple[Weekday, ...] = ()
    holidays: tuple[Holiday, ...] = ()
    shift_closures: tuple[ShiftClosure, ...] = ()

    @field_validator("closed_dates", "closed_weekdays", mode="after")
    @classmethod
    def _unique_sorted(cls, value: tuple[Any, ...]) -> tuple[Any, ...]:
        return tuple(sorted(set(value)))

    @field_validator("shift_closures", mode="after")
    @classmethod
    def _one_closure_per_date(
        cls, value: tuple[ShiftClosure, ...]
    ) -> tuple[ShiftClosure, ...]:
        seen: set[dt.date] = set()
        for closure in value:
            if closure.date in seen:
                raise ValueError(
                    f"Only one shift closure is allowed per date ({closure.date})"
                )
            seen.add(closure.date)
        return tuple(sorted(value, key=lambda closure: closure.date))

    def shift_closure_on(self, day: dt.date) -> ShiftClosure | None:
        for closure in self.shift_closures:
            if closure.date == day:
                return closure
        return None


class OperatingDays(_ConfigModel):
    """Weekdays (0 = Sunday) on which each reservation type is offered."""

    omakase_days: tuple[Weekday, ...] = (4,)
    dining_days: tuple[Weekday, ...] = ALL_WEEKDAYS

    @field_validator("omakase_days", "dining_days", mode="after")
    @classmethod
    def _unique_sorted(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        return tuple(sorted(set(value)))

    @field_validator("dining_days", mode="after")
    @classmethod
    def _dining_not_empty(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if not value:
            raise ValueError("Dining must be available on at least one day")
        return value


class RestaurantConfig(_ConfigModel):
    """Every configuration value the availability engine needs."""

    seat_pool: SeatPool = Field(default_factory=SeatPool)
    business_hours: BusinessHours = Field(default_factory=BusinessHours)
    closures: ClosureConfig = Field(default_factory=ClosureConfig)
    operating_days: OperatingDays = Field(default_factory=OperatingDays)


class AutoConfirmation(BaseModel):
    """Whether new bookings of each type start out confirmed instead of pending."""

    auto_confirm_omakase: bool
    auto_confirm_dining: bool


class SettingsRead(BaseModel):
    """All configuration blobs together with where each one came from."""

    config: RestaurantConfig
    sources: dict[str, Literal["database", "default"]]
    auto_confirmation: AutoConfirmation


class SettingUpdate(BaseModel):
    key: str
    value: Any


class BulkSettingsUpdate(BaseModel):
    updates: list[SettingUpdate] = Field(min_length=1)


class SettingUpdateError(BaseModel):
    input: dict[str, Any]
    error: str


class BulkSettingsResult(BaseModel):
    applied: list[str]
    errors: list[SettingUpdateError]
    config: RestaurantConfig
