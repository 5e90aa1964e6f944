"""Schemas for the analytics document."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class Overview(BaseModel):
    total_reservations: int
    total_revenue_potential: float
    average_party_size: float
    capacity_utilization: float
    period_growth: float
    arpc: float


class DailyReservations(BaseModel):
    date: date
    count: int
    revenue: float


class WeeklyRevenue(BaseModel):
    week: str
    omakase: float
    dining: float


class MonthlyComparison(BaseModel):
    month: str
    reservations: int
    revenue: float


class Trends(BaseModel):
    daily_reservations: list[DailyReservations]
    weekly_revenue: list[WeeklyRevenue]
    monthly_comparison: list[MonthlyComparison]


class NewVsReturning(BaseModel):
    new: int
    returning: int


class CustomerInsights(BaseModel):
    new_vs_returning: NewVsReturning
    tier_distribution: dict[str, int]
    average_booking_window: float
    repeat_customer_rate: float


class PeakHour(BaseModel):
    hour: int
    count: int


class PeakDay(BaseModel):
    day: str
    count: int


class CapacityByDay(BaseModel):
    date: date
    omakase_utilization: float
    dining_utilization: float


class Operational(BaseModel):
    peak_hours: list[PeakHour]
    peak_days: list[PeakDay]
    cancellation_rate: float
    no_show_rate: float
    capacity_by_day: list[CapacityByDay]


class PartySizeRevenue(BaseModel):
    size: int
    count: int
    revenue: float


class RevenueBreakdown(BaseModel):
    by_type: dict[str, float]
    by_party_size: list[PartySizeRevenue]
    by_status: dict[str, float]


class CapacityRecommendation(BaseModel):
    date: date
    recommended_slots: int
    reason: str


class Forecasting(BaseModel):
    next_week_projection: int
    capacity_recommendations: list[CapacityRecommendation]


class AnalyticsData(BaseModel):
    """Dashboard roll-up for one timeframe."""

    overview: Overview
    trends: Trends
    customer_insights: CustomerInsights
    operational: Operational
    revenue_breakdown: RevenueBreakdown
    forecasting: Forecasting
