"""Derived views: dashboard counts, forecasts and calendar buckets."""

from cartfleet.reports.calendar_views import events_on_day, month_days, week_days, year_overview
from cartfleet.reports.dashboard import DashboardStats, compute_dashboard_stats, deliveries_for_day, recent_rentals
from cartfleet.reports.forecast import (
    AvailabilityPoint,
    FleetProjection,
    MaintenanceProjection,
    availability_series,
    next_service_date,
    project_fleet,
    project_maintenance,
)

__all__ = [
    "AvailabilityPoint",
    "DashboardStats",
    "FleetProjection",
    "MaintenanceProjection",
    "availability_series",
    "compute_dashboard_stats",
    "deliveries_for_day",
    "events_on_day",
    "month_days",
    "next_service_date",
    "project_fleet",
    "project_maintenance",
    "recent_rentals",
    "week_days",
    "year_overview",
]
