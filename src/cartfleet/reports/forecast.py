"""Maintenance, fleet size and availability projections."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from cartfleet._dates import add_months, add_years, as_datetime, days_between
from cartfleet.config import ForecastPolicy, MaintenancePolicy
from cartfleet.models.cart import Cart, CartType
from cartfleet.models.event import Event, EventStatus, EventType
from cartfleet.queries import inventory_by_type, overlaps


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


# ------------------------------------------------------------------
# Maintenance
# ------------------------------------------------------------------


class MaintenanceProjection(BaseModel):
    """Projected next service of one cart."""

    model_config = ConfigDict(frozen=True)

    cart: Cart
    next_service: datetime
    is_due_soon: bool
    is_overdue: bool

    @property
    def label(self) -> str:
        if self.is_overdue:
            return "Overdue"
        if self.is_due_soon:
            return "Due Soon"
        return "Scheduled"


def next_service_date(cart: Cart, today: datetime, policy: MaintenancePolicy) -> datetime:
    """Earlier of the calendar-driven and the usage-driven service date.

    Carts that were never serviced are treated as serviced one year ago.
    """
    last_service = cart.last_service or add_years(today, -1)
    by_date = add_months(last_service, policy.service_interval_months)
    rentals_left = policy.rentals_per_service - (cart.rental_count % policy.rentals_per_service)
    by_rentals = add_months(today, math.ceil(rentals_left / policy.rentals_per_month))
    return min(by_date, by_rentals)


def project_maintenance(
    fleet: Sequence[Cart],
    *,
    today: date | datetime,
    years: int = 2,
    policy: MaintenancePolicy | None = None,
) -> list[MaintenanceProjection]:
    """Carts whose next service falls within *years* of *today*, soonest first."""
    policy = policy or MaintenancePolicy()
    now = as_datetime(today)
    horizon = add_years(now, years)
    due_soon_before = add_months(now, 1)

    projections: list[MaintenanceProjection] = []
    for cart in fleet:
        next_service = next_service_date(cart, now, policy)
        if next_service >= horizon:
            continue
        projections.append(
            MaintenanceProjection(
                cart=cart,
                next_service=next_service,
                is_due_soon=next_service < due_soon_before,
                is_overdue=next_service < now,
            )
        )
    projections.sort(key=lambda projection: projection.next_service)
    return projections


# ------------------------------------------------------------------
# Fleet size
# ------------------------------------------------------------------


class FleetProjection(BaseModel):
    """Projected totals and availability per cart type for one year."""

    model_config = ConfigDict(frozen=True)

    year: int
    totals: dict[CartType, int]
    available: dict[CartType, int]


def project_fleet(
    fleet: Sequence[Cart],
    events: Sequence[Event],
    *,
    start_year: int,
    years: int = 5,
    policy: ForecastPolicy | None = None,
) -> list[FleetProjection]:
    """Yearly projection of fleet size against rental bookings.

    Fleet size grows by ``growth_rate - retirement_rate`` of today's count
    per year.  Demand for a type is the number of rentals (any status)
    overlapping the year that include the type.
    """
    policy = policy or ForecastPolicy()
    counts = inventory_by_type(fleet)
    rentals = [event for event in events if event.type == EventType.RENTAL]

    projections: list[FleetProjection] = []
    for offset in range(years):
        year = start_year + offset
        year_start = datetime(year, 1, 1)
        year_end = datetime(year, 12, 31, 23, 59, 59, 999999)
        in_year = [event for event in rentals if overlaps(event, year_start, year_end)]

        totals: dict[CartType, int] = {}
        available: dict[CartType, int] = {}
        for cart_type, count in counts.items():
            factor = 1 + policy.growth_rate * offset - policy.retirement_rate * offset
            total = _round_half_up(count * factor)
            bookings = sum(1 for event in in_year if event.includes_type(cart_type))
            totals[cart_type] = total
            available[cart_type] = max(0, total - bookings)
        projections.append(FleetProjection(year=year, totals=totals, available=available))
    return projections


# ------------------------------------------------------------------
# Availability over time
# ------------------------------------------------------------------


class AvailabilityPoint(BaseModel):
    """Projected availability per cart type on one day."""

    model_config = ConfigDict(frozen=True)

    day: datetime
    available: dict[CartType, int]
    totals: dict[CartType, int]

    def percentage(self, cart_type: CartType) -> float:
        total = self.totals.get(cart_type, 0)
        if total <= 0:
            return 0.0
        return 100.0 * self.available.get(cart_type, 0) / total


def availability_series(
    fleet: Sequence[Cart],
    events: Sequence[Event],
    start: date | datetime,
    end: date | datetime,
    totals: Mapping[CartType, int] | None = None,
) -> list[AvailabilityPoint]:
    """Daily availability from *start* to *end* inclusive.

    Each day is sampled at local midnight.  Active *and* pending rentals
    whose span contains that instant count as booked; results are clamped
    at zero.  *totals* defaults to the current fleet size per type.
    """
    inventory = dict(totals) if totals is not None else inventory_by_type(fleet)
    rentals = [
        event
        for event in events
        if event.type == EventType.RENTAL and event.status in (EventStatus.ACTIVE, EventStatus.PENDING)
    ]

    points: list[AvailabilityPoint] = []
    for day in days_between(as_datetime(start), as_datetime(end)):
        on_day = [event for event in rentals if event.start_date <= day <= event.end_date]
        available = {
            cart_type: max(0, total - sum(event.quantity_for(cart_type) for event in on_day))
            for cart_type, total in inventory.items()
        }
        points.append(AvailabilityPoint(day=day, available=available, totals=dict(inventory)))
    return points
