"""Dashboard summaries."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from cartfleet._constants import RECENT_RENTALS_LIMIT
from cartfleet._dates import as_datetime, start_of_day
from cartfleet.models.cart import Cart, CartStatus
from cartfleet.models.event import Event, EventStatus, EventType


class DashboardStats(BaseModel):
    """Headline counts for the dashboard."""

    model_config = ConfigDict(frozen=True)

    active_rentals: int
    available_carts: int
    available_gas_carts: int
    available_electric_carts: int
    pending_deliveries: int
    """Pending deliveries plus pending rentals (rentals are delivered too)."""
    pending_rental_deliveries: int
    pending_sale_deliveries: int
    maintenance_alerts: int


def _count(events: Iterable[Event], event_type: EventType, status: EventStatus) -> int:
    return sum(1 for event in events if event.type == event_type and event.status == status)


def compute_dashboard_stats(fleet: Sequence[Cart], events: Sequence[Event]) -> DashboardStats:
    available = [cart for cart in fleet if cart.status == CartStatus.AVAILABLE]
    pending_rentals = _count(events, EventType.RENTAL, EventStatus.PENDING)
    return DashboardStats(
        active_rentals=_count(events, EventType.RENTAL, EventStatus.ACTIVE),
        available_carts=len(available),
        available_gas_carts=sum(1 for cart in available if cart.type.is_gas),
        available_electric_carts=sum(1 for cart in available if cart.type.is_electric),
        pending_deliveries=_count(events, EventType.DELIVERY, EventStatus.PENDING) + pending_rentals,
        pending_rental_deliveries=pending_rentals,
        pending_sale_deliveries=_count(events, EventType.SALE, EventStatus.PENDING),
        maintenance_alerts=sum(1 for cart in fleet if cart.status == CartStatus.MAINTENANCE),
    )


def recent_rentals(events: Iterable[Event], limit: int = RECENT_RENTALS_LIMIT) -> list[Event]:
    """Most recently created rentals, newest first."""
    rentals = [event for event in events if event.type == EventType.RENTAL]
    rentals.sort(key=lambda event: event.created_at, reverse=True)
    return rentals[:limit]


def deliveries_for_day(events: Iterable[Event], day: date | datetime) -> list[Event]:
    """Open deliveries and pickups starting on *day*, earliest first."""
    target = start_of_day(as_datetime(day))
    matches = [
        event
        for event in events
        if event.type in (EventType.DELIVERY, EventType.PICKUP)
        and start_of_day(event.start_date) == target
        and event.status in (EventStatus.PENDING, EventStatus.ACTIVE)
    ]
    matches.sort(key=lambda event: event.start_date)
    return matches
