"""Read-only queries over the collections.

Every function is pure: it scans the sequences it is given and returns a
fresh list or count.  Collections are small (hundreds of records), so
nothing is indexed or cached.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import TypeVar

from cartfleet._dates import as_datetime, end_of_day, start_of_day
from cartfleet.models._base import FleetBaseModel
from cartfleet.models.cart import Cart, CartStatus, CartType
from cartfleet.models.customer import Customer
from cartfleet.models.event import Event, EventStatus, EventType

TRecord = TypeVar("TRecord", bound=FleetBaseModel)


def find_by_id(records: Iterable[TRecord], record_id: str) -> TRecord | None:
    for record in records:
        if record.id == record_id:
            return record
    return None


def carts_by_type(fleet: Iterable[Cart], cart_type: CartType) -> list[Cart]:
    return [cart for cart in fleet if cart.type == cart_type]


def inventory_by_type(fleet: Iterable[Cart]) -> dict[CartType, int]:
    """Number of carts of every type, zero for types with no carts."""
    counts = {cart_type: 0 for cart_type in CartType}
    for cart in fleet:
        counts[cart.type] += 1
    return counts


def booked_quantity(events: Iterable[Event], cart_type: CartType, on: date | datetime) -> int:
    """Carts of *cart_type* committed by active rentals whose span contains *on*."""
    moment = as_datetime(on)
    return sum(
        event.quantity_for(cart_type)
        for event in events
        if event.type == EventType.RENTAL
        and event.status == EventStatus.ACTIVE
        and event.start_date <= moment <= event.end_date
    )


def available_carts_by_type(
    fleet: Sequence[Cart],
    events: Sequence[Event],
    cart_type: CartType,
    on: date | datetime | None = None,
) -> int:
    """Availability of *cart_type*.

    Without *on*: carts of the type whose status is ``available``.

    With *on*: inventory of the type minus quantities booked by active
    rentals overlapping *on*.  Cart status is ignored, so this can disagree
    with the status-based count, and it is not clamped at zero.
    """
    if on is None:
        return sum(1 for cart in fleet if cart.type == cart_type and cart.status == CartStatus.AVAILABLE)
    total = sum(1 for cart in fleet if cart.type == cart_type)
    return total - booked_quantity(events, cart_type, on)


def events_by_date(events: Iterable[Event], day: date | datetime) -> list[Event]:
    """Events starting on the local calendar day of *day*."""
    day_start = start_of_day(as_datetime(day))
    day_end = end_of_day(day_start)
    return [event for event in events if day_start <= event.start_date <= day_end]


def overlaps(event: Event, start: datetime, end: datetime) -> bool:
    """Inclusive overlap: starts in range, ends in range, or spans the range."""
    starts_in_range = start <= event.start_date <= end
    ends_in_range = start <= event.end_date <= end
    spans_range = event.start_date <= start and event.end_date >= end
    return starts_in_range or ends_in_range or spans_range


def events_by_date_range(
    events: Iterable[Event],
    start: date | datetime,
    end: date | datetime,
) -> list[Event]:
    range_start = as_datetime(start)
    range_end = as_datetime(end)
    return [event for event in events if overlaps(event, range_start, range_end)]


def events_by_customer(events: Iterable[Event], customer_id: str) -> list[Event]:
    return [event for event in events if event.customer_id == customer_id]


def customer_display_name(event: Event, customers: Iterable[Customer]) -> str:
    """Name of the event's customer, or the stored name if the customer is gone."""
    customer = find_by_id(customers, event.customer_id)
    if customer is None:
        return event.customer_name
    return customer.full_name
