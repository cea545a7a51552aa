"""Scheduled event model (rentals, services, sales, deliveries, pickups)."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cartfleet.models._base import FleetBaseModel, FleetEnum, LocalDateTime
from cartfleet.models.cart import CartType

_logger = logging.getLogger(__name__)


class EventType(FleetEnum):
    RENTAL = "rental"
    SERVICE = "service"
    SALE = "sale"
    DELIVERY = "delivery"
    PICKUP = "pickup"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class EventStatus(FleetEnum):
    """Lifecycle status of an event."""

    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_closed(self) -> bool:
        """Whether the event no longer holds carts."""
        return self in (EventStatus.COMPLETED, EventStatus.CANCELLED)


# Cart statuses older snapshots stored on events. A rented cart means the
# rental is under way; the others never committed carts.
_CART_STATUS_TO_EVENT_STATUS: dict[str, EventStatus] = {
    "rented": EventStatus.ACTIVE,
    "available": EventStatus.PENDING,
    "maintenance": EventStatus.PENDING,
}


class Mechanic(FleetEnum):
    KEN = "Ken"
    BRANDON = "Brandon"
    BEN = "Ben"
    ANYONE = "Anyone"


class CartLine(BaseModel):
    """A cart requirement: *quantity* carts of *type*.

    Lines reference capacity only, never specific cart ids.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: CartType
    quantity: int = Field(default=0, ge=0)


class Event(FleetBaseModel):
    """A scheduled occurrence tied to a customer and a set of cart lines.

    ``end_date >= start_date`` is expected but not enforced.
    """

    title: str
    customer_id: str = ""
    customer_name: str = ""
    """Customer name at scheduling time, used when the customer is gone."""
    type: EventType
    start_date: LocalDateTime
    end_date: LocalDateTime
    carts: list[CartLine] = Field(default_factory=list)
    status: EventStatus = EventStatus.PENDING
    total: float = 0.0
    notes: str | None = None
    assigned_to: Mechanic | None = None
    scheduled_by: str | None = None
    created_at: LocalDateTime

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_cart_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            mapped = _CART_STATUS_TO_EVENT_STATUS.get(value.strip().lower())
            if mapped is not None:
                _logger.warning("Event status %r is a cart status; treating event as %s", value, mapped.value)
                return mapped
        return value

    def quantity_for(self, cart_type: CartType) -> int:
        """Quantity of the first line for *cart_type*, ``0`` if none."""
        for line in self.carts:
            if line.type == cart_type:
                return line.quantity
        return 0

    def includes_type(self, cart_type: CartType) -> bool:
        return any(line.type == cart_type for line in self.carts)
