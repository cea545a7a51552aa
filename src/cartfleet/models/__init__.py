"""Record models for customers, carts and events."""

from cartfleet.models._base import FleetBaseModel, FleetEnum, LocalDateTime, apply_changes, generate_id
from cartfleet.models.cart import Cart, CartStatus, CartType
from cartfleet.models.customer import Customer
from cartfleet.models.event import CartLine, Event, EventStatus, EventType, Mechanic
from cartfleet.models.preferences import ThemePreference

__all__ = [
    "Cart",
    "CartLine",
    "CartStatus",
    "CartType",
    "Customer",
    "Event",
    "EventStatus",
    "EventType",
    "FleetBaseModel",
    "FleetEnum",
    "LocalDateTime",
    "Mechanic",
    "ThemePreference",
    "apply_changes",
    "generate_id",
]
