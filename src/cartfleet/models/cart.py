"""Cart (fleet unit) model."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import Field, field_validator

from cartfleet.models._base import FleetBaseModel, FleetEnum, LocalDateTime

_logger = logging.getLogger(__name__)


class CartType(FleetEnum):
    """Passenger/power configuration of a cart."""

    TWO_PASSENGER_GAS = "2-Passenger Gas"
    FOUR_PASSENGER_GAS = "4-Passenger Gas"
    FOUR_PASSENGER_ELECTRIC = "4-Passenger Electric"
    SIX_PASSENGER_GAS = "6-Passenger Gas"
    SIX_PASSENGER_ELECTRIC = "6-Passenger Electric"
    ELECTRIC_AMBULANCE = "Electric Ambulance"

    @property
    def is_electric(self) -> bool:
        return "Electric" in self.value

    @property
    def is_gas(self) -> bool:
        # Types that name neither power source count as gas.
        return "Gas" in self.value or not self.is_electric


class CartStatus(FleetEnum):
    """Operational status of a single cart."""

    AVAILABLE = "available"
    RENTED = "rented"
    MAINTENANCE = "maintenance"


# Event statuses older snapshots stored on carts.
_LEGACY_CART_STATUSES = frozenset({"pending", "completed", "cancelled", "active"})


class Cart(FleetBaseModel):
    """One physical cart in the fleet."""

    type: CartType
    model: str = ""
    year: int
    status: CartStatus = CartStatus.AVAILABLE
    rental_count: int = Field(default=0, ge=0)
    """Number of rentals this cart has served."""
    last_service: LocalDateTime | None = None
    next_service: LocalDateTime | None = None
    condition: str = ""
    notes: str | None = None
    serial_number: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_legacy_status(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lower() in _LEGACY_CART_STATUSES:
            _logger.warning("Cart status %r is an event status; treating cart as available", value)
            return CartStatus.AVAILABLE
        return value
