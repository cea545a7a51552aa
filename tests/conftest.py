from __future__ import annotations

import random
from collections.abc import Callable
from datetime import datetime
from typing import Any

import pytest

from cartfleet.config import FleetConfig
from cartfleet.models.cart import Cart, CartStatus, CartType
from cartfleet.models.event import CartLine, Event, EventStatus, EventType
from cartfleet.state.store import FleetStore
from cartfleet.storage import MemoryStore

# Monday
FIXED_NOW = datetime(2026, 3, 2, 9, 0)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def storage() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def open_store(storage: MemoryStore) -> Callable[..., FleetStore]:
    """Open a seeded store over the shared in-memory storage."""

    def _open(**config_overrides: Any) -> FleetStore:
        config = FleetConfig(random_seed=7, **config_overrides)
        return FleetStore.open(config, storage=storage, clock=lambda: FIXED_NOW, rng=random.Random(7))

    return _open


@pytest.fixture
def store(open_store: Callable[..., FleetStore]) -> FleetStore:
    return open_store()


@pytest.fixture
def make_cart() -> Callable[..., Cart]:
    counter = iter(range(1, 10_000))

    def _make(cart_type: CartType = CartType.TWO_PASSENGER_GAS, **fields: Any) -> Cart:
        n = next(counter)
        values: dict[str, Any] = {
            "id": f"CART-T-{n}",
            "type": cart_type,
            "model": "Test Cart",
            "year": 2024,
            "status": CartStatus.AVAILABLE,
            "serial_number": f"T{n:05d}",
        }
        values.update(fields)
        return Cart(**values)

    return _make


@pytest.fixture
def make_event() -> Callable[..., Event]:
    counter = iter(range(1, 10_000))

    def _make(
        start: datetime,
        end: datetime,
        lines: dict[CartType, int] | None = None,
        *,
        event_type: EventType = EventType.RENTAL,
        status: EventStatus = EventStatus.ACTIVE,
        **fields: Any,
    ) -> Event:
        n = next(counter)
        values: dict[str, Any] = {
            "id": f"EVT-T-{n}",
            "title": f"Event {n}",
            "customer_id": "CUST-1",
            "customer_name": "Pat Doe",
            "type": event_type,
            "start_date": start,
            "end_date": end,
            "carts": [CartLine(type=t, quantity=q) for t, q in (lines or {}).items()],
            "status": status,
            "created_at": FIXED_NOW,
        }
        values.update(fields)
        return Event(**values)

    return _make


def rental_payload(
    lines: dict[str, int],
    *,
    status: str = "active",
    event_type: str = "rental",
    start: datetime = datetime(2026, 3, 2, 9, 0),
    end: datetime = datetime(2026, 3, 4, 17, 0),
) -> dict[str, Any]:
    """Event input in the camelCase shape a form would submit."""
    return {
        "title": "Club tournament",
        "customerId": "CUST-1",
        "customerName": "Pat Doe",
        "type": event_type,
        "startDate": start,
        "endDate": end,
        "carts": [{"type": cart_type, "quantity": quantity} for cart_type, quantity in lines.items()],
        "status": status,
        "total": 450.0,
    }


@pytest.fixture
def payload() -> Callable[..., dict[str, Any]]:
    return rental_payload
