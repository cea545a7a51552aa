from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import pytest

from cartfleet.models.cart import Cart, CartStatus, CartType
from cartfleet.models.event import CartLine, Event, EventStatus, EventType
from cartfleet.state.policy import (
    RELEASABLE_STATUSES,
    RESERVABLE_STATUSES,
    releases_on_delete,
    releases_on_update,
    reservation_status,
    reserves_on_create,
    reserves_on_update,
    select_carts,
)

START = datetime(2026, 3, 2, 9, 0)
END = datetime(2026, 3, 4, 17, 0)


def test_reservation_status_per_event_type() -> None:
    assert reservation_status(EventType.RENTAL) == CartStatus.RENTED
    assert reservation_status(EventType.SERVICE) == CartStatus.MAINTENANCE
    assert reservation_status(EventType.SALE) is None
    assert reservation_status(EventType.DELIVERY) is None
    assert reservation_status(EventType.PICKUP) is None


@pytest.mark.parametrize(
    ("event_type", "status", "expected"),
    [
        (EventType.RENTAL, EventStatus.ACTIVE, True),
        (EventType.RENTAL, EventStatus.PENDING, False),
        (EventType.RENTAL, EventStatus.COMPLETED, False),
        (EventType.SERVICE, EventStatus.PENDING, True),
        (EventType.SERVICE, EventStatus.ACTIVE, True),
        (EventType.SALE, EventStatus.ACTIVE, False),
        (EventType.DELIVERY, EventStatus.ACTIVE, False),
    ],
)
def test_reserves_on_create(
    make_event: Callable[..., Event], event_type: EventType, status: EventStatus, expected: bool
) -> None:
    event = make_event(START, END, {CartType.TWO_PASSENGER_GAS: 1}, event_type=event_type, status=status)
    assert reserves_on_create(event) is expected


def test_reserves_on_update_only_when_rental_becomes_active(make_event: Callable[..., Event]) -> None:
    pending = make_event(START, END, status=EventStatus.PENDING)
    active = make_event(START, END, status=EventStatus.ACTIVE)
    pending_service = make_event(START, END, event_type=EventType.SERVICE, status=EventStatus.PENDING)

    assert reserves_on_update(pending, EventStatus.ACTIVE)
    assert not reserves_on_update(active, EventStatus.ACTIVE)
    assert not reserves_on_update(pending, None)
    assert not reserves_on_update(pending, EventStatus.COMPLETED)
    assert not reserves_on_update(pending_service, EventStatus.ACTIVE)


def test_releases_on_update_only_from_open_to_closed(make_event: Callable[..., Event]) -> None:
    active = make_event(START, END, status=EventStatus.ACTIVE)
    completed = make_event(START, END, status=EventStatus.COMPLETED)

    assert releases_on_update(active, EventStatus.COMPLETED)
    assert releases_on_update(active, EventStatus.CANCELLED)
    assert not releases_on_update(active, EventStatus.PENDING)
    assert not releases_on_update(active, None)
    assert not releases_on_update(completed, EventStatus.CANCELLED)


def test_releases_on_delete(make_event: Callable[..., Event]) -> None:
    assert releases_on_delete(make_event(START, END, status=EventStatus.PENDING))
    assert releases_on_delete(make_event(START, END, status=EventStatus.ACTIVE))
    assert not releases_on_delete(make_event(START, END, status=EventStatus.COMPLETED))
    assert not releases_on_delete(make_event(START, END, status=EventStatus.CANCELLED))


class TestSelectCarts:
    @pytest.fixture
    def fleet(self, make_cart: Callable[..., Cart]) -> list[Cart]:
        return [
            make_cart(CartType.TWO_PASSENGER_GAS),
            make_cart(CartType.FOUR_PASSENGER_GAS),
            make_cart(CartType.TWO_PASSENGER_GAS, status=CartStatus.RENTED),
            make_cart(CartType.TWO_PASSENGER_GAS),
            make_cart(CartType.TWO_PASSENGER_GAS, status=CartStatus.MAINTENANCE),
        ]

    def test_first_matches_in_fleet_order(self, fleet: list[Cart]) -> None:
        lines = [CartLine(type=CartType.TWO_PASSENGER_GAS, quantity=2)]
        assert select_carts(fleet, lines, RESERVABLE_STATUSES) == ["CART-T-1", "CART-T-4"]

    def test_release_candidates_cover_rented_and_maintenance(self, fleet: list[Cart]) -> None:
        lines = [CartLine(type=CartType.TWO_PASSENGER_GAS, quantity=5)]
        assert select_carts(fleet, lines, RELEASABLE_STATUSES) == ["CART-T-3", "CART-T-5"]

    def test_short_supply_returns_fewer_ids(self, fleet: list[Cart]) -> None:
        lines = [CartLine(type=CartType.FOUR_PASSENGER_GAS, quantity=3)]
        assert select_carts(fleet, lines, RESERVABLE_STATUSES) == ["CART-T-2"]

    def test_lines_of_same_type_pick_distinct_carts(self, fleet: list[Cart]) -> None:
        lines = [
            CartLine(type=CartType.TWO_PASSENGER_GAS, quantity=1),
            CartLine(type=CartType.TWO_PASSENGER_GAS, quantity=1),
        ]
        assert select_carts(fleet, lines, RESERVABLE_STATUSES) == ["CART-T-1", "CART-T-4"]

    def test_zero_quantity_and_no_lines(self, fleet: list[Cart]) -> None:
        assert select_carts(fleet, [CartLine(type=CartType.TWO_PASSENGER_GAS, quantity=0)], RESERVABLE_STATUSES) == []
        assert select_carts(fleet, [], RESERVABLE_STATUSES) == []
