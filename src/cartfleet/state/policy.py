"""Cart status transition policy.

Events reference carts by type and quantity only, so the affected carts are
reconstructed at each transition by scanning the fleet for plausible
candidates.  This keeps per-type counts consistent with active commitments;
it does not track which physical cart an event holds.

This module contains *no* state; the store applies the decisions.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence

from cartfleet.models.cart import Cart, CartStatus
from cartfleet.models.event import CartLine, Event, EventStatus, EventType

RESERVABLE_STATUSES: frozenset[CartStatus] = frozenset({CartStatus.AVAILABLE})
RELEASABLE_STATUSES: frozenset[CartStatus] = frozenset({CartStatus.RENTED, CartStatus.MAINTENANCE})


def reservation_status(event_type: EventType) -> CartStatus | None:
    """Cart status an event of *event_type* puts its carts into."""
    mapping: dict[EventType, CartStatus] = {
        EventType.RENTAL: CartStatus.RENTED,
        EventType.SERVICE: CartStatus.MAINTENANCE,
    }
    return mapping.get(event_type)


def reserves_on_create(event: Event) -> bool:
    """Active rentals and every service take carts out of the available pool."""
    if event.type == EventType.SERVICE:
        return True
    return event.type == EventType.RENTAL and event.status == EventStatus.ACTIVE


def reserves_on_update(original: Event, new_status: EventStatus | None) -> bool:
    """A rental moving into ``active`` reserves its carts."""
    return (
        new_status == EventStatus.ACTIVE
        and original.status != EventStatus.ACTIVE
        and original.type == EventType.RENTAL
    )


def releases_on_update(original: Event, new_status: EventStatus | None) -> bool:
    """Closing an open event releases its carts."""
    return new_status is not None and new_status.is_closed and not original.status.is_closed


def releases_on_delete(event: Event) -> bool:
    return not event.status.is_closed


def select_carts(
    fleet: Sequence[Cart],
    lines: Iterable[CartLine],
    statuses: Collection[CartStatus],
) -> list[str]:
    """Pick cart ids for *lines*, first match in fleet order wins.

    For each line at most ``quantity`` carts of the line's type whose status
    is in *statuses* are picked.  A cart is never picked twice, so two lines
    of the same type draw distinct carts.  Short supply yields fewer ids.
    """
    picked: list[str] = []
    taken: set[str] = set()
    for line in lines:
        remaining = line.quantity
        if remaining <= 0:
            continue
        for cart in fleet:
            if remaining == 0:
                break
            if cart.id in taken or cart.type != line.type or cart.status not in statuses:
                continue
            picked.append(cart.id)
            taken.add(cart.id)
            remaining -= 1
    return picked
