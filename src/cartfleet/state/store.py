"""In-memory fleet state store.

This is the only component allowed to mutate customers, carts and events.
Every mutation runs to completion synchronously: the collection is updated,
cart statuses are reconciled with the event lifecycle, the touched
collections are written to the key-value store (one key each, no
cross-collection transaction) and subscribers are notified.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any

from cartfleet import queries
from cartfleet._constants import CART_ID_PREFIX, CUSTOMER_ID_PREFIX, EVENT_ID_PREFIX
from cartfleet._redact import redact_for_log
from cartfleet.config import FleetConfig
from cartfleet.exceptions import StorageError
from cartfleet.models._base import apply_changes, generate_id
from cartfleet.models.cart import Cart, CartStatus, CartType
from cartfleet.models.customer import Customer
from cartfleet.models.event import Event, EventStatus
from cartfleet.models.preferences import ThemePreference
from cartfleet.state.events import ChangeEvent, ChangeKind, Collection
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
from cartfleet.state.seed import build_default_fleet
from cartfleet.storage import JsonFileStore, KeyValueStore, LoadResult, MemoryStore, encode_collection, read_snapshot

_logger = logging.getLogger(__name__)

Listener = Callable[[ChangeEvent], None]

_SERVER_ASSIGNED_KEYS = frozenset({"id", "created_at", "createdAt"})

_STATUS_MESSAGES: dict[EventStatus, str] = {
    EventStatus.ACTIVE: "activated",
    EventStatus.PENDING: "marked as pending",
    EventStatus.COMPLETED: "completed",
    EventStatus.CANCELLED: "cancelled",
}


def _now() -> datetime:
    return datetime.now()


def _without_assigned(data: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if key not in _SERVER_ASSIGNED_KEYS}


def _index_of(records: list[Any], record_id: str) -> int | None:
    for index, record in enumerate(records):
        if record.id == record_id:
            return index
    return None


class FleetStore:
    """Owner of the customer, fleet and event collections.

    Collections are exposed as tuples of frozen records; all changes go
    through the mutation methods.

    Usage::

        store = FleetStore.open(FleetConfig.from_env())
        rental = store.add_event({...})
        store.get_available_carts_by_type(CartType.FOUR_PASSENGER_GAS)
    """

    def __init__(
        self,
        storage: KeyValueStore | None = None,
        *,
        config: FleetConfig | None = None,
        clock: Callable[[], datetime] = _now,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config or FleetConfig()
        self._storage: KeyValueStore = storage if storage is not None else MemoryStore()
        self._clock = clock
        self._rng = rng if rng is not None else random.Random(self._config.random_seed)
        self._customers: list[Customer] = []
        self._fleet: list[Cart] = []
        self._events: list[Event] = []
        self._theme = ThemePreference.LIGHT
        self._listeners: list[Listener] = []

    @classmethod
    def open(
        cls,
        config: FleetConfig | None = None,
        *,
        storage: KeyValueStore | None = None,
        clock: Callable[[], datetime] = _now,
        rng: random.Random | None = None,
    ) -> FleetStore:
        """Create a store, load persisted state and seed an empty fleet.

        Without an explicit *storage*, ``config.store_path`` selects a
        :class:`JsonFileStore`; otherwise state lives in memory.
        """
        config = config or FleetConfig.from_env()
        if storage is None:
            storage = JsonFileStore(config.store_path) if config.store_path else MemoryStore()
        store = cls(storage, config=config, clock=clock, rng=rng)
        store.load()
        if config.seed_fleet:
            store.seed_fleet_if_empty()
        return store

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    @property
    def config(self) -> FleetConfig:
        return self._config

    @property
    def customers(self) -> tuple[Customer, ...]:
        return tuple(self._customers)

    @property
    def fleet(self) -> tuple[Cart, ...]:
        return tuple(self._fleet)

    @property
    def events(self) -> tuple[Event, ...]:
        return tuple(self._events)

    @property
    def theme(self) -> ThemePreference:
        return self._theme

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for change events; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, change: ChangeEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                _logger.warning("Change listener %r failed", listener, exc_info=True)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _key(self, collection: Collection) -> str:
        return self._config.storage_key(collection.value)

    def _persist(self, *collections: Collection) -> None:
        for collection in collections:
            key = self._key(collection)
            if collection is Collection.THEME:
                payload = self._theme.value
            else:
                records: list[Any] = {
                    Collection.CUSTOMERS: self._customers,
                    Collection.FLEET: self._fleet,
                    Collection.EVENTS: self._events,
                }[collection]
                payload = encode_collection(records)
            try:
                self._storage.set(key, payload)
            except StorageError:
                _logger.error("Failed to persist %s; in-memory state kept", key, exc_info=True)

    def _persist_event_change(self, cart_ids: tuple[str, ...]) -> None:
        if cart_ids:
            self._persist(Collection.EVENTS, Collection.FLEET)
        else:
            self._persist(Collection.EVENTS)

    def load(self) -> dict[Collection, LoadResult[Any]]:
        """Replace the collections with the persisted snapshots.

        Each key is loaded independently; a snapshot that fails to parse
        leaves its collection empty and does not affect the others.
        """
        customers = read_snapshot(self._storage, self._key(Collection.CUSTOMERS), Customer)
        fleet = read_snapshot(self._storage, self._key(Collection.FLEET), Cart)
        events = read_snapshot(self._storage, self._key(Collection.EVENTS), Event)
        self._customers = list(customers.records)
        self._fleet = list(fleet.records)
        self._events = list(events.records)

        try:
            stored_theme = self._storage.get(self._key(Collection.THEME))
        except StorageError:
            _logger.warning("Ignoring stored theme", exc_info=True)
            stored_theme = None
        if stored_theme in (ThemePreference.LIGHT.value, ThemePreference.DARK.value):
            self._theme = ThemePreference(stored_theme)

        _logger.info(
            "Loaded %d customers, %d carts, %d events",
            len(self._customers),
            len(self._fleet),
            len(self._events),
        )
        results: dict[Collection, LoadResult[Any]] = {
            Collection.CUSTOMERS: customers,
            Collection.FLEET: fleet,
            Collection.EVENTS: events,
        }
        for collection, result in results.items():
            self._notify(
                ChangeEvent(
                    collection=collection,
                    kind=ChangeKind.LOADED,
                    description=result.reason or f"{len(result.records)} records loaded",
                )
            )
        return results

    def seed_fleet_if_empty(self) -> int:
        """Create the default fleet when no carts exist; returns the number created."""
        if self._fleet:
            return 0
        self._fleet = build_default_fleet(self._rng, self._clock())
        _logger.info("Seeded default fleet with %d carts", len(self._fleet))
        self._persist(Collection.FLEET)
        self._notify(
            ChangeEvent(
                collection=Collection.FLEET,
                kind=ChangeKind.SEEDED,
                title="Fleet Initialized",
                description=f"{len(self._fleet)} carts have been added to your fleet.",
            )
        )
        return len(self._fleet)

    def set_theme(self, theme: ThemePreference | str) -> None:
        self._theme = ThemePreference(theme)
        self._persist(Collection.THEME)
        self._notify(
            ChangeEvent(
                collection=Collection.THEME,
                kind=ChangeKind.UPDATED,
                title="Theme Updated",
                description=f"Switched to the {self._theme.value} theme.",
            )
        )

    def _new_id(self, prefix: str, records: list[Any]) -> str:
        return generate_id(
            prefix,
            (record.id for record in records),
            now_ms=lambda: int(self._clock().timestamp() * 1000),
        )

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def add_customer(self, data: Mapping[str, Any]) -> Customer:
        """Create a customer with a generated id and creation timestamp."""
        customer = Customer.model_validate(
            {
                **_without_assigned(data),
                "id": self._new_id(CUSTOMER_ID_PREFIX, self._customers),
                "created_at": self._clock(),
            }
        )
        self._customers.append(customer)
        _logger.debug("Added customer %s", redact_for_log(customer))
        self._persist(Collection.CUSTOMERS)
        self._notify(
            ChangeEvent(
                collection=Collection.CUSTOMERS,
                kind=ChangeKind.CREATED,
                record_id=customer.id,
                title="Customer Added",
                description=f"{customer.full_name} has been added to your customers.",
            )
        )
        return customer

    def update_customer(self, customer_id: str, changes: Mapping[str, Any]) -> Customer | None:
        index = _index_of(self._customers, customer_id)
        if index is None:
            _logger.debug("update_customer: %s not found", customer_id)
            return None
        original = self._customers[index]
        updated = apply_changes(original, changes)
        self._customers[index] = updated
        _logger.debug("Updated customer %s with %s", customer_id, redact_for_log(dict(changes)))
        self._persist(Collection.CUSTOMERS)
        self._notify(
            ChangeEvent(
                collection=Collection.CUSTOMERS,
                kind=ChangeKind.UPDATED,
                record_id=customer_id,
                title="Customer Updated",
                description=f"{original.full_name}'s information has been updated.",
            )
        )
        return updated

    def delete_customer(self, customer_id: str) -> Customer | None:
        """Remove a customer; events referencing it are left untouched."""
        index = _index_of(self._customers, customer_id)
        if index is None:
            return None
        removed = self._customers.pop(index)
        self._persist(Collection.CUSTOMERS)
        self._notify(
            ChangeEvent(
                collection=Collection.CUSTOMERS,
                kind=ChangeKind.DELETED,
                record_id=customer_id,
                title="Customer Deleted",
                description=f"{removed.full_name} has been removed from your customers.",
                destructive=True,
            )
        )
        return removed

    def get_customer_by_id(self, customer_id: str) -> Customer | None:
        return queries.find_by_id(self._customers, customer_id)

    def customer_display_name(self, event: Event) -> str:
        return queries.customer_display_name(event, self._customers)

    # ------------------------------------------------------------------
    # Fleet
    # ------------------------------------------------------------------

    def add_cart(self, data: Mapping[str, Any]) -> Cart:
        cart = Cart.model_validate({**_without_assigned(data), "id": self._new_id(CART_ID_PREFIX, self._fleet)})
        self._fleet.append(cart)
        _logger.debug("Added cart %s (%s)", cart.id, cart.type.value)
        self._persist(Collection.FLEET)
        self._notify(
            ChangeEvent(
                collection=Collection.FLEET,
                kind=ChangeKind.CREATED,
                record_id=cart.id,
                title="Cart Added",
                description=f"A new {cart.type.value} cart has been added to your fleet.",
            )
        )
        return cart

    def update_cart(self, cart_id: str, changes: Mapping[str, Any]) -> Cart | None:
        index = _index_of(self._fleet, cart_id)
        if index is None:
            _logger.debug("update_cart: %s not found", cart_id)
            return None
        original = self._fleet[index]
        updated = apply_changes(original, changes)
        self._fleet[index] = updated
        self._persist(Collection.FLEET)
        self._notify(
            ChangeEvent(
                collection=Collection.FLEET,
                kind=ChangeKind.UPDATED,
                record_id=cart_id,
                title="Cart Updated",
                description=f"{original.type.value} ({original.serial_number}) has been updated.",
            )
        )
        return updated

    def delete_cart(self, cart_id: str) -> Cart | None:
        index = _index_of(self._fleet, cart_id)
        if index is None:
            return None
        removed = self._fleet.pop(index)
        self._persist(Collection.FLEET)
        self._notify(
            ChangeEvent(
                collection=Collection.FLEET,
                kind=ChangeKind.DELETED,
                record_id=cart_id,
                title="Cart Deleted",
                description=f"{removed.type.value} ({removed.serial_number}) has been removed from your fleet.",
                destructive=True,
            )
        )
        return removed

    def get_cart_by_id(self, cart_id: str) -> Cart | None:
        return queries.find_by_id(self._fleet, cart_id)

    def get_carts_by_type(self, cart_type: CartType) -> list[Cart]:
        return queries.carts_by_type(self._fleet, cart_type)

    def get_available_carts_by_type(self, cart_type: CartType, on: date | datetime | None = None) -> int:
        return queries.available_carts_by_type(self._fleet, self._events, cart_type, on)

    def _set_cart_status(self, cart_ids: list[str], status: CartStatus) -> tuple[str, ...]:
        wanted = set(cart_ids)
        for index, cart in enumerate(self._fleet):
            if cart.id in wanted:
                self._fleet[index] = cart.model_copy(update={"status": status})
        if cart_ids:
            _logger.debug("Set %d carts to %s: %s", len(cart_ids), status.value, cart_ids)
        return tuple(cart_ids)

    def _reserve(self, event: Event) -> tuple[str, ...]:
        target = reservation_status(event.type)
        if target is None:
            return ()
        picked = select_carts(self._fleet, event.carts, RESERVABLE_STATUSES)
        return self._set_cart_status(picked, target)

    def _release(self, event: Event) -> tuple[str, ...]:
        picked = select_carts(self._fleet, event.carts, RELEASABLE_STATUSES)
        return self._set_cart_status(picked, CartStatus.AVAILABLE)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def add_event(self, data: Mapping[str, Any]) -> Event:
        """Schedule an event and take its carts out of the available pool if needed."""
        event = Event.model_validate(
            {
                **_without_assigned(data),
                "id": self._new_id(EVENT_ID_PREFIX, self._events),
                "created_at": self._clock(),
            }
        )
        self._events.append(event)
        cart_ids = self._reserve(event) if reserves_on_create(event) else ()
        _logger.debug(
            "Added %s event %s (%s), reserved %d carts",
            event.type.value,
            event.id,
            event.status.value,
            len(cart_ids),
        )
        self._persist_event_change(cart_ids)
        self._notify(
            ChangeEvent(
                collection=Collection.EVENTS,
                kind=ChangeKind.CREATED,
                record_id=event.id,
                title=f"New {event.type.display_name} Created",
                description=f"{event.title} has been scheduled for {event.start_date:%m/%d/%Y}.",
                cart_ids=cart_ids,
            )
        )
        return event

    def update_event(self, event_id: str, changes: Mapping[str, Any]) -> Event | None:
        """Merge *changes* into an event and reconcile cart statuses.

        Reservation and release use the event's lines as they were before
        the update.  Unknown ids are ignored.
        """
        index = _index_of(self._events, event_id)
        if index is None:
            _logger.debug("update_event: %s not found", event_id)
            return None
        original = self._events[index]
        updated = apply_changes(original, changes)
        self._events[index] = updated

        new_status = updated.status if "status" in changes else None
        cart_ids: tuple[str, ...] = ()
        if reserves_on_update(original, new_status):
            cart_ids += self._reserve(original)
        if releases_on_update(original, new_status):
            cart_ids += self._release(original)
        self._persist_event_change(cart_ids)

        if new_status is not None and new_status != original.status:
            title = "Status Updated"
            description = f"{original.title} has been {_STATUS_MESSAGES.get(new_status, 'updated')}."
        else:
            title = "Event Updated"
            description = f"{original.title} has been updated."
        self._notify(
            ChangeEvent(
                collection=Collection.EVENTS,
                kind=ChangeKind.UPDATED,
                record_id=event_id,
                title=title,
                description=description,
                cart_ids=cart_ids,
            )
        )
        return updated

    def delete_event(self, event_id: str) -> Event | None:
        """Remove an event; open events return their carts to the pool."""
        index = _index_of(self._events, event_id)
        if index is None:
            return None
        removed = self._events.pop(index)
        cart_ids = self._release(removed) if releases_on_delete(removed) else ()
        self._persist_event_change(cart_ids)
        self._notify(
            ChangeEvent(
                collection=Collection.EVENTS,
                kind=ChangeKind.DELETED,
                record_id=event_id,
                title="Event Deleted",
                description=f"{removed.title} has been deleted.",
                destructive=True,
                cart_ids=cart_ids,
            )
        )
        return removed

    def _append_note(self, event_id: str, status: EventStatus, label: str) -> Event | None:
        event = queries.find_by_id(self._events, event_id)
        if event is None:
            return None
        stamp = f"{label} on {self._clock():%m/%d/%Y %H:%M}"
        notes = f"{event.notes}\n{stamp}" if event.notes else stamp
        return self.update_event(event_id, {"status": status, "notes": notes})

    def mark_delivered(self, event_id: str) -> Event | None:
        """Record a completed delivery: the event becomes active."""
        return self._append_note(event_id, EventStatus.ACTIVE, "Delivered")

    def mark_picked_up(self, event_id: str) -> Event | None:
        """Record a completed pickup: the event is completed."""
        return self._append_note(event_id, EventStatus.COMPLETED, "Picked up")

    def get_event_by_id(self, event_id: str) -> Event | None:
        return queries.find_by_id(self._events, event_id)

    def get_events_by_date(self, day: date | datetime) -> list[Event]:
        return queries.events_by_date(self._events, day)

    def get_events_by_date_range(self, start: date | datetime, end: date | datetime) -> list[Event]:
        return queries.events_by_date_range(self._events, start, end)

    def get_events_by_customer(self, customer_id: str) -> list[Event]:
        return queries.events_by_customer(self._events, customer_id)
