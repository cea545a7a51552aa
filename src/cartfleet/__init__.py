"""cartfleet - Rental, fleet and scheduling data layer for golf-cart operators."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("cartfleet")
except PackageNotFoundError:
    __version__ = "0+local"
from cartfleet.config import FleetConfig, ForecastPolicy, MaintenancePolicy
from cartfleet.exceptions import FleetConfigError, FleetError, SnapshotDecodeError, StorageError
from cartfleet.models import (
    Cart,
    CartLine,
    CartStatus,
    CartType,
    Customer,
    Event,
    EventStatus,
    EventType,
    Mechanic,
    ThemePreference,
)
from cartfleet.state import ChangeEvent, ChangeKind, Collection, FleetStore
from cartfleet.storage import JsonFileStore, KeyValueStore, LoadResult, MemoryStore

__all__ = [
    "__version__",
    "Cart",
    "CartLine",
    "CartStatus",
    "CartType",
    "ChangeEvent",
    "ChangeKind",
    "Collection",
    "Customer",
    "Event",
    "EventStatus",
    "EventType",
    "FleetConfig",
    "FleetConfigError",
    "FleetError",
    "FleetStore",
    "ForecastPolicy",
    "JsonFileStore",
    "KeyValueStore",
    "LoadResult",
    "MaintenancePolicy",
    "Mechanic",
    "MemoryStore",
    "SnapshotDecodeError",
    "StorageError",
    "ThemePreference",
]
