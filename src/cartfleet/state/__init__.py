"""State/store layer.

This package owns the in-memory collections and is the single place where
event lifecycle transitions are turned into cart status changes.
"""

from cartfleet.state.events import ChangeEvent, ChangeKind, Collection
from cartfleet.state.store import FleetStore

__all__ = ["ChangeEvent", "ChangeKind", "Collection", "FleetStore"]
