"""Change notifications emitted by the fleet store.

Every mutation of :class:`cartfleet.state.store.FleetStore` produces one
:class:`ChangeEvent`.  The title/description pair is a ready-to-show
notification message.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Collection(StrEnum):
    CUSTOMERS = "customers"
    FLEET = "fleet"
    EVENTS = "events"
    THEME = "theme"


class ChangeKind(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    SEEDED = "seeded"
    LOADED = "loaded"


class ChangeEvent(BaseModel):
    """A completed mutation of the store."""

    model_config = ConfigDict(frozen=True)

    collection: Collection
    kind: ChangeKind
    record_id: str | None = Field(default=None, description="Id of the affected record, if any")
    title: str = ""
    description: str = ""
    destructive: bool = False
    cart_ids: tuple[str, ...] = Field(
        default=(),
        description="Carts whose status the mutation changed",
    )
