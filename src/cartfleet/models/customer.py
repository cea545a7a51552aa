"""Customer model."""

from __future__ import annotations

from cartfleet.models._base import FleetBaseModel, LocalDateTime


class Customer(FleetBaseModel):
    """A rental customer.

    Deleting a customer does not touch events that reference it; events
    keep a denormalized ``customer_name`` for display.
    """

    first_name: str
    last_name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    company: str | None = None
    notes: str | None = None
    created_at: LocalDateTime

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
