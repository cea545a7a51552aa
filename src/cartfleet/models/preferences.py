"""User interface preferences persisted alongside the collections."""

from __future__ import annotations

from cartfleet.models._base import FleetEnum


class ThemePreference(FleetEnum):
    LIGHT = "light"
    DARK = "dark"
