"""Configuration for cartfleet."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable
from typing import Any, TypeVar

from cartfleet._constants import DEFAULT_KEY_PREFIX
from cartfleet.exceptions import FleetConfigError

_T = TypeVar("_T")


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, parse: Callable[[str], _T]) -> _T:
    try:
        return parse(value.strip())
    except ValueError as exc:
        raise FleetConfigError(f"{env_key} must be numeric, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class MaintenancePolicy:
    """Inputs for the maintenance projection.

    A cart is due for service every ``service_interval_months`` or every
    ``rentals_per_service`` rentals, whichever comes first.  Rental-driven
    due dates assume ``rentals_per_month`` rentals per cart.
    """

    service_interval_months: int = 6
    rentals_per_service: int = 50
    rentals_per_month: int = 10


@dataclasses.dataclass(frozen=True)
class ForecastPolicy:
    """Yearly growth and retirement rates used by the fleet projection."""

    growth_rate: float = 0.05
    retirement_rate: float = 0.02


@dataclasses.dataclass(frozen=True)
class FleetConfig:
    """Library configuration.

    Parameters
    ----------
    store_path : str or None
        Path of the JSON document backing the key-value store.  ``None``
        keeps everything in memory.
    key_prefix : str
        Prefix of the storage keys (``"<prefix>-customers"`` etc.).
    seed_fleet : bool
        Seed the default 129-cart fleet when the stored fleet is empty.
    random_seed : int or None
        Seed for the filler values generated while seeding.  ``None`` uses
        system randomness.
    maintenance : MaintenancePolicy
        Maintenance projection inputs.
    forecast : ForecastPolicy
        Fleet projection inputs.
    """

    store_path: str | None = None
    key_prefix: str = DEFAULT_KEY_PREFIX
    seed_fleet: bool = True
    random_seed: int | None = None
    maintenance: MaintenancePolicy = dataclasses.field(default_factory=MaintenancePolicy)
    forecast: ForecastPolicy = dataclasses.field(default_factory=ForecastPolicy)

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetConfig:
        """Create configuration from ``CARTFLEET_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        FleetConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        maintenance_kwargs: dict[str, int] = {}
        _ENV_MAINTENANCE_MAP = {
            "CARTFLEET_SERVICE_INTERVAL_MONTHS": "service_interval_months",
            "CARTFLEET_RENTALS_PER_SERVICE": "rentals_per_service",
            "CARTFLEET_RENTALS_PER_MONTH": "rentals_per_month",
        }
        for env_key, field_name in _ENV_MAINTENANCE_MAP.items():
            val = env.get(env_key)
            if val is not None:
                maintenance_kwargs[field_name] = _env_number(env_key, val, int)

        forecast_kwargs: dict[str, float] = {}
        _ENV_FORECAST_MAP = {
            "CARTFLEET_GROWTH_RATE": "growth_rate",
            "CARTFLEET_RETIREMENT_RATE": "retirement_rate",
        }
        for env_key, field_name in _ENV_FORECAST_MAP.items():
            val = env.get(env_key)
            if val is not None:
                forecast_kwargs[field_name] = _env_number(env_key, val, float)

        config_kwargs: dict[str, Any] = {
            "maintenance": MaintenancePolicy(**maintenance_kwargs),
            "forecast": ForecastPolicy(**forecast_kwargs),
        }

        store_path = env.get("CARTFLEET_STORE_PATH")
        if store_path:
            config_kwargs["store_path"] = store_path

        prefix = env.get("CARTFLEET_KEY_PREFIX")
        if prefix:
            config_kwargs["key_prefix"] = prefix.strip()

        if "seed_fleet" not in overrides:
            config_kwargs["seed_fleet"] = _env_bool(env.get("CARTFLEET_SEED_FLEET"), True)

        seed_env = env.get("CARTFLEET_RANDOM_SEED")
        if seed_env is not None and "random_seed" not in overrides:
            config_kwargs["random_seed"] = _env_number("CARTFLEET_RANDOM_SEED", seed_env, int)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)

    def storage_key(self, collection: str) -> str:
        """Return the storage key for *collection* (e.g. ``"sgc-fleet"``)."""
        return f"{self.key_prefix}-{collection}"
