"""Internal constants shared across the library."""

from __future__ import annotations

from typing import NamedTuple

DEFAULT_KEY_PREFIX = "sgc"

CUSTOMER_ID_PREFIX = "CUST"
CART_ID_PREFIX = "CART"
EVENT_ID_PREFIX = "EVT"

# ------------------------------------------------------------------
# Default fleet seeded on first run
# ------------------------------------------------------------------


class SeedLine(NamedTuple):
    """One cart type of the default fleet."""

    cart_type: str
    count: int
    code: str
    model: str
    fixed_year: int | None = None
    max_rental_count: int = 20


SEED_FLEET: tuple[SeedLine, ...] = (
    SeedLine("2-Passenger Gas", 68, "2PG", "Club Car Precedent"),
    SeedLine("4-Passenger Gas", 40, "4PG", "Club Car Onward"),
    SeedLine("4-Passenger Electric", 12, "4PE", "E-Z-GO Express"),
    SeedLine("6-Passenger Gas", 6, "6PG", "Club Car Transporter"),
    SeedLine("6-Passenger Electric", 2, "6PE", "E-Z-GO Express L6"),
    SeedLine("Electric Ambulance", 1, "AMB", "Cushman Ambulance", fixed_year=2023, max_rental_count=10),
)

SEED_FLEET_SIZE = sum(line.count for line in SEED_FLEET)  # 129

SEED_FIRST_YEAR = 2022
SEED_YEAR_SPAN = 3
SEED_SERVICE_WINDOW_DAYS = 90
SEED_CONDITION = "Excellent"

# ------------------------------------------------------------------
# Reports
# ------------------------------------------------------------------

RECENT_RENTALS_LIMIT = 4
FORECAST_YEAR_CHOICES: tuple[int, ...] = (1, 2, 3, 5, 10)
