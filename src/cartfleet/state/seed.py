"""Default fleet created on first run."""

from __future__ import annotations

import random
from datetime import datetime, timedelta

from cartfleet._constants import (
    CART_ID_PREFIX,
    SEED_CONDITION,
    SEED_FIRST_YEAR,
    SEED_FLEET,
    SEED_SERVICE_WINDOW_DAYS,
    SEED_YEAR_SPAN,
)
from cartfleet.models.cart import Cart, CartStatus, CartType


def build_default_fleet(rng: random.Random, now: datetime) -> list[Cart]:
    """Return the 129 seeded carts (68/40/12/6/2/1 across the six types).

    Year, rental count, serial number and service dates are random filler
    drawn from *rng*.
    """
    window = timedelta(days=SEED_SERVICE_WINDOW_DAYS)
    fleet: list[Cart] = []
    for line in SEED_FLEET:
        for n in range(1, line.count + 1):
            fleet.append(
                Cart(
                    id=f"{CART_ID_PREFIX}-{line.code}-{n}",
                    type=CartType(line.cart_type),
                    model=line.model,
                    year=line.fixed_year or SEED_FIRST_YEAR + rng.randrange(SEED_YEAR_SPAN),
                    status=CartStatus.AVAILABLE,
                    rental_count=rng.randrange(line.max_rental_count),
                    condition=SEED_CONDITION,
                    last_service=now - window * rng.random(),
                    next_service=now + window * rng.random(),
                    serial_number=f"{line.code}{rng.randint(10000, 99999)}",
                )
            )
    return fleet
