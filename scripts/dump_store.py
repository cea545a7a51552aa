#!/usr/bin/env python3
"""Summarize a cartfleet JSON store.

Loads the store file, then prints dashboard counts, availability per cart
type and the upcoming maintenance schedule.

Usage
-----
::

    python scripts/dump_store.py path/to/store.json

Options::

    --on YYYY-MM-DD      Also show booking-based availability on this day
    --years N            Maintenance forecast horizon in years (default: 2)
    --json               Output as machine-readable JSON
    --no-seed            Do not seed the default fleet when the store is empty
    -v, --verbose        Enable debug logging
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from cartfleet import CartType, FleetConfig, FleetStore  # noqa: E402
from cartfleet._constants import FORECAST_YEAR_CHOICES  # noqa: E402
from cartfleet.reports import compute_dashboard_stats, project_maintenance  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from exc


def _collect(store: FleetStore, on: date | None, years: int) -> dict[str, Any]:
    stats = compute_dashboard_stats(store.fleet, store.events)
    availability: dict[str, dict[str, int]] = {}
    for cart_type in CartType:
        row = {
            "total": len(store.get_carts_by_type(cart_type)),
            "available": store.get_available_carts_by_type(cart_type),
        }
        if on is not None:
            row["booked_available"] = store.get_available_carts_by_type(cart_type, on)
        availability[cart_type.value] = row

    schedule = project_maintenance(
        store.fleet,
        today=datetime.now(),
        years=years,
        policy=store.config.maintenance,
    )
    return {
        "counts": {
            "customers": len(store.customers),
            "carts": len(store.fleet),
            "events": len(store.events),
        },
        "dashboard": stats.model_dump(),
        "availability": availability,
        "maintenance": [
            {
                "cart": item.cart.id,
                "type": item.cart.type.value,
                "serial": item.cart.serial_number,
                "next_service": item.next_service.isoformat(timespec="minutes"),
                "status": item.label,
            }
            for item in schedule
        ],
    }


def _print_text(report: dict[str, Any]) -> None:
    print(_section("Collections"))
    for key, value in report["counts"].items():
        print(f"  {key}: {value}")

    print(_section("Dashboard"))
    for key, value in report["dashboard"].items():
        print(f"  {key}: {value}")

    print(_section("Availability"))
    for cart_type, row in report["availability"].items():
        extra = f"  (booked view: {row['booked_available']})" if "booked_available" in row else ""
        print(f"  {cart_type:<22} {row['available']:>3} / {row['total']:<3}{extra}")

    print(_section(f"Maintenance ({len(report['maintenance'])} carts)"))
    for item in report["maintenance"]:
        print(f"  {item['next_service']}  {item['status']:<9}  {item['cart']:<14} {item['serial']}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("store", type=Path, help="Path to the JSON store file")
    parser.add_argument("--on", type=_parse_day, default=None, help="Day for booking-based availability")
    parser.add_argument(
        "--years", type=int, default=2, choices=FORECAST_YEAR_CHOICES, help="Maintenance forecast horizon"
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--no-seed", action="store_true", help="Do not seed an empty fleet")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = FleetConfig.from_env(store_path=str(args.store), seed_fleet=not args.no_seed)
    store = FleetStore.open(config)
    report = _collect(store, args.on, args.years)

    if args.json:
        json.dump(report, sys.stdout, indent=2)
        print()
    else:
        _print_text(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
