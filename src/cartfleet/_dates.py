"""Date helpers.

All datetimes handled by the library are naive and expressed in local time.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Any


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def as_datetime(value: date | datetime) -> datetime:
    """Coerce a query argument to a naive local datetime.

    A plain :class:`date` is taken as local midnight of that day.
    """
    if isinstance(value, datetime):
        return to_local_naive(value)
    return datetime.combine(value, time.min)


def parse_local_datetime(value: Any) -> Any:
    """``AfterValidator`` hook for :data:`cartfleet.models.LocalDateTime`."""
    if isinstance(value, datetime):
        return to_local_naive(value)
    return value


def start_of_day(value: date | datetime) -> datetime:
    day = value.date() if isinstance(value, datetime) else value
    return datetime.combine(day, time.min)


def end_of_day(value: date | datetime) -> datetime:
    day = value.date() if isinstance(value, datetime) else value
    return datetime.combine(day, time.max)


def add_months(value: datetime, months: int) -> datetime:
    """Shift *value* by whole months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def add_years(value: datetime, years: int) -> datetime:
    return add_months(value, 12 * years)


def start_of_week(value: date | datetime) -> datetime:
    """Sunday 00:00 of the week containing *value*."""
    day = start_of_day(value)
    # weekday(): Monday=0 .. Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def start_of_month(value: date | datetime) -> datetime:
    return start_of_day(value).replace(day=1)


def end_of_month(value: date | datetime) -> datetime:
    first = start_of_month(value)
    last_day = calendar.monthrange(first.year, first.month)[1]
    return end_of_day(first.replace(day=last_day))


def days_between(start: date | datetime, end: date | datetime) -> list[datetime]:
    """Local midnights from *start* to *end*, both inclusive."""
    current = start_of_day(start)
    last = start_of_day(end)
    days: list[datetime] = []
    while current <= last:
        days.append(current)
        current += timedelta(days=1)
    return days
