"""Calendar bucketing for day, week, month and year views."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from cartfleet._dates import (
    as_datetime,
    days_between,
    end_of_day,
    end_of_month,
    start_of_day,
    start_of_month,
    start_of_week,
)
from cartfleet.models.event import Event
from cartfleet.queries import events_by_date_range


def week_days(day: date | datetime) -> list[datetime]:
    """The seven local midnights of the Sunday-first week containing *day*."""
    first = start_of_week(as_datetime(day))
    return [first + timedelta(days=offset) for offset in range(7)]


def month_days(day: date | datetime) -> list[datetime]:
    moment = as_datetime(day)
    return days_between(start_of_month(moment), end_of_month(moment))


def events_on_day(events: Iterable[Event], day: date | datetime) -> list[Event]:
    """Events that start, end, or are in progress on the calendar day of *day*."""
    day_start = start_of_day(as_datetime(day))
    day_end = end_of_day(day_start)
    return [event for event in events if event.start_date <= day_end and event.end_date >= day_start]


def year_overview(events: Iterable[Event], year: int) -> list[tuple[datetime, list[Event]]]:
    """``(month start, events overlapping that month)`` for each month of *year*."""
    pool = list(events)
    overview: list[tuple[datetime, list[Event]]] = []
    for month in range(1, 13):
        month_start = datetime(year, month, 1)
        overview.append((month_start, events_by_date_range(pool, month_start, end_of_month(month_start))))
    return overview
