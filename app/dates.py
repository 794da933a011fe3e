"""Calendar primitives: UTC date normalisation and Friday-to-Sunday windows.

All arithmetic works on ``datetime.date`` values in the proleptic Gregorian
calendar, so results never depend on the host locale or timezone.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Iterable, List, Union

from app.errors import InvalidArgument

FRIDAY = 4  # date.weekday(): Mon=0 .. Sun=6
WEEKEND_SPAN_DAYS = 2

DateLike = Union[dt.date, dt.datetime]


def to_utc_date(value: DateLike) -> dt.date:
    """Return the UTC calendar date of ``value``.

    Aware datetimes are converted to UTC first; naive datetimes are taken to
    already be in UTC.
    """
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(dt.timezone.utc)
        return value.date()
    if isinstance(value, dt.date):
        return value
    raise InvalidArgument(f"Expected a date or datetime, got {type(value).__name__}")


def add_days(day: dt.date, delta: int) -> dt.date:
    return day + dt.timedelta(days=delta)


def to_holiday_set(holidays: Iterable[DateLike] | None) -> frozenset[dt.date]:
    """Collapse holiday dates/datetimes into a set of UTC dates."""
    if not holidays:
        return frozenset()
    return frozenset(to_utc_date(h) for h in holidays)


@dataclass(frozen=True)
class DateRange:
    """Inclusive span of calendar dates."""
    start: dt.date
    end: dt.date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidArgument(f"DateRange start {self.start} is after end {self.end}")

    @property
    def days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return (self.end - self.start).days + 1


def next_friday(reference_instant: DateLike) -> dt.date:
    """First Friday on or after the reference date."""
    day = to_utc_date(reference_instant)
    return add_days(day, (FRIDAY - day.weekday()) % 7)


def next_n_weekends(n: int, reference_instant: DateLike) -> List[DateRange]:
    """Return ``n`` consecutive Friday-Sunday windows starting at the next Friday.

    A non-positive ``n`` yields an empty list.
    """
    if n <= 0:
        return []
    first = next_friday(reference_instant)
    weekends = []
    for i in range(n):
        friday = add_days(first, i * 7)
        weekends.append(DateRange(friday, add_days(friday, WEEKEND_SPAN_DAYS)))
    return weekends
