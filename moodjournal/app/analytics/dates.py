from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

DATE_KEY_FORMAT = "%Y-%m-%d"


class InvalidRangeError(ValueError):
    """Raised when range bounds or granularity cannot be interpreted."""


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def parse(cls, value: Granularity | str | None) -> Granularity:
        if isinstance(value, Granularity):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise InvalidRangeError(f"unknown granularity {value!r}") from exc


def parse_date_key(value: date | str | None) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise InvalidRangeError("missing date")
    try:
        return datetime.strptime(str(value).strip(), DATE_KEY_FORMAT).date()
    except ValueError as exc:
        raise InvalidRangeError(f"invalid date {value!r}") from exc


def format_date_key(value: date) -> str:
    return value.strftime(DATE_KEY_FORMAT)


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar range; an inverted range matches nothing."""

    start: date
    end: date

    @classmethod
    def parse(cls, start: date | str | None, end: date | str | None) -> DateRange:
        return cls(parse_date_key(start), parse_date_key(end))

    @property
    def is_empty(self) -> bool:
        return self.start > self.end

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def period_start(day: date, granularity: Granularity, week_start: int = 0) -> date:
    if granularity is Granularity.DAY:
        return day
    if granularity is Granularity.WEEK:
        return day - timedelta(days=(day.weekday() - week_start) % 7)
    return day.replace(day=1)


def period_end(start: date, granularity: Granularity) -> date:
    if granularity is Granularity.DAY:
        return start
    if granularity is Granularity.WEEK:
        return start + timedelta(days=6)
    if start.month == 12:
        return date(start.year + 1, 1, 1) - timedelta(days=1)
    return date(start.year, start.month + 1, 1) - timedelta(days=1)


def period_key(start: date, granularity: Granularity) -> str:
    if granularity is Granularity.MONTH:
        return start.strftime("%Y-%m")
    return format_date_key(start)


def iter_periods(
    date_range: DateRange,
    granularity: Granularity,
    week_start: int = 0,
) -> Iterator[tuple[str, date, date]]:
    """Yield ``(key, start, end)`` per period, bounds clipped to the range."""

    if date_range.is_empty:
        return
    current = period_start(date_range.start, granularity, week_start)
    while current <= date_range.end:
        end = period_end(current, granularity)
        yield (
            period_key(current, granularity),
            max(current, date_range.start),
            min(end, date_range.end),
        )
        current = end + timedelta(days=1)


__all__ = [
    "DATE_KEY_FORMAT",
    "DateRange",
    "Granularity",
    "InvalidRangeError",
    "format_date_key",
    "iter_periods",
    "parse_date_key",
    "period_end",
    "period_key",
    "period_start",
]
