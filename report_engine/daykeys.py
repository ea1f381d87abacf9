"""Calendar day keys and report date ranges."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from report_engine.timeutils import local_date, local_midnight_ms

GRANULARITIES = ("day", "week", "month", "year")


@dataclass(frozen=True, order=True)
class DayKey:
    """One local calendar day, rendered as ``YYYY-MM-DD``."""

    value: date

    @classmethod
    def parse(cls, text: str) -> "DayKey":
        try:
            return cls(date.fromisoformat(str(text).strip()))
        except ValueError as exc:
            raise ValueError(f"malformed day key {text!r}, expected YYYY-MM-DD") from exc

    @classmethod
    def from_timestamp(cls, timestamp_ms: int) -> "DayKey":
        return cls(local_date(timestamp_ms))

    def shift(self, days: int) -> "DayKey":
        return DayKey(self.value + timedelta(days=days))

    def bounds(self) -> tuple[int, int]:
        """Local ``[midnight, next midnight)`` in epoch ms."""

        return local_midnight_ms(self.value), local_midnight_ms(self.value + timedelta(days=1))

    def __str__(self) -> str:
        return self.value.isoformat()


def as_day_key(value) -> DayKey:
    if isinstance(value, DayKey):
        return value
    if isinstance(value, datetime):
        return DayKey(value.date())
    if isinstance(value, date):
        return DayKey(value)
    return DayKey.parse(value)


@dataclass(frozen=True)
class DateRange:
    """Inclusive span of calendar days."""

    start: date
    end: date
    start_key: DayKey
    end_key: DayKey
    days: tuple[DayKey, ...]

    def bounds(self) -> tuple[int, int]:
        return self.start_key.bounds()[0], self.end_key.bounds()[1]


@dataclass(frozen=True)
class RangeInfo:
    current: DateRange
    previous: DateRange


def start_of_week(day: date) -> date:
    return day - timedelta(days=day.weekday())


def end_of_week(day: date) -> date:
    return start_of_week(day) + timedelta(days=6)


def end_of_month(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def _previous_month(day: date) -> date:
    first = day.replace(day=1)
    return (first - timedelta(days=1)).replace(day=1)


def create_range(start: date, end: date) -> DateRange:
    days = []
    cursor = start
    while cursor <= end:
        days.append(DayKey(cursor))
        cursor += timedelta(days=1)
    return DateRange(start=start, end=end, start_key=DayKey(start), end_key=DayKey(end), days=tuple(days))


def build_range_info(selected_key, granularity: str) -> RangeInfo:
    """Return the current period containing ``selected_key`` and the period before it."""

    reference = as_day_key(selected_key).value

    if granularity == "day":
        previous = reference - timedelta(days=1)
        return RangeInfo(create_range(reference, reference), create_range(previous, previous))
    if granularity == "week":
        start = start_of_week(reference)
        end = end_of_week(reference)
        week = timedelta(days=7)
        return RangeInfo(create_range(start, end), create_range(start - week, end - week))
    if granularity == "month":
        start = reference.replace(day=1)
        previous_start = _previous_month(start)
        return RangeInfo(
            create_range(start, end_of_month(start)),
            create_range(previous_start, end_of_month(previous_start)),
        )
    if granularity == "year":
        start = date(reference.year, 1, 1)
        previous_start = date(reference.year - 1, 1, 1)
        return RangeInfo(
            create_range(start, date(reference.year, 12, 31)),
            create_range(previous_start, date(reference.year - 1, 12, 31)),
        )
    raise ValueError(f"invalid granularity '{granularity}', expected one of {GRANULARITIES}")
