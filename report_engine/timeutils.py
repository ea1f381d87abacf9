"""Epoch-millisecond helpers in the process local time zone."""

from __future__ import annotations

import time
from datetime import date, datetime, timedelta

MS_IN_SECOND = 1000
MS_IN_MINUTE = MS_IN_SECOND * 60
MS_IN_HOUR = MS_IN_MINUTE * 60
MS_IN_DAY = MS_IN_HOUR * 24


def now_ms() -> int:
    return int(time.time() * MS_IN_SECOND)


def resolve_now(now: int | None) -> int:
    return now_ms() if now is None else int(now)


def to_local_datetime(timestamp_ms: int) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / MS_IN_SECOND)


def to_timestamp_ms(value: datetime) -> int:
    """Convert a naive local (or aware) datetime to epoch milliseconds."""

    return int(round(value.timestamp() * MS_IN_SECOND))


def local_midnight_ms(day: date) -> int:
    """Epoch ms of local 00:00 on ``day``; DST-safe because it goes through the calendar."""

    return to_timestamp_ms(datetime(day.year, day.month, day.day))


def local_date(timestamp_ms: int) -> date:
    return to_local_datetime(timestamp_ms).date()


def local_hour(timestamp_ms: int) -> int:
    return to_local_datetime(timestamp_ms).hour


def next_hour_ms(timestamp_ms: int) -> int:
    current = to_local_datetime(timestamp_ms).replace(minute=0, second=0, microsecond=0)
    return to_timestamp_ms(current + timedelta(hours=1))


def parse_timestamp(value) -> int:
    """Accept epoch milliseconds (number or digit string) or an ISO-8601 datetime string."""

    if isinstance(value, bool):
        raise ValueError(f"invalid timestamp {value!r}")
    if isinstance(value, (int, float)):
        return int(value)
    text = str(value).strip()
    if text.lstrip("-").isdigit():
        return int(text)
    return to_timestamp_ms(datetime.fromisoformat(text))
