"""Display labels for durations, deltas, hours and report periods."""

from __future__ import annotations

from report_engine.daykeys import as_day_key, end_of_week, start_of_week
from report_engine.timeutils import MS_IN_MINUTE, MS_IN_SECOND


def format_duration(ms: int) -> str:
    """Format milliseconds as ``HH:MM:SS``."""

    if ms <= 0:
        return "00:00:00"
    total_seconds = int(ms // MS_IN_SECOND)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_duration_compact(ms: int) -> str:
    if ms <= 0:
        return "0m"
    hours, minutes = divmod(int(ms // MS_IN_MINUTE), 60)
    if hours > 0:
        return f"{hours}h {minutes}m" if minutes > 0 else f"{hours}h"
    return f"{minutes}m"


def format_delta(ms: int) -> tuple[str, str]:
    """Return ``(label, trend)`` where trend is ``up``, ``down`` or ``flat``."""

    if ms == 0:
        return "±0", "flat"
    sign = "+" if ms > 0 else "-"
    return f"{sign}{format_duration_compact(abs(ms))}", "up" if ms > 0 else "down"


def format_count_delta(count: int) -> tuple[str, str]:
    if count == 0:
        return "±0", "flat"
    return f"{'+' if count > 0 else ''}{count}", "up" if count > 0 else "down"


def format_hour_label(hour: int) -> str:
    return f"{hour:02d}:00 - {hour + 1:02d}:00"


def format_minutes_label(value: float) -> str:
    return f"{round(value)}m"


def format_range_label(selected_key, granularity: str) -> str:
    day = as_day_key(selected_key).value
    if granularity == "day":
        return day.isoformat()
    if granularity == "week":
        start, end = start_of_week(day), end_of_week(day)
        return f"{start.month}/{start.day} - {end.month}/{end.day}"
    if granularity == "month":
        return f"{day.year}-{day.month:02d}"
    return str(day.year)
