"""Hourly and per-day activity series for charts."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from report_engine.daykeys import DayKey, as_day_key
from report_engine.metrics import TrendDatum, get_duration
from report_engine.schema import EVENT_TYPES, Event
from report_engine.segmentation import EventIndex
from report_engine.timeutils import MS_IN_HOUR, MS_IN_MINUTE, local_hour, next_hour_ms, resolve_now

HOURS_IN_DAY = 24
WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_TYPE_COLUMNS = {event_type: column for column, event_type in enumerate(EVENT_TYPES)}


@dataclass(frozen=True)
class HourlyTrendPoint:
    hour_label: str
    focus_minutes: float
    interrupt_minutes: float
    break_minutes: float


@dataclass(frozen=True)
class HeatmapRow:
    day_key: DayKey
    label: str
    values: list[float]


@dataclass(frozen=True)
class WeeklyActivityPoint:
    label: str
    focus_hours: float
    interrupt_hours: float
    focus_rate: int


def hourly_buckets(events: list[Event], now: int | None = None) -> np.ndarray:
    """Return a 24x3 array of milliseconds per local hour and event type (task, interrupt, break)."""

    current = resolve_now(now)
    buckets = np.zeros((HOURS_IN_DAY, len(EVENT_TYPES)), dtype=float)
    for event in events:
        end = event.start + get_duration(event, current)
        cursor = event.start
        while cursor < end:
            segment_end = min(end, next_hour_ms(cursor))
            buckets[local_hour(cursor), _TYPE_COLUMNS[event.type]] += segment_end - cursor
            cursor = segment_end
    return buckets


def build_hourly_trend(events: list[Event], now: int | None = None) -> list[HourlyTrendPoint]:
    minutes = hourly_buckets(events, now) / MS_IN_MINUTE
    return [
        HourlyTrendPoint(
            hour_label=f"{hour:02d}:00",
            focus_minutes=float(row[0]),
            interrupt_minutes=float(row[1]),
            break_minutes=float(row[2]),
        )
        for hour, row in enumerate(minutes)
    ]


def build_heatmap(
    index: EventIndex,
    selected_key,
    days: int = 7,
    now: int | None = None,
) -> list[HeatmapRow]:
    """One row per day ending at ``selected_key``: focus plus interrupt minutes for each hour."""

    last = as_day_key(selected_key)
    rows = []
    for offset in range(days - 1, -1, -1):
        day = last.shift(-offset)
        buckets = hourly_buckets(index.get(day, []), now)
        values = (buckets[:, 0] + buckets[:, 1]) / MS_IN_MINUTE
        rows.append(HeatmapRow(day_key=day, label=WEEKDAY_LABELS[day.value.weekday()], values=values.tolist()))
    return rows


def build_weekly_activity(trend: list[TrendDatum]) -> list[WeeklyActivityPoint]:
    points = []
    for item in trend:
        total = item.focus_duration + item.interrupt_duration + item.break_duration
        focus_rate = item.focus_duration / total * 100 if total > 0 else 0
        points.append(
            WeeklyActivityPoint(
                label=WEEKDAY_LABELS[item.date_key.value.weekday()],
                focus_hours=item.focus_duration / MS_IN_HOUR,
                interrupt_hours=item.interrupt_duration / MS_IN_HOUR,
                focus_rate=int(round(focus_rate)),
            )
        )
    return points
