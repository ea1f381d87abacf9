"""Weekly standouts: busiest focus day, most interrupted day and longest session."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from report_engine.daykeys import DateRange, DayKey
from report_engine.metrics import get_duration
from report_engine.schema import Event
from report_engine.timeline import DEFAULT_LABELS
from report_engine.timeutils import resolve_now


@dataclass(frozen=True)
class FocusDay:
    day_key: DayKey
    duration_ms: int


@dataclass(frozen=True)
class InterruptDay:
    day_key: DayKey
    count: int


@dataclass(frozen=True)
class LongestFocus:
    label: str
    duration_ms: int
    start: int
    end: int | None = None


@dataclass(frozen=True)
class WeeklyProSummary:
    top_focus_day: FocusDay | None = None
    most_interrupt_day: InterruptDay | None = None
    longest_focus: LongestFocus | None = None


def build_weekly_pro_summary(events: list[Event], date_range: DateRange, now: int | None = None) -> WeeklyProSummary:
    """Pick the standout days and the longest task session touching ``date_range``.

    Ties resolve to the earliest day and the first session seen.
    """

    current = resolve_now(now)
    bounds = np.array([day.bounds() for day in date_range.days], dtype=np.int64).reshape(-1, 2)
    starts, ends = bounds[:, 0], bounds[:, 1]
    range_start, range_end = date_range.bounds()

    focus = np.zeros(len(date_range.days), dtype=np.int64)
    interrupts = np.zeros(len(date_range.days), dtype=np.int64)
    longest = None

    for event in events:
        end = event.end if event.end is not None else current
        if event.type == "task":
            overlap = np.clip(np.minimum(end, ends) - np.maximum(event.start, starts), 0, None)
            focus += overlap
            duration = get_duration(event, current)
            touches = event.start < range_end and end > range_start
            if touches and (longest is None or duration > longest.duration_ms):
                longest = LongestFocus(
                    label=event.label or DEFAULT_LABELS["task"],
                    duration_ms=duration,
                    start=event.start,
                    end=event.end,
                )
        elif event.type == "interrupt":
            interrupts += (starts <= event.start) & (event.start < ends)

    top_focus = None
    most_interrupt = None
    if len(date_range.days):
        best = int(np.argmax(focus))
        if focus[best] > 0:
            top_focus = FocusDay(day_key=date_range.days[best], duration_ms=int(focus[best]))
        best = int(np.argmax(interrupts))
        if interrupts[best] > 0:
            most_interrupt = InterruptDay(day_key=date_range.days[best], count=int(interrupts[best]))

    return WeeklyProSummary(top_focus_day=top_focus, most_interrupt_day=most_interrupt, longest_focus=longest)
