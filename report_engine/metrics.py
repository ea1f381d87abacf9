"""Summary metrics per event type, with deltas against a comparison period."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

from report_engine.daykeys import DayKey, as_day_key
from report_engine.schema import EVENT_TYPES, Event
from report_engine.segmentation import EventIndex
from report_engine.timeutils import resolve_now

DEFAULT_TREND_DAYS = 7

EVENT_LABELS = {
    "task": ("Focus", "Time spent focused on tasks"),
    "interrupt": ("Interruptions", "Time spent handling interruptions"),
    "break": ("Breaks", "Time spent recharging"),
}


@dataclass(frozen=True)
class SummaryItem:
    key: str
    label: str
    description: str
    total_duration: int
    total_count: int
    delta_duration: int
    delta_count: int


@dataclass(frozen=True)
class SummaryMetrics:
    items: list[SummaryItem]
    total_sessions: int

    def item(self, key: str) -> SummaryItem | None:
        return next((item for item in self.items if item.key == key), None)


@dataclass(frozen=True)
class TrendDatum:
    date_key: DayKey
    label: str
    focus_duration: int
    interrupt_duration: int
    break_duration: int
    total_duration: int


def get_duration(event: Event, now: int | None = None) -> int:
    """Duration in ms, treating a running event as ending at ``now``; never negative."""

    end = event.end if event.end is not None else resolve_now(now)
    return max(0, end - event.start)


def _totals_by_type(events: list[Event], now: int) -> dict[str, tuple[int, int]]:
    durations: dict[str, int] = defaultdict(int)
    ids: dict[str, set[str]] = defaultdict(set)
    for event in events:
        # fragments of one split event share the id: sum every piece, count the id once
        durations[event.type] += get_duration(event, now)
        ids[event.type].add(event.id)
    return {key: (durations[key], len(ids[key])) for key in EVENT_TYPES}


def compute_summary_metrics(
    current_events: list[Event],
    previous_events: list[Event],
    now: int | None = None,
) -> SummaryMetrics:
    """Compute per-type duration and distinct-event counts plus deltas vs the previous period."""

    current = resolve_now(now)
    current_totals = _totals_by_type(current_events, current)
    previous_totals = _totals_by_type(previous_events, current)

    items = []
    for key in EVENT_TYPES:
        label, description = EVENT_LABELS[key]
        duration, count = current_totals[key]
        previous_duration, previous_count = previous_totals[key]
        items.append(
            SummaryItem(
                key=key,
                label=label,
                description=description,
                total_duration=duration,
                total_count=count,
                delta_duration=duration - previous_duration,
                delta_count=count - previous_count,
            )
        )

    return SummaryMetrics(items=items, total_sessions=sum(item.total_count for item in items))


def compute_daily_trend(
    index: EventIndex,
    reference_key,
    days: int = DEFAULT_TREND_DAYS,
    now: int | None = None,
) -> list[TrendDatum]:
    """Per-day duration totals for the ``days`` days ending at ``reference_key``."""

    current = resolve_now(now)
    reference = as_day_key(reference_key)

    data = []
    for offset in range(days - 1, -1, -1):
        day = reference.shift(-offset)
        totals = defaultdict(int)
        for event in index.get(day, ()):
            totals[event.type] += get_duration(event, current)
        data.append(
            TrendDatum(
                date_key=day,
                label=f"{day.value.month}/{day.value.day}",
                focus_duration=totals["task"],
                interrupt_duration=totals["interrupt"],
                break_duration=totals["break"],
                total_duration=totals["task"] + totals["interrupt"] + totals["break"],
            )
        )
    return data
