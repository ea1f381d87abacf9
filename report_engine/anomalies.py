"""Detection of suspicious events: future timestamps and implausibly long spans."""

from __future__ import annotations

from dataclasses import dataclass

from report_engine.schema import Event
from report_engine.timeutils import MS_IN_HOUR, MS_IN_MINUTE, resolve_now

FUTURE_BUFFER_MS = 5 * MS_IN_MINUTE
MAX_DURATION_MS = 12 * MS_IN_HOUR


@dataclass(frozen=True)
class AnomalyItem:
    event: Event
    duration: int
    is_future: bool
    is_long: bool


def build_anomalies(events: list[Event], now: int | None = None, limit: int | None = None) -> list[AnomalyItem]:
    """Flag events that start or end in the future or exceed twelve hours, longest first."""

    current = resolve_now(now)
    items = []
    for event in events:
        end = event.end if event.end is not None else current
        duration = max(0, end - event.start)
        is_future = event.start > current + FUTURE_BUFFER_MS or end > current + FUTURE_BUFFER_MS
        is_long = duration > MAX_DURATION_MS
        if is_future or is_long:
            items.append(AnomalyItem(event=event, duration=duration, is_future=is_future, is_long=is_long))

    items.sort(key=lambda item: -item.duration)
    if limit is None:
        return items
    return items[: max(0, limit)]
