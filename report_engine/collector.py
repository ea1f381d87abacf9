"""Range collection over the per-day event index."""

from __future__ import annotations

from report_engine.daykeys import DateRange, as_day_key
from report_engine.schema import Event
from report_engine.segmentation import EventIndex


def collect(index: EventIndex, date_range: DateRange) -> list[Event]:
    """Return every event or fragment stored under the range's days, both endpoints included."""

    collected: list[Event] = []
    for day in date_range.days:
        collected.extend(index.get(day, ()))
    return collected


def collect_day(index: EventIndex, day) -> list[Event]:
    return list(index.get(as_day_key(day), ()))
