"""Day-boundary segmentation and per-day event index."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace

from report_engine.daykeys import DayKey
from report_engine.schema import Event
from report_engine.timeutils import resolve_now

logger = logging.getLogger(__name__)

EventIndex = dict[DayKey, list[Event]]


def _touched_days(start: int, end: int) -> list[DayKey]:
    first = DayKey.from_timestamp(start)
    if end <= start:
        return [first]
    # end is exclusive: an event ending exactly at midnight stays on the earlier day
    last = DayKey.from_timestamp(end - 1)
    days = [first]
    while days[-1] < last:
        days.append(days[-1].shift(1))
    return days


def split_event(event: Event, now: int | None = None) -> list[tuple[DayKey, Event]]:
    """Split ``event`` into day-clamped fragments keyed by local calendar day.

    An event confined to one day is returned unmodified. Fragments keep the
    original ``id`` and carry ``split_ref_id`` pointing back to it. For a
    running event the interval ``[start, now)`` decides day membership and the
    last fragment stays open (``end is None``).
    """

    membership_end = event.end if event.end is not None else max(event.start, resolve_now(now))
    days = _touched_days(event.start, membership_end)
    if len(days) == 1:
        return [(days[0], event)]

    fragments = []
    for position, day in enumerate(days):
        day_start, day_end = day.bounds()
        is_last = position == len(days) - 1
        if is_last and event.end is None:
            fragment_end = None
        else:
            fragment_end = min(membership_end, day_end)
        fragment = replace(
            event,
            start=max(event.start, day_start),
            end=fragment_end,
            split_ref_id=event.id,
        )
        fragments.append((day, fragment))
    return fragments


def build_index(events: list[Event], now: int | None = None) -> EventIndex:
    """Index events by local calendar day, splitting those that cross midnight."""

    current = resolve_now(now)
    index: EventIndex = defaultdict(list)
    split_count = 0
    for event in events:
        pieces = split_event(event, now=current)
        if len(pieces) > 1:
            split_count += 1
        for day, piece in pieces:
            index[day].append(piece)

    logger.debug("Indexed %d events over %d days (%d split at midnight)", len(events), len(index), split_count)
    return dict(index)
