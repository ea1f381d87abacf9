"""Chronological timeline reconstruction for one day."""

from __future__ import annotations

from dataclasses import dataclass, field

from report_engine.schema import Category, Event
from report_engine.timeutils import MS_IN_MINUTE

DEFAULT_LABELS = {
    "task": "Task",
    "interrupt": "Interruption",
    "break": "Break",
}


@dataclass(frozen=True)
class TimelineSegment:
    id: str
    label: str
    type: str
    start: int
    end: int
    duration_minutes: float
    category_color: str | None = None


@dataclass(frozen=True)
class TimelineSummary:
    first_start: int | None = None
    last_end: int | None = None
    longest_focus: TimelineSegment | None = None
    total_focus_minutes: float = 0.0
    total_interrupt_minutes: float = 0.0
    total_break_minutes: float = 0.0


@dataclass(frozen=True)
class TimelineData:
    segments: list[TimelineSegment] = field(default_factory=list)
    total_tracked_minutes: float = 0.0
    summary: TimelineSummary = field(default_factory=TimelineSummary)


def _to_segment(event: Event, colors: dict[str, str]) -> TimelineSegment:
    color = None
    if event.type == "task" and event.category_id:
        color = colors.get(event.category_id)
    return TimelineSegment(
        id=event.id,
        label=event.label or DEFAULT_LABELS[event.type],
        type=event.type,
        start=event.start,
        end=event.end,
        duration_minutes=(event.end - event.start) / MS_IN_MINUTE,
        category_color=color,
    )


def build_timeline(events: list[Event], categories: list[Category] | None = None) -> TimelineData:
    """Build ordered segments for finished events and a running summary of the day."""

    colors = {category.id: category.color for category in categories or []}
    finished = sorted(
        (event for event in events if event.end is not None and event.end > event.start),
        key=lambda event: event.start,
    )

    segments = []
    minutes = {"task": 0.0, "interrupt": 0.0, "break": 0.0}
    first_start = None
    last_end = None
    longest_focus = None

    for event in finished:
        segment = _to_segment(event, colors)
        segments.append(segment)
        minutes[segment.type] += segment.duration_minutes

        if first_start is None or segment.start < first_start:
            first_start = segment.start
        if last_end is None or segment.end > last_end:
            last_end = segment.end
        if segment.type == "task" and (
            longest_focus is None or segment.duration_minutes > longest_focus.duration_minutes
        ):
            longest_focus = segment

    return TimelineData(
        segments=segments,
        total_tracked_minutes=sum(minutes.values()),
        summary=TimelineSummary(
            first_start=first_start,
            last_end=last_end,
            longest_focus=longest_focus,
            total_focus_minutes=minutes["task"],
            total_interrupt_minutes=minutes["interrupt"],
            total_break_minutes=minutes["break"],
        ),
    )
