"""Interruption analytics: contributor and category rankings, peak hour."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from report_engine.formatters import format_hour_label
from report_engine.metrics import get_duration
from report_engine.schema import Event
from report_engine.timeutils import local_hour, resolve_now

PLACEHOLDER_LABEL = "Unspecified"


@dataclass(frozen=True)
class InterruptionContributor:
    label: str
    total_duration: int
    count: int
    top_types: list["InterruptionContributor"] = field(default_factory=list)


@dataclass(frozen=True)
class InterruptionStats:
    total_duration: int
    total_count: int
    average_duration: float
    peak_hour_label: str | None
    top_contributors: list[InterruptionContributor]
    top_types: list[InterruptionContributor]


@dataclass
class _Tally:
    duration: int = 0
    count: int = 0
    nested: dict[str, "_Tally"] = field(default_factory=dict)

    def add(self, duration: int) -> None:
        self.duration += duration
        self.count += 1


def normalize_label(value: str | None) -> str:
    """Trim ``value``; blank or missing collapses to the placeholder label."""

    if value is None:
        return PLACEHOLDER_LABEL
    trimmed = str(value).strip()
    return trimmed or PLACEHOLDER_LABEL


def _rank(tallies: dict[str, _Tally], limit: int | None) -> list[InterruptionContributor]:
    # sorted() is stable, so full ties keep first-seen order
    ranked = sorted(tallies.items(), key=lambda item: (-item[1].count, -item[1].duration))
    if limit is not None:
        ranked = ranked[: max(0, limit)]
    return [
        InterruptionContributor(
            label=label,
            total_duration=tally.duration,
            count=tally.count,
            top_types=_rank(tally.nested, limit),
        )
        for label, tally in ranked
    ]


def _group_by_id(events: list[Event]) -> dict[str, list[Event]]:
    grouped: dict[str, list[Event]] = {}
    for event in events:
        if event.type == "interrupt":
            grouped.setdefault(event.id, []).append(event)
    return grouped


def compute_interruption_stats(
    events: list[Event],
    now: int | None = None,
    limit: int | None = None,
) -> InterruptionStats:
    """Rank interruption sources and categories over distinct interrupt events.

    Fragments of a split interrupt add their durations to one entry, counted
    once. The peak hour is the local hour with the most interrupt starts,
    earliest hour on ties.
    """

    grouped = _group_by_id(events)
    if not grouped:
        return InterruptionStats(
            total_duration=0,
            total_count=0,
            average_duration=0.0,
            peak_hour_label=None,
            top_contributors=[],
            top_types=[],
        )

    current = resolve_now(now)
    contributors: dict[str, _Tally] = {}
    types: dict[str, _Tally] = {}
    start_hours = []
    total_duration = 0

    for pieces in grouped.values():
        duration = sum(get_duration(piece, current) for piece in pieces)
        first = min(pieces, key=lambda piece: piece.start)
        who = normalize_label(first.who)
        kind = normalize_label(first.interrupt_type)

        contributor = contributors.setdefault(who, _Tally())
        contributor.add(duration)
        contributor.nested.setdefault(kind, _Tally()).add(duration)
        types.setdefault(kind, _Tally()).add(duration)

        start_hours.append(local_hour(first.start))
        total_duration += duration

    # argmax returns the first maximum, i.e. the earliest hour on ties
    peak_hour = int(np.argmax(np.bincount(start_hours, minlength=24)))

    return InterruptionStats(
        total_duration=total_duration,
        total_count=len(grouped),
        average_duration=total_duration / len(grouped),
        peak_hour_label=format_hour_label(peak_hour),
        top_contributors=_rank(contributors, limit),
        top_types=_rank(types, limit),
    )
