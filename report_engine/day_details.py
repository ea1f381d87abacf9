"""Per-task and per-sender rollups for a single day."""

from __future__ import annotations

from dataclasses import dataclass

from report_engine.interruptions import normalize_label
from report_engine.metrics import get_duration
from report_engine.schema import Event, TaskLifecycleRecord
from report_engine.timeutils import resolve_now

DEFAULT_TASK_LABEL = "Untitled task"


@dataclass(frozen=True)
class DailyTaskDetailRow:
    id: str
    name: str
    total_duration_ms: int
    event_count: int


@dataclass(frozen=True)
class DailyInterruptionDetailRow:
    label: str
    total_duration_ms: int
    count: int


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def resolve_task_identity(event: Event, ledger: dict[str, TaskLifecycleRecord]) -> tuple[str, str]:
    """Return ``(identity, display name)`` for a task event.

    Linked events group by task id and prefer the ledger's name over the
    event's own label, which may be stale. Unlinked events group by label.
    """

    label = _clean(event.label)
    if event.my_task_id:
        record = ledger.get(event.my_task_id)
        name = _clean(record.name) if record is not None else None
        return event.my_task_id, name or label or DEFAULT_TASK_LABEL

    fallback = label or DEFAULT_TASK_LABEL
    return f"label:{fallback}", fallback


def build_daily_task_details(
    events: list[Event],
    ledger: dict[str, TaskLifecycleRecord] | None = None,
    now: int | None = None,
) -> list[DailyTaskDetailRow]:
    """Sum task time and sessions per task, longest first, more sessions first on ties."""

    current = resolve_now(now)
    ledger = ledger or {}
    totals: dict[str, list] = {}

    for event in events:
        if event.type != "task":
            continue
        duration = get_duration(event, current)
        if duration <= 0:
            continue
        identity, name = resolve_task_identity(event, ledger)
        entry = totals.setdefault(identity, [name, 0, 0])
        entry[1] += duration
        entry[2] += 1

    rows = [
        DailyTaskDetailRow(id=identity, name=name, total_duration_ms=duration, event_count=count)
        for identity, (name, duration, count) in totals.items()
    ]
    return sorted(rows, key=lambda row: (-row.total_duration_ms, -row.event_count))


def build_daily_interruption_details(
    events: list[Event],
    now: int | None = None,
) -> list[DailyInterruptionDetailRow]:
    """Sum interruption time and occurrences per sender, most frequent first."""

    current = resolve_now(now)
    totals: dict[str, list[int]] = {}

    for event in events:
        if event.type != "interrupt":
            continue
        entry = totals.setdefault(normalize_label(event.who), [0, 0])
        entry[0] += get_duration(event, current)
        entry[1] += 1

    rows = [
        DailyInterruptionDetailRow(label=label, total_duration_ms=duration, count=count)
        for label, (duration, count) in totals.items()
    ]
    return sorted(rows, key=lambda row: (-row.count, -row.total_duration_ms))
