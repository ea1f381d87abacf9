"""Tasks created and completed on one day, with the focus time spent on them that day."""

from __future__ import annotations

from dataclasses import dataclass, field

from report_engine.categories import DEFAULT_CATEGORY_NAME
from report_engine.daykeys import as_day_key
from report_engine.schema import Category, Event, TaskLifecycleRecord
from report_engine.timeutils import resolve_now


@dataclass(frozen=True)
class TaskChangeEntry:
    task_id: str
    name: str
    category_name: str
    category_color: str | None = None
    planned_minutes: float | None = None
    due_at: int | None = None
    focus_duration_ms: int = 0


@dataclass(frozen=True)
class TaskDailyChanges:
    created: list[TaskChangeEntry] = field(default_factory=list)
    completed: list[TaskChangeEntry] = field(default_factory=list)


def _focus_within(events: list[Event], task_id: str, start: int, end: int, now: int) -> int:
    total = 0
    for event in events:
        if event.type != "task" or event.my_task_id != task_id:
            continue
        overlap = min(event.end if event.end is not None else now, end) - max(event.start, start)
        if overlap > 0:
            total += overlap
    return total


def build_task_daily_changes(
    ledger: dict[str, TaskLifecycleRecord],
    categories: list[Category],
    day,
    events: list[Event],
    now: int | None = None,
) -> TaskDailyChanges:
    """List tasks created and completed on ``day``, most focused first.

    Focus time only counts the part of each linked task event that falls
    inside the day.
    """

    current = resolve_now(now)
    start, end = as_day_key(day).bounds()
    by_id = {category.id: category for category in categories}

    def entry(record: TaskLifecycleRecord, category_id: str | None, fallback: str | None) -> TaskChangeEntry:
        category = by_id.get(category_id) if category_id else None
        return TaskChangeEntry(
            task_id=record.id,
            name=record.name,
            category_name=category.name if category else fallback or DEFAULT_CATEGORY_NAME,
            category_color=category.color if category else None,
            planned_minutes=record.latest_planned_minutes,
            due_at=record.latest_due_at,
            focus_duration_ms=_focus_within(events, record.id, start, end, current),
        )

    created = []
    completed = []
    for record in ledger.values():
        if start <= record.created_at < end:
            created.append(entry(record, record.created_category_id, record.created_category_name))
        if record.completed_at is not None and start <= record.completed_at < end:
            completed.append(
                entry(
                    record,
                    record.completed_category_id or record.latest_category_id,
                    record.completed_category_name or record.latest_category_name,
                )
            )

    return TaskDailyChanges(
        created=sorted(created, key=lambda item: -item.focus_duration_ms),
        completed=sorted(completed, key=lambda item: -item.focus_duration_ms),
    )
