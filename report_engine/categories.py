"""Per-category task and focus statistics."""

from __future__ import annotations

from dataclasses import dataclass

from report_engine.daykeys import DateRange
from report_engine.metrics import get_duration
from report_engine.schema import Category, Event, TaskLifecycleRecord
from report_engine.timeutils import resolve_now

DEFAULT_CATEGORY_NAME = "Uncategorized"
TOTAL_KEY = "TOTAL"
TOTAL_NAME = "Total"


@dataclass
class CategoryStats:
    category_id: str | None
    category_name: str
    color: str | None = None
    new_count: int = 0
    completed_count: int = 0
    canceled_count: int = 0
    active_count: int = 0
    focus_duration: int = 0


class _StatsTable:
    def __init__(self, categories: list[Category]):
        self._categories = {category.id: category for category in categories}
        self.rows: dict[str | None, CategoryStats] = {}

    def get(self, category_id: str | None, fallback_name: str | None = None) -> CategoryStats:
        if category_id not in self.rows:
            category = self._categories.get(category_id) if category_id else None
            self.rows[category_id] = CategoryStats(
                category_id=category_id,
                category_name=category.name if category else fallback_name or DEFAULT_CATEGORY_NAME,
                color=category.color if category else None,
            )
        return self.rows[category_id]


def compute_category_stats(
    ledger: dict[str, TaskLifecycleRecord],
    categories: list[Category],
    date_range: DateRange,
    events: list[Event],
    now: int | None = None,
) -> list[CategoryStats]:
    """Aggregate lifecycle counts and tracked time per category, with a trailing total row."""

    current = resolve_now(now)
    range_start, range_end = date_range.bounds()
    table = _StatsTable(categories)

    def within(timestamp: int | None) -> bool:
        return timestamp is not None and range_start <= timestamp < range_end

    for record in ledger.values():
        created_id = record.created_category_id or record.latest_category_id
        latest_id = record.latest_category_id or created_id

        if within(record.created_at):
            table.get(created_id, record.created_category_name).new_count += 1
        if within(record.completed_at):
            table.get(record.completed_category_id or latest_id, record.completed_category_name).completed_count += 1
        if within(record.canceled_at):
            table.get(record.canceled_category_id or latest_id, record.canceled_category_name).canceled_count += 1

        closed_at = (record.completed_at, record.canceled_at)
        finished = any(moment is not None and moment < range_end for moment in closed_at)
        if not finished and record.created_at < range_end:
            name = record.latest_category_name or record.created_category_name
            table.get(latest_id, name).active_count += 1

    for event in events:
        if event.type != "task":
            continue
        end = event.end if event.end is not None else current
        if event.start >= range_end or end < range_start:
            continue
        record = ledger.get(event.my_task_id) if event.my_task_id else None
        category_id = event.category_id
        fallback = None
        if record is not None:
            category_id = category_id or record.latest_category_id or record.created_category_id
            fallback = record.latest_category_name or record.created_category_name
        table.get(category_id, fallback).focus_duration += get_duration(event, current)

    rows = sorted(table.rows.values(), key=lambda row: (-row.new_count, -row.completed_count))
    total = CategoryStats(
        category_id=TOTAL_KEY,
        category_name=TOTAL_NAME,
        new_count=sum(row.new_count for row in rows),
        completed_count=sum(row.completed_count for row in rows),
        canceled_count=sum(row.canceled_count for row in rows),
        active_count=sum(row.active_count for row in rows),
        focus_duration=sum(row.focus_duration for row in rows),
    )
    return [*rows, total]
