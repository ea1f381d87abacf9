"""Per-day task minutes stacked by category for a report range."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from report_engine.categories import DEFAULT_CATEGORY_NAME
from report_engine.daykeys import DateRange, DayKey
from report_engine.schema import Category, Event, TaskLifecycleRecord
from report_engine.time_series import WEEKDAY_LABELS
from report_engine.timeutils import MS_IN_MINUTE, resolve_now

UNCATEGORIZED_KEY = "uncategorized"


@dataclass(frozen=True)
class CategorySeriesMeta:
    id: str | None
    name: str
    color: str | None = None

    @property
    def key(self) -> str:
        return self.id or UNCATEGORIZED_KEY


@dataclass(frozen=True)
class CategorySeriesDatum:
    date_key: DayKey
    label: str
    values: dict[str, float]
    total_minutes: float


@dataclass(frozen=True)
class CategorySeries:
    categories: list[CategorySeriesMeta]
    data: list[CategorySeriesDatum]


def _resolve(
    event: Event,
    ledger: dict[str, TaskLifecycleRecord],
    categories: dict[str, Category],
) -> CategorySeriesMeta:
    record = ledger.get(event.my_task_id) if event.my_task_id else None
    category_id = event.category_id
    fallback = None
    if record is not None:
        category_id = category_id or record.latest_category_id or record.created_category_id
        fallback = record.latest_category_name or record.created_category_name
    category = categories.get(category_id) if category_id else None
    return CategorySeriesMeta(
        id=category_id,
        name=category.name if category else fallback or DEFAULT_CATEGORY_NAME,
        color=category.color if category else None,
    )


def build_category_series(
    events: list[Event],
    ledger: dict[str, TaskLifecycleRecord],
    categories: list[Category],
    date_range: DateRange,
    now: int | None = None,
) -> CategorySeries:
    """Task minutes per category for each day of ``date_range``.

    Every datum carries a value for every category seen, zero on days
    without activity, so the series can be stacked directly.
    """

    current = resolve_now(now)
    by_id = {category.id: category for category in categories}
    bounds = np.array([day.bounds() for day in date_range.days], dtype=float).reshape(-1, 2)
    starts, ends = bounds[:, 0], bounds[:, 1]

    metas: dict[str, CategorySeriesMeta] = {}
    columns: dict[str, np.ndarray] = {}
    for event in events:
        if event.type != "task":
            continue
        meta = _resolve(event, ledger, by_id)
        metas.setdefault(meta.key, meta)
        end = event.end if event.end is not None else current
        overlap = np.clip(np.minimum(end, ends) - np.maximum(event.start, starts), 0, None)
        if meta.key not in columns:
            columns[meta.key] = np.zeros(len(date_range.days))
        columns[meta.key] += overlap / MS_IN_MINUTE

    keys = list(columns)
    matrix = np.column_stack([columns[key] for key in keys]) if keys else np.zeros((len(date_range.days), 0))
    totals = matrix.sum(axis=1)

    data = [
        CategorySeriesDatum(
            date_key=day,
            label=WEEKDAY_LABELS[day.value.weekday()],
            values={key: float(value) for key, value in zip(keys, matrix[row])},
            total_minutes=float(totals[row]),
        )
        for row, day in enumerate(date_range.days)
    ]
    return CategorySeries(categories=[metas[key] for key in keys], data=data)
