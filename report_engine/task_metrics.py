"""Task lifecycle counts and backlog per report range."""

from __future__ import annotations

import calendar
from dataclasses import dataclass

from report_engine.daykeys import DateRange, DayKey
from report_engine.schema import TaskLifecycleRecord
from report_engine.time_series import WEEKDAY_LABELS


@dataclass(frozen=True)
class TaskDailyStat:
    date_key: DayKey
    label: str
    new_count: int
    completed_count: int
    canceled_count: int
    backlog_end: int


@dataclass(frozen=True)
class TaskTotals:
    new_count: int
    completed_count: int
    canceled_count: int
    backlog_end: int


@dataclass(frozen=True)
class TaskRangeComputation:
    daily: list[TaskDailyStat]
    totals: TaskTotals
    baseline_backlog: int


def _within(timestamp: int | None, start: int, end: int) -> bool:
    return timestamp is not None and start <= timestamp < end


def _open_at(record: TaskLifecycleRecord, moment: int) -> bool:
    """True when the task exists and is neither completed nor canceled before ``moment``."""

    if record.created_at >= moment:
        return False
    if record.completed_at is not None and record.completed_at < moment:
        return False
    if record.canceled_at is not None and record.canceled_at < moment:
        return False
    return True


def build_task_range(ledger: dict[str, TaskLifecycleRecord], date_range: DateRange) -> TaskRangeComputation:
    """Count new/completed/canceled tasks per day and carry the running backlog."""

    records = list(ledger.values())
    range_start = date_range.start_key.bounds()[0]
    baseline = sum(1 for record in records if _open_at(record, range_start))

    backlog = baseline
    daily = []
    for day in date_range.days:
        start, end = day.bounds()
        new_count = sum(1 for r in records if _within(r.created_at, start, end))
        completed_count = sum(1 for r in records if _within(r.completed_at, start, end))
        canceled_count = sum(1 for r in records if _within(r.canceled_at, start, end))
        backlog += new_count - completed_count - canceled_count
        daily.append(
            TaskDailyStat(
                date_key=day,
                label=f"{day.value.month}/{day.value.day}",
                new_count=new_count,
                completed_count=completed_count,
                canceled_count=canceled_count,
                backlog_end=backlog,
            )
        )

    totals = TaskTotals(
        new_count=sum(stat.new_count for stat in daily),
        completed_count=sum(stat.completed_count for stat in daily),
        canceled_count=sum(stat.canceled_count for stat in daily),
        backlog_end=backlog,
    )
    return TaskRangeComputation(daily=daily, totals=totals, baseline_backlog=baseline)


def build_task_range_data(
    ledger: dict[str, TaskLifecycleRecord],
    current: DateRange,
    previous: DateRange,
) -> dict[str, TaskRangeComputation]:
    return {
        "current": build_task_range(ledger, current),
        "previous": build_task_range(ledger, previous),
    }


def processing_rate(totals: TaskTotals) -> float:
    """Completed over new tasks; 0.0 when nothing was created."""

    if totals.new_count == 0:
        return 0.0
    return totals.completed_count / totals.new_count


@dataclass(frozen=True)
class TaskWeeklyPoint:
    date_key: DayKey
    label: str
    new_count: int
    completed_count: int
    net_count: int
    backlog_end: int


@dataclass(frozen=True)
class TaskYearlyPoint:
    month_key: str
    label: str
    new_count: int
    completed_count: int
    backlog_end: int


def build_weekly_task_points(daily: list[TaskDailyStat]) -> list[TaskWeeklyPoint]:
    return [
        TaskWeeklyPoint(
            date_key=stat.date_key,
            label=WEEKDAY_LABELS[stat.date_key.value.weekday()],
            new_count=stat.new_count,
            completed_count=stat.completed_count,
            net_count=stat.new_count - stat.completed_count - stat.canceled_count,
            backlog_end=stat.backlog_end,
        )
        for stat in daily
    ]


def build_yearly_task_points(task_range: TaskRangeComputation, year: int) -> list[TaskYearlyPoint]:
    """Roll daily stats up into twelve months; quiet months carry the previous backlog forward."""

    grouped: dict[int, list[int]] = {}
    for stat in task_range.daily:
        if stat.date_key.value.year != year:
            continue
        month = grouped.setdefault(stat.date_key.value.month, [0, 0, 0])
        month[0] += stat.new_count
        month[1] += stat.completed_count
        month[2] = stat.backlog_end

    points = []
    backlog = task_range.baseline_backlog
    for month in range(1, 13):
        new_count, completed_count, backlog = grouped.get(month, (0, 0, backlog))
        points.append(
            TaskYearlyPoint(
                month_key=f"{year}-{month:02d}",
                label=calendar.month_abbr[month],
                new_count=new_count,
                completed_count=completed_count,
                backlog_end=backlog,
            )
        )
    return points
