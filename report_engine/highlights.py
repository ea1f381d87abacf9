"""Headline cards, text highlights and the due-date watch list of a report."""

from __future__ import annotations

from dataclasses import dataclass

from report_engine.formatters import format_count_delta, format_delta, format_duration_compact
from report_engine.interruptions import InterruptionStats
from report_engine.metrics import SummaryMetrics
from report_engine.planning import PlanningInsight
from report_engine.task_metrics import TaskRangeComputation
from report_engine.timeutils import MS_IN_MINUTE, resolve_now, to_local_datetime

PERIOD_LABELS = {
    "day": "vs yesterday",
    "week": "vs last week",
    "month": "vs last month",
    "year": "vs last year",
}

BEHIND_PLAN_MINUTES = 5
AHEAD_OF_PLAN_MINUTES = 10
TOP_PLANNED_LIMIT = 6
DEFAULT_DUE_WARNING_MINUTES = 6 * 60
DEFAULT_DUE_DANGER_MINUTES = 60


@dataclass(frozen=True)
class HighlightCard:
    id: str
    label: str
    value: str
    delta_label: str
    trend: str
    helper: str | None = None


@dataclass(frozen=True)
class PlannedTaskRow:
    task_name: str
    actual_minutes: float
    planned_minutes: float | None = None
    variance_minutes: float | None = None
    due_status: str | None = None
    due_label: str | None = None


def build_highlights(
    summary: SummaryMetrics,
    task_ranges: dict[str, TaskRangeComputation],
    granularity: str,
    interruptions: InterruptionStats,
) -> list[HighlightCard]:
    """Focus, new-task, completed-task and interruption cards with deltas vs the previous period."""

    focus = summary.item("task")
    interrupt = summary.item("interrupt")
    if focus is None or interrupt is None:
        return []

    period = PERIOD_LABELS[granularity]
    current = task_ranges["current"].totals
    previous = task_ranges["previous"].totals

    focus_delta, focus_trend = format_delta(focus.delta_duration)
    new_delta, new_trend = format_count_delta(current.new_count - previous.new_count)
    completed_delta, completed_trend = format_count_delta(current.completed_count - previous.completed_count)
    interrupt_delta, interrupt_trend = format_delta(interrupt.delta_duration)

    return [
        HighlightCard(
            id="focus",
            label="Working time" if granularity == "day" else "Focus time",
            value=format_duration_compact(focus.total_duration),
            delta_label=f"{period} {focus_delta}",
            trend=focus_trend,
            helper=f"{focus.total_count} sessions",
        ),
        HighlightCard(
            id="new_tasks",
            label="New tasks",
            value=str(current.new_count),
            delta_label=f"{period} {new_delta}",
            trend=new_trend,
        ),
        HighlightCard(
            id="completed_tasks",
            label="Completed tasks",
            value=str(current.completed_count),
            delta_label=f"{period} {completed_delta}",
            trend=completed_trend,
            helper=f"{current.backlog_end} open",
        ),
        HighlightCard(
            id="interrupt",
            label="Interruptions",
            value=str(interruptions.total_count),
            delta_label=f"{period} {interrupt_delta}",
            trend=interrupt_trend,
            helper=f"{format_duration_compact(interrupt.total_duration)} total",
        ),
    ]


def build_text_highlights(
    insights: list[PlanningInsight],
    interruptions: InterruptionStats,
    summary: SummaryMetrics,
) -> list[str]:
    """Short sentences for the furthest-behind and furthest-ahead tasks and the period totals."""

    lines = []
    with_variance = [item for item in insights if item.variance_minutes is not None]

    behind = [item for item in with_variance if item.variance_minutes > BEHIND_PLAN_MINUTES]
    if behind:
        task = max(behind, key=lambda item: item.variance_minutes)
        lines.append(f"'{task.task_name}' is about {round(task.variance_minutes)}m behind plan.")

    ahead = [item for item in with_variance if item.variance_minutes < -AHEAD_OF_PLAN_MINUTES]
    if ahead:
        task = min(ahead, key=lambda item: item.variance_minutes)
        lines.append(f"'{task.task_name}' is ahead of plan ({abs(round(task.variance_minutes))}m).")

    if interruptions.total_count > 0:
        minutes = round(interruptions.total_duration / MS_IN_MINUTE)
        lines.append(f"{interruptions.total_count} interruptions ({minutes}m total).")

    focus = summary.item("task")
    focus_minutes = focus.total_duration / MS_IN_MINUTE if focus is not None else 0
    if focus_minutes > 0:
        lines.append(f"Focused work came to {round(focus_minutes)}m.")
    return lines


def due_status(
    due_at: int | None,
    now: int | None = None,
    warning_minutes: float = DEFAULT_DUE_WARNING_MINUTES,
    danger_minutes: float = DEFAULT_DUE_DANGER_MINUTES,
) -> str | None:
    """``danger`` when past due or within ``danger_minutes``, ``warning`` within ``warning_minutes``."""

    if not due_at:
        return None
    remaining = (due_at - resolve_now(now)) / MS_IN_MINUTE
    if remaining <= danger_minutes:
        return "danger"
    if remaining <= warning_minutes:
        return "warning"
    return "neutral"


def format_due_label(due_at: int) -> str:
    return to_local_datetime(due_at).strftime("%m/%d %H:%M")


def build_top_planned_tasks(
    insights: list[PlanningInsight],
    now: int | None = None,
    limit: int = TOP_PLANNED_LIMIT,
    warning_minutes: float = DEFAULT_DUE_WARNING_MINUTES,
    danger_minutes: float = DEFAULT_DUE_DANGER_MINUTES,
) -> list[PlannedTaskRow]:
    """Earliest-due insights first, undated ones last."""

    current = resolve_now(now)
    ordered = sorted(insights, key=lambda item: (item.due_at is None, item.due_at or 0))
    return [
        PlannedTaskRow(
            task_name=item.task_name,
            actual_minutes=item.actual_minutes,
            planned_minutes=item.planned_minutes,
            variance_minutes=item.variance_minutes,
            due_status=due_status(item.due_at, current, warning_minutes, danger_minutes),
            due_label=format_due_label(item.due_at) if item.due_at else None,
        )
        for item in ordered[: max(0, limit)]
    ]
