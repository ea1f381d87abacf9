"""Build every report read-model for a selected day and granularity."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, is_dataclass
from datetime import date

from report_engine.anomalies import AnomalyItem, build_anomalies
from report_engine.categories import CategoryStats, compute_category_stats
from report_engine.category_series import CategorySeries, build_category_series
from report_engine.collector import collect, collect_day
from report_engine.day_details import (
    DailyInterruptionDetailRow,
    DailyTaskDetailRow,
    build_daily_interruption_details,
    build_daily_task_details,
)
from report_engine.daykeys import DateRange, DayKey, as_day_key, build_range_info
from report_engine.formatters import format_range_label
from report_engine.highlights import (
    HighlightCard,
    PlannedTaskRow,
    build_highlights,
    build_text_highlights,
    build_top_planned_tasks,
)
from report_engine.interruptions import InterruptionStats, compute_interruption_stats
from report_engine.metrics import (
    DEFAULT_TREND_DAYS,
    SummaryMetrics,
    TrendDatum,
    compute_daily_trend,
    compute_summary_metrics,
)
from report_engine.planning import (
    PlanningAggregates,
    PlanningInsight,
    build_planning_insights,
    compute_planning_aggregates,
)
from report_engine.pro_summary import WeeklyProSummary, build_weekly_pro_summary
from report_engine.schema import Category, Event, TaskLifecycleRecord
from report_engine.segmentation import build_index
from report_engine.task_changes import TaskDailyChanges, build_task_daily_changes
from report_engine.task_metrics import (
    TaskRangeComputation,
    TaskWeeklyPoint,
    TaskYearlyPoint,
    build_task_range_data,
    build_weekly_task_points,
    build_yearly_task_points,
)
from report_engine.time_series import (
    HeatmapRow,
    HourlyTrendPoint,
    WeeklyActivityPoint,
    build_heatmap,
    build_hourly_trend,
    build_weekly_activity,
)
from report_engine.timeline import TimelineData, build_timeline
from report_engine.timeutils import resolve_now

logger = logging.getLogger(__name__)

REPORT_ANOMALY_LIMIT = 5
CONTRIBUTOR_LIMIT = 3


@dataclass(frozen=True)
class Report:
    selected_key: DayKey
    granularity: str
    range_label: str
    current_range: DateRange
    previous_range: DateRange
    summary: SummaryMetrics
    interruptions: InterruptionStats
    task_details: list[DailyTaskDetailRow]
    interruption_details: list[DailyInterruptionDetailRow]
    timeline: TimelineData
    trend: list[TrendDatum]
    weekly_activity: list[WeeklyActivityPoint]
    task_ranges: dict[str, TaskRangeComputation]
    task_points: list[TaskWeeklyPoint] | list[TaskYearlyPoint]
    task_changes: TaskDailyChanges
    category_stats: list[CategoryStats]
    category_series: CategorySeries
    planning_insights: list[PlanningInsight]
    planning: PlanningAggregates | None
    top_planned_tasks: list[PlannedTaskRow]
    highlights: list[HighlightCard]
    text_highlights: list[str]
    pro_summary: WeeklyProSummary
    hourly_trend: list[HourlyTrendPoint]
    heatmap: list[HeatmapRow]
    anomalies: list[AnomalyItem]


def build_report(
    events: list[Event],
    selected_key,
    granularity: str = "day",
    ledger: dict[str, TaskLifecycleRecord] | None = None,
    categories: list[Category] | None = None,
    now: int | None = None,
) -> Report:
    """Segment the log once and derive all read-models for the selected period.

    Summary, interruption, category, planning and highlight figures cover
    the whole period; daily details, task changes, the timeline and the
    hourly trend cover the selected day only.
    """

    current_time = resolve_now(now)
    ledger = ledger or {}
    categories = categories or []
    selected = as_day_key(selected_key)
    ranges = build_range_info(selected, granularity)

    index = build_index(events, now=current_time)
    current_events = collect(index, ranges.current)
    previous_events = collect(index, ranges.previous)
    day_events = collect_day(index, selected)
    logger.debug(
        "Report %s/%s: %d current, %d previous, %d selected-day entries",
        selected,
        granularity,
        len(current_events),
        len(previous_events),
        len(day_events),
    )

    summary = compute_summary_metrics(current_events, previous_events, now=current_time)
    trend_days = DEFAULT_TREND_DAYS if granularity == "day" else len(ranges.current.days)
    trend_end = selected if granularity == "day" else ranges.current.end_key
    trend = compute_daily_trend(index, trend_end, days=trend_days, now=current_time)

    interruptions = compute_interruption_stats(current_events, now=current_time, limit=CONTRIBUTOR_LIMIT)
    task_ranges = build_task_range_data(ledger, ranges.current, ranges.previous)
    if granularity == "year":
        task_points = build_yearly_task_points(task_ranges["current"], selected.value.year)
    else:
        task_points = build_weekly_task_points(task_ranges["current"].daily)

    insights = build_planning_insights(ledger, current_events, now=current_time)
    anomalies = build_anomalies(events, now=current_time, limit=REPORT_ANOMALY_LIMIT)
    if anomalies:
        logger.warning("Found %d suspicious events (future or longer than 12h)", len(anomalies))

    return Report(
        selected_key=selected,
        granularity=granularity,
        range_label=format_range_label(selected, granularity),
        current_range=ranges.current,
        previous_range=ranges.previous,
        summary=summary,
        interruptions=interruptions,
        task_details=build_daily_task_details(day_events, ledger, now=current_time),
        interruption_details=build_daily_interruption_details(day_events, now=current_time),
        timeline=build_timeline(day_events, categories),
        trend=trend,
        weekly_activity=build_weekly_activity(trend),
        task_ranges=task_ranges,
        task_points=task_points,
        task_changes=build_task_daily_changes(ledger, categories, selected, events, now=current_time),
        category_stats=compute_category_stats(ledger, categories, ranges.current, current_events, now=current_time),
        category_series=build_category_series(current_events, ledger, categories, ranges.current, now=current_time),
        planning_insights=insights,
        planning=compute_planning_aggregates(insights, summary.items, selected, now=current_time),
        top_planned_tasks=build_top_planned_tasks(insights, now=current_time),
        highlights=build_highlights(summary, task_ranges, granularity, interruptions),
        text_highlights=build_text_highlights(insights, interruptions, summary),
        pro_summary=build_weekly_pro_summary(events, ranges.current, now=current_time),
        hourly_trend=build_hourly_trend(day_events, now=current_time),
        heatmap=build_heatmap(index, selected, now=current_time),
        anomalies=anomalies,
    )


def _to_primitive(value):
    if isinstance(value, DayKey):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        payload = {item.name: _to_primitive(getattr(value, item.name)) for item in fields(value)}
        event_type = getattr(value, "type", None)
        if "type" not in payload and isinstance(event_type, str):
            payload["type"] = event_type
        return payload
    if isinstance(value, dict):
        return {str(key): _to_primitive(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_primitive(item) for item in value]
    return value


def report_to_dict(report: Report) -> dict:
    """Convert a report into JSON-serializable primitives."""

    return _to_primitive(report)
