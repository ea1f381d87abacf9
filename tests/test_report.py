import json
import logging
from datetime import datetime
from pathlib import Path

import pytest

from report_engine.adapters.csv_adapter import parse
from report_engine.report import build_report, report_to_dict
from report_engine.schema import Category, TaskEvent, TaskLifecycleRecord

MINUTE = 60 * 1000
SAMPLE = Path(__file__).resolve().parents[1] / "examples" / "sample_events.csv"
NOW = int(datetime(2025, 1, 8, 9).timestamp() * 1000)


def load_sample():
    return parse(str(SAMPLE))


def test_week_report_totals():
    report = build_report(load_sample(), "2025-01-07", granularity="week", now=NOW)

    assert report.range_label == "1/6 - 1/12"
    task = report.summary.item("task")
    assert task.total_count == 5
    assert task.total_duration == 525 * MINUTE
    assert task.delta_count == 4
    assert report.summary.item("interrupt").total_duration == 75 * MINUTE
    assert report.summary.item("break").total_count == 2

    stats = report.interruptions
    assert stats.total_count == 4
    assert stats.peak_hour_label == "10:00 - 11:00"
    assert [(c.label, c.count) for c in stats.top_contributors] == [("Alice", 2), ("Bob", 1), ("Unspecified", 1)]

    assert len(report.trend) == 7
    assert str(report.trend[-1].date_key) == "2025-01-12"
    assert len(report.heatmap) == 7
    assert report.planning is None
    assert report.anomalies == []


def test_selected_day_views_use_fragments():
    report = build_report(load_sample(), "2025-01-07", granularity="day", now=NOW)

    assert [(row.name, row.total_duration_ms) for row in report.task_details] == [
        ("Code review", 120 * MINUTE),
        ("Release prep", 60 * MINUTE),
    ]
    assert [segment.id for segment in report.timeline.segments] == ["e8", "e9", "e10", "e11"]
    assert report.timeline.segments[0].duration_minutes == 60.0
    assert report.summary.item("task").total_duration == 180 * MINUTE
    assert report.summary.item("task").delta_count == -2
    assert len(report.trend) == 7
    assert str(report.trend[-1].date_key) == "2025-01-07"
    assert [row.label for row in report.interruption_details] == ["Alice"]


def test_report_serializes_to_json():
    report = build_report(load_sample(), "2025-01-07", granularity="week", now=NOW)
    payload = report_to_dict(report)

    text = json.dumps(payload)
    assert payload["selected_key"] == "2025-01-07"
    assert payload["timeline"]["segments"][0]["type"] == "task"
    assert "task_ranges" in json.loads(text)


def test_report_is_deterministic():
    first = build_report(load_sample(), "2025-01-07", granularity="month", now=NOW)
    second = build_report(load_sample(), "2025-01-07", granularity="month", now=NOW)
    assert report_to_dict(first) == report_to_dict(second)


def test_invalid_granularity():
    with pytest.raises(ValueError):
        build_report(load_sample(), "2025-01-07", granularity="decade", now=NOW)


def test_anomalies_logged(caplog):
    events = [TaskEvent("long", NOW - 20 * 60 * MINUTE, NOW - MINUTE)]
    with caplog.at_level(logging.WARNING, logger="report_engine.report"):
        report = build_report(events, "2025-01-08", now=NOW)
    assert [item.event.id for item in report.anomalies] == ["long"]
    assert "suspicious" in caplog.text


def load_log():
    events = load_sample() + [
        TaskEvent("e13", _ms(2025, 1, 7, 13), _ms(2025, 1, 7, 14), label="Spec", my_task_id="spec"),
    ]
    ledger = {
        "spec": TaskLifecycleRecord(
            "spec",
            "Spec",
            created_at=_ms(2025, 1, 7, 8),
            created_category_id="work",
            latest_category_id="work",
            latest_planned_minutes=30,
            latest_due_at=_ms(2025, 1, 7, 17),
            completed_at=_ms(2025, 1, 7, 14),
        ),
    }
    return events, ledger, [Category("work", "Work", "#0000ff")]


def _ms(*args) -> int:
    return int(datetime(*args).timestamp() * 1000)


def test_week_report_with_ledger_covers_every_section():
    events, ledger, categories = load_log()
    report = build_report(events, "2025-01-07", granularity="week", ledger=ledger, categories=categories, now=NOW)

    assert [card.id for card in report.highlights] == ["focus", "new_tasks", "completed_tasks", "interrupt"]
    assert report.highlights[1].value == "1"
    assert report.text_highlights[0] == "'Spec' is about 30m behind plan."
    assert [(row.task_name, row.due_status) for row in report.top_planned_tasks] == [("Spec", "danger")]

    assert [entry.task_id for entry in report.task_changes.created] == ["spec"]
    assert report.task_changes.completed[0].category_name == "Work"
    assert report.task_changes.completed[0].focus_duration_ms == 60 * MINUTE

    assert [meta.key for meta in report.category_series.categories] == ["uncategorized", "work"]
    assert report.category_series.data[0].values == {"uncategorized": 345.0, "work": 0.0}
    assert report.category_series.data[1].values == {"uncategorized": 180.0, "work": 60.0}

    summary = report.pro_summary
    assert str(summary.top_focus_day.day_key) == "2025-01-06"
    assert summary.top_focus_day.duration_ms == 345 * MINUTE
    assert summary.most_interrupt_day.count == 3
    assert summary.longest_focus.label == "Release prep"

    assert len(report.task_points) == 7
    assert report.task_points[1].new_count == 1
    assert report.task_points[1].net_count == 0


def test_year_report_uses_monthly_task_points():
    events, ledger, categories = load_log()
    report = build_report(events, "2025-01-07", granularity="year", ledger=ledger, categories=categories, now=NOW)
    assert [point.month_key for point in report.task_points][:2] == ["2025-01", "2025-02"]
    assert len(report.task_points) == 12
    assert report.task_points[0].completed_count == 1


def test_report_with_ledger_is_deterministic_and_leaves_inputs_alone():
    events, ledger, categories = load_log()
    first = build_report(events, "2025-01-07", granularity="week", ledger=ledger, categories=categories, now=NOW)

    fresh_events, fresh_ledger, fresh_categories = load_log()
    second = build_report(
        fresh_events, "2025-01-07", granularity="week", ledger=fresh_ledger, categories=fresh_categories, now=NOW
    )

    assert report_to_dict(first) == report_to_dict(second)
    assert (events, ledger, categories) == load_log()
    json.dumps(report_to_dict(first))
