"""Streamlit report viewer for the activity report engine."""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path
from typing import Any

from report_engine.adapters import csv_adapter, json_adapter
from report_engine.daykeys import GRANULARITIES
from report_engine.formatters import format_count_delta, format_delta, format_duration_compact
from report_engine.report import build_report
from report_engine.schema import EventLog
from report_engine.timeutils import to_local_datetime


def _parse_log_from_path(file_path: str) -> EventLog:
    suffix = Path(file_path).suffix.lower()
    if suffix == ".csv":
        return EventLog(events=csv_adapter.parse(file_path), ledger={}, categories=[])
    if suffix == ".json":
        return json_adapter.parse_log(file_path)
    raise ValueError("Unsupported file type. Please use .csv or .json")


def _parse_uploaded(uploaded_file) -> EventLog:
    suffix = Path(uploaded_file.name).suffix.lower()
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as handle:
        handle.write(uploaded_file.getbuffer())
        temp_path = handle.name
    return _parse_log_from_path(temp_path)


def _fmt_time(timestamp_ms: int | None) -> str:
    if timestamp_ms is None:
        return "-"
    return to_local_datetime(timestamp_ms).strftime("%Y-%m-%d %H:%M")


def _clock(timestamp_ms: int) -> str:
    return to_local_datetime(timestamp_ms).strftime("%H:%M")


def run_engine(log: EventLog, selected: str, granularity: str) -> dict[str, Any]:
    """Build the report and flatten it into UI-friendly tables."""

    report = build_report(
        log.events,
        selected,
        granularity=granularity,
        ledger=log.ledger,
        categories=log.categories,
    )

    summary_rows = []
    for item in report.summary.items:
        delta_label, trend = format_delta(item.delta_duration)
        count_label, _ = format_count_delta(item.delta_count)
        summary_rows.append(
            {
                "type": item.label,
                "time": format_duration_compact(item.total_duration),
                "sessions": item.total_count,
                "vs previous": f"{delta_label} / {count_label}",
                "trend": trend,
            }
        )

    contributors = [
        {
            "who": contributor.label,
            "count": contributor.count,
            "time": format_duration_compact(contributor.total_duration),
            "types": ", ".join(kind.label for kind in contributor.top_types),
        }
        for contributor in report.interruptions.top_contributors
    ]

    timeline_rows = [
        {
            "start": _clock(segment.start),
            "end": _clock(segment.end),
            "type": segment.type,
            "label": segment.label,
            "minutes": round(segment.duration_minutes, 1),
        }
        for segment in report.timeline.segments
    ]

    return {
        "report": report,
        "summary_rows": summary_rows,
        "contributors": contributors,
        "timeline_rows": timeline_rows,
        "task_rows": [
            {"task": row.name, "time": format_duration_compact(row.total_duration_ms), "sessions": row.event_count}
            for row in report.task_details
        ],
        "trend_rows": [
            {
                "day": day.label,
                "focus (h)": item.focus_hours,
                "interrupt (h)": item.interrupt_hours,
            }
            for day, item in zip(report.trend, report.weekly_activity)
        ],
    }


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Activity Report", layout="wide")
    st.title("Activity Report — Streamlit Viewer")

    with st.sidebar:
        st.header("Controls")
        uploaded = st.file_uploader("Upload event log", type=["csv", "json"])
        use_demo = st.checkbox("Load demo dataset", value=True)
        selected = st.date_input("Selected day", value=date(2025, 1, 7))
        granularity = st.selectbox("Granularity", options=list(GRANULARITIES), index=0)
        run = st.button("Build report", type="primary")

    if not run:
        st.info("Configure inputs in the sidebar and click **Build report**.")
        return

    try:
        if use_demo:
            log = _parse_log_from_path("examples/sample_events.csv")
            data_source = "demo dataset (examples/sample_events.csv)"
        elif uploaded is not None:
            log = _parse_uploaded(uploaded)
            data_source = f"uploaded file ({uploaded.name})"
        else:
            st.error("Please upload a CSV/JSON file or enable 'Load demo dataset'.")
            return

        if not log.events:
            st.error("No events were found in the selected input.")
            return

        result = run_engine(log, selected.isoformat(), granularity)
        report = result["report"]

        st.success(f"Loaded {len(log.events)} events from {data_source}.")

        st.subheader(f"A) Summary — {report.range_label}")
        st.table(result["summary_rows"])

        st.subheader("B) Interruptions")
        stats = report.interruptions
        c1, c2, c3 = st.columns(3)
        c1.metric("Interruptions", stats.total_count)
        c2.metric("Time", format_duration_compact(stats.total_duration))
        c3.metric("Peak hour", stats.peak_hour_label or "-")
        if result["contributors"]:
            st.table(result["contributors"])

        st.subheader(f"C) Timeline — {report.selected_key}")
        summary = report.timeline.summary
        t1, t2, t3 = st.columns(3)
        t1.metric("First start", _fmt_time(summary.first_start))
        t2.metric("Last end", _fmt_time(summary.last_end))
        t3.metric("Longest focus", summary.longest_focus.label if summary.longest_focus else "-")
        if result["timeline_rows"]:
            st.table(result["timeline_rows"])

        st.subheader("D) Tasks")
        if result["task_rows"]:
            st.table(result["task_rows"])
        else:
            st.write("No task sessions on the selected day.")

        st.subheader("E) Trend")
        st.bar_chart(result["trend_rows"], x="day")

        if report.planning is not None:
            st.subheader("F) Planning")
            p1, p2, p3 = st.columns(3)
            p1.metric("Focus rate", f"{report.planning.focus_rate * 100:.0f}%")
            p2.metric("Planning coverage", f"{report.planning.planning_coverage * 100:.0f}%")
            p3.metric("Overdue", len(report.planning.overdue))

        if report.anomalies:
            st.warning(f"{len(report.anomalies)} suspicious events (future or longer than 12h).")

    except ValueError as exc:
        st.error(f"Input error: {exc}")
    except Exception:
        st.error("Something went wrong while building the report. Please verify the input format.")


if __name__ == "__main__":
    main()
