"""Demo script for the activity report engine."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from report_engine.adapters.csv_adapter import parse
from report_engine.formatters import format_duration_compact
from report_engine.report import build_report


def main() -> None:
    events = parse("examples/sample_events.csv")
    now = max(event.end or event.start for event in events)
    report = build_report(events, "2025-01-07", granularity="week", now=now)

    print("Period:", report.range_label)
    for item in report.summary.items:
        print(f"{item.label}: {format_duration_compact(item.total_duration)} in {item.total_count} sessions")
    print("Peak interruption hour:", report.interruptions.peak_hour_label)
    print("Top contributors:", [(c.label, c.count) for c in report.interruptions.top_contributors])
    print("Tasks on", report.selected_key, [(row.name, row.event_count) for row in report.task_details])


if __name__ == "__main__":
    main()
