"""Build an activity report from a CSV/JSON event log."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from report_engine.adapters import csv_adapter, json_adapter
from report_engine.daykeys import GRANULARITIES, DayKey
from report_engine.report import build_report, report_to_dict
from report_engine.schema import EventLog


def _load_log(path: Path) -> EventLog:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return EventLog(events=csv_adapter.parse(str(path)), ledger={}, categories=[])
    if suffix == ".json":
        return json_adapter.parse_log(str(path))
    raise ValueError("Unsupported input format, expected .csv or .json")


def main() -> int:
    parser = argparse.ArgumentParser(description="Build an activity report from an event log")
    parser.add_argument("--data", required=True, help="Path to CSV/JSON events file")
    parser.add_argument("--date", default=date.today().isoformat(), help="Selected day (YYYY-MM-DD)")
    parser.add_argument("--granularity", choices=GRANULARITIES, default="day")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        log = _load_log(Path(args.data))
        report = build_report(
            log.events,
            DayKey.parse(args.date),
            granularity=args.granularity,
            ledger=log.ledger,
            categories=log.categories,
        )
    except ValueError as exc:
        print(f"Input error: {exc}", file=sys.stderr)
        return 2

    payload = report_to_dict(report)
    print(json.dumps(payload, indent=2, ensure_ascii=False))

    outputs_dir = Path("outputs")
    outputs_dir.mkdir(parents=True, exist_ok=True)
    out_path = outputs_dir / f"report_{args.date}_{args.granularity}.json"
    out_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"Saved report to {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
