"""CSV adapter for activity event logs."""

from __future__ import annotations

import csv
import logging

from report_engine.adapters.records import build_event
from report_engine.schema import Event

logger = logging.getLogger(__name__)

FIELDNAMES = (
    "id",
    "type",
    "start",
    "end",
    "label",
    "category_id",
    "memo",
    "my_task_id",
    "who",
    "interrupt_type",
    "urgency",
    "break_type",
    "break_duration_minutes",
)


def _parse_row(row: dict, row_number: int) -> Event:
    values = {key.strip(): value.strip() if isinstance(value, str) else value for key, value in row.items() if key}
    return build_event(values, f"Row {row_number}")


def parse(file_path: str) -> list[Event]:
    """Parse a CSV file with one event per row into typed events."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        unknown = sorted(set(reader.fieldnames) - set(FIELDNAMES))
        if unknown:
            logger.warning("Ignoring unknown CSV columns in %s: %s", file_path, unknown)

        events: list[Event] = []
        for row_number, row in enumerate(reader, start=2):
            events.append(_parse_row(row, row_number))

    logger.debug("Parsed %d events from %s", len(events), file_path)
    return events
