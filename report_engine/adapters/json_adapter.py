"""JSON adapter for activity event logs."""

from __future__ import annotations

import json
import logging
import re

from report_engine.adapters.records import build_category, build_event, build_ledger_record
from report_engine.schema import Event, EventLog

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _flatten(item: dict) -> dict:
    values = {_snake(key): value for key, value in item.items() if key != "meta"}
    meta = item.get("meta")
    if isinstance(meta, dict):
        values.update({_snake(key): value for key, value in meta.items()})
    return values


def _parse_events(items, label: str = "Item") -> list[Event]:
    if not isinstance(items, list):
        raise ValueError("JSON events must be a list of objects")
    events = []
    for index, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"{label} {index}: expected an object")
        events.append(build_event(_flatten(item), f"{label} {index}"))
    return events


def parse(file_path: str) -> list[Event]:
    """Parse a JSON file holding either a list of events or a full log object."""

    return parse_log(file_path).events


def parse_log(file_path: str) -> EventLog:
    """Parse events plus the optional ``taskLedger`` and ``categories`` of a stored log."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if isinstance(payload, list):
        log = EventLog(events=_parse_events(payload), ledger={}, categories=[])
    elif isinstance(payload, dict):
        ledger_raw = payload.get("taskLedger") or {}
        if not isinstance(ledger_raw, dict):
            raise ValueError("JSON taskLedger must be an object keyed by task id")
        categories_raw = payload.get("categories") or []
        if not isinstance(categories_raw, list):
            raise ValueError("JSON categories must be a list of objects")

        ledger = {}
        for task_id, record in ledger_raw.items():
            if not isinstance(record, dict):
                raise ValueError(f"Ledger entry '{task_id}': expected an object")
            values = {"id": task_id, **_flatten(record)}
            ledger[task_id] = build_ledger_record(values, f"Ledger entry '{task_id}'")
        categories = []
        for index, item in enumerate(categories_raw, start=1):
            if not isinstance(item, dict):
                raise ValueError(f"Category {index}: expected an object")
            categories.append(build_category(_flatten(item), f"Category {index}"))
        log = EventLog(
            events=_parse_events(payload.get("events", []), label="Event"),
            ledger=ledger,
            categories=categories,
        )
    else:
        raise ValueError("JSON payload must be a list of events or an object with 'events'")

    logger.debug(
        "Parsed %s: %d events, %d ledger entries, %d categories",
        file_path,
        len(log.events),
        len(log.ledger),
        len(log.categories),
    )
    return log
