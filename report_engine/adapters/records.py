"""Validation shared by the file adapters: raw field mappings to typed records."""

from __future__ import annotations

from report_engine.schema import (
    BREAK_TYPES,
    EVENT_TYPES,
    URGENCY_LEVELS,
    BreakEvent,
    Category,
    Event,
    InterruptEvent,
    TaskEvent,
    TaskLifecycleRecord,
)
from report_engine.timeutils import parse_timestamp

_REQUIRED_FIELDS = ("id", "type", "start")


def _text(value) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _timestamp(value, name: str, where: str) -> int | None:
    if value in (None, ""):
        return None
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{where}: malformed timestamp in '{name}'") from exc


def _number(value, name: str, where: str) -> float | None:
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{where}: invalid {name}") from exc


def _integer(value, name: str, where: str) -> int | None:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{where}: invalid {name}") from exc


def _choice(value, allowed: tuple[str, ...], name: str, where: str) -> str | None:
    text = _text(value)
    if text is None:
        return None
    text = text.strip()
    if text not in allowed:
        raise ValueError(f"{where}: invalid {name} '{text}'")
    return text


def _flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


def build_event(values: dict, where: str) -> Event:
    """Validate a flat mapping of snake_case fields and build the matching event variant."""

    missing = [name for name in _REQUIRED_FIELDS if values.get(name) in (None, "")]
    if missing:
        raise ValueError(f"{where}: missing required fields {missing}")

    event_type = str(values["type"]).strip()
    if event_type not in EVENT_TYPES:
        raise ValueError(f"{where}: invalid type '{event_type}'")

    start = _timestamp(values["start"], "start", where)
    end = _timestamp(values.get("end"), "end", where)
    if end is not None and end < start:
        raise ValueError(f"{where}: end is before start")

    common = {
        "id": str(values["id"]).strip(),
        "start": start,
        "end": end,
        "label": _text(values.get("label")),
        "category_id": _text(values.get("category_id")),
        "memo": _text(values.get("memo")),
    }

    if event_type == "task":
        return TaskEvent(
            **common,
            my_task_id=_text(values.get("my_task_id")),
            is_unknown_activity=_flag(values.get("is_unknown_activity")),
        )
    if event_type == "interrupt":
        return InterruptEvent(
            **common,
            who=_text(values.get("who")),
            interrupt_type=_text(values.get("interrupt_type")),
            urgency=_choice(values.get("urgency"), URGENCY_LEVELS, "urgency", where),
        )
    return BreakEvent(
        **common,
        break_type=_choice(values.get("break_type"), BREAK_TYPES, "break_type", where),
        break_duration_minutes=_number(values.get("break_duration_minutes"), "break_duration_minutes", where),
    )


def build_category(values: dict, where: str) -> Category:
    missing = [name for name in ("id", "name") if not values.get(name)]
    if missing:
        raise ValueError(f"{where}: missing required fields {missing}")
    return Category(
        id=str(values["id"]),
        name=str(values["name"]).strip(),
        color=str(values.get("color") or ""),
        order=_integer(values.get("order"), "order", where) or 0,
    )


def build_ledger_record(values: dict, where: str) -> TaskLifecycleRecord:
    missing = [name for name in ("id", "created_at") if values.get(name) in (None, "")]
    if missing:
        raise ValueError(f"{where}: missing required fields {missing}")
    return TaskLifecycleRecord(
        id=str(values["id"]),
        name=str(values.get("name") or ""),
        created_at=_timestamp(values["created_at"], "created_at", where),
        created_category_id=_text(values.get("created_category_id")),
        created_category_name=_text(values.get("created_category_name")),
        latest_category_id=_text(values.get("latest_category_id")),
        latest_category_name=_text(values.get("latest_category_name")),
        latest_planned_minutes=_number(values.get("latest_planned_minutes"), "latest_planned_minutes", where),
        latest_due_at=_timestamp(values.get("latest_due_at"), "latest_due_at", where),
        completed_at=_timestamp(values.get("completed_at"), "completed_at", where),
        completed_category_id=_text(values.get("completed_category_id")),
        completed_category_name=_text(values.get("completed_category_name")),
        canceled_at=_timestamp(values.get("canceled_at"), "canceled_at", where),
        canceled_category_id=_text(values.get("canceled_category_id")),
        canceled_category_name=_text(values.get("canceled_category_name")),
    )
