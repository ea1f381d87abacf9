"""Core data schema for activity events and report inputs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

EVENT_TYPES = ("task", "interrupt", "break")
URGENCY_LEVELS = ("Low", "Medium", "High")
BREAK_TYPES = ("short", "coffee", "lunch", "custom", "indefinite")


@dataclass(frozen=True)
class _BaseEvent:
    """Fields shared by every event variant."""

    id: str
    start: int
    end: Optional[int] = None
    label: Optional[str] = None
    category_id: Optional[str] = None
    memo: Optional[str] = None
    split_ref_id: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self.end is None


@dataclass(frozen=True)
class TaskEvent(_BaseEvent):
    """Focus session, optionally linked to a task entity."""

    type: ClassVar[str] = "task"

    my_task_id: Optional[str] = None
    is_unknown_activity: bool = False


@dataclass(frozen=True)
class InterruptEvent(_BaseEvent):
    """Interruption raised by someone or something."""

    type: ClassVar[str] = "interrupt"

    who: Optional[str] = None
    interrupt_type: Optional[str] = None
    urgency: Optional[str] = None


@dataclass(frozen=True)
class BreakEvent(_BaseEvent):
    type: ClassVar[str] = "break"

    break_type: Optional[str] = None
    break_duration_minutes: Optional[float] = None


Event = Union[TaskEvent, InterruptEvent, BreakEvent]


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str
    order: int = 0


@dataclass(frozen=True)
class TaskLifecycleRecord:
    """Ledger entry tracking a task entity's name, category and planning over its lifetime."""

    id: str
    name: str
    created_at: int
    created_category_id: Optional[str] = None
    created_category_name: Optional[str] = None
    latest_category_id: Optional[str] = None
    latest_category_name: Optional[str] = None
    latest_planned_minutes: Optional[float] = None
    latest_due_at: Optional[int] = None
    completed_at: Optional[int] = None
    completed_category_id: Optional[str] = None
    completed_category_name: Optional[str] = None
    canceled_at: Optional[int] = None
    canceled_category_id: Optional[str] = None
    canceled_category_name: Optional[str] = None


@dataclass(frozen=True)
class EventLog:
    """An event log loaded together with the task ledger and categories it refers to."""

    events: list[Event]
    ledger: dict[str, TaskLifecycleRecord]
    categories: list[Category]
