from datetime import datetime

from report_engine.categories import DEFAULT_CATEGORY_NAME
from report_engine.schema import Category, InterruptEvent, TaskEvent, TaskLifecycleRecord
from report_engine.task_changes import build_task_daily_changes

MINUTE = 60 * 1000


def _ms(*args) -> int:
    return int(datetime(*args).timestamp() * 1000)


def sample_ledger():
    return {
        "a": TaskLifecycleRecord(
            "a",
            "Draft",
            created_at=_ms(2025, 1, 2, 8),
            created_category_id="work",
            latest_planned_minutes=45,
            latest_due_at=_ms(2025, 1, 3, 12),
        ),
        "b": TaskLifecycleRecord("b", "Errand", created_at=_ms(2025, 1, 2, 9), created_category_name="Personal"),
        "c": TaskLifecycleRecord(
            "c",
            "Ship",
            created_at=_ms(2025, 1, 1, 9),
            latest_category_id="work",
            completed_at=_ms(2025, 1, 2, 17),
        ),
        "d": TaskLifecycleRecord("d", "Elsewhere", created_at=_ms(2025, 1, 5, 9)),
    }


def test_created_and_completed_tasks_with_focus_inside_the_day():
    events = [
        TaskEvent("e1", _ms(2025, 1, 2, 9), _ms(2025, 1, 2, 9, 30), my_task_id="a"),
        TaskEvent("e2", _ms(2025, 1, 2, 10), _ms(2025, 1, 2, 11), my_task_id="b"),
        TaskEvent("e3", _ms(2025, 1, 1, 23), _ms(2025, 1, 2, 1), my_task_id="c"),
        InterruptEvent("i1", _ms(2025, 1, 2, 12), _ms(2025, 1, 2, 13)),
    ]
    categories = [Category("work", "Work", "#0000ff")]
    changes = build_task_daily_changes(sample_ledger(), categories, "2025-01-02", events, now=_ms(2025, 1, 3))

    assert [(entry.task_id, entry.focus_duration_ms) for entry in changes.created] == [
        ("b", 60 * MINUTE),
        ("a", 30 * MINUTE),
    ]
    draft = changes.created[1]
    assert (draft.category_name, draft.category_color) == ("Work", "#0000ff")
    assert draft.planned_minutes == 45
    assert draft.due_at == _ms(2025, 1, 3, 12)
    assert changes.created[0].category_name == "Personal"
    assert changes.created[0].category_color is None

    assert [entry.task_id for entry in changes.completed] == ["c"]
    assert changes.completed[0].category_name == "Work"
    assert changes.completed[0].focus_duration_ms == 60 * MINUTE


def test_running_event_counts_until_now_and_missing_category_uses_default():
    ledger = {"x": TaskLifecycleRecord("x", "Live", created_at=_ms(2025, 1, 2, 8))}
    events = [TaskEvent("e1", _ms(2025, 1, 2, 9), my_task_id="x")]
    changes = build_task_daily_changes(ledger, [], "2025-01-02", events, now=_ms(2025, 1, 2, 9, 20))

    assert changes.created[0].focus_duration_ms == 20 * MINUTE
    assert changes.created[0].category_name == DEFAULT_CATEGORY_NAME
    assert changes.completed == []


def test_quiet_day_has_no_changes():
    changes = build_task_daily_changes(sample_ledger(), [], "2025-01-04", [], now=_ms(2025, 1, 5))
    assert changes.created == []
    assert changes.completed == []
