from datetime import date, datetime

from report_engine.categories import DEFAULT_CATEGORY_NAME, TOTAL_KEY, compute_category_stats
from report_engine.daykeys import create_range
from report_engine.schema import Category, InterruptEvent, TaskEvent, TaskLifecycleRecord

MINUTE = 60 * 1000


def _ms(*args) -> int:
    return int(datetime(*args).timestamp() * 1000)


def test_counts_and_focus_per_category_with_total_row():
    categories = [Category("work", "Work", "#0000ff"), Category("home", "Home", "#00ff00")]
    ledger = {
        "w1": TaskLifecycleRecord(
            "w1", "Spec", created_at=_ms(2025, 1, 6, 9), created_category_id="work", latest_category_id="work"
        ),
        "w2": TaskLifecycleRecord(
            "w2",
            "Deploy",
            created_at=_ms(2025, 1, 6, 10),
            created_category_id="work",
            latest_category_id="work",
            completed_at=_ms(2025, 1, 6, 15),
        ),
        "h1": TaskLifecycleRecord(
            "h1", "Groceries", created_at=_ms(2025, 1, 6, 18), created_category_id="home", latest_category_id="home"
        ),
    }
    events = [
        TaskEvent("e1", _ms(2025, 1, 6, 9), _ms(2025, 1, 6, 10), my_task_id="w1"),
        TaskEvent("e2", _ms(2025, 1, 6, 18), _ms(2025, 1, 6, 18, 30), category_id="home"),
        TaskEvent("e3", _ms(2025, 1, 6, 20), _ms(2025, 1, 6, 20, 15)),
        InterruptEvent("i1", _ms(2025, 1, 6, 11), _ms(2025, 1, 6, 12), category_id="work"),
    ]

    rows = compute_category_stats(
        ledger, categories, create_range(date(2025, 1, 6), date(2025, 1, 6)), events, now=_ms(2025, 1, 7)
    )
    by_id = {row.category_id: row for row in rows}

    assert [row.category_id for row in rows] == ["work", "home", None, TOTAL_KEY]
    assert by_id["work"].new_count == 2
    assert by_id["work"].completed_count == 1
    assert by_id["work"].active_count == 1
    assert by_id["work"].focus_duration == 60 * MINUTE
    assert by_id["work"].color == "#0000ff"
    assert by_id["home"].category_name == "Home"
    assert by_id["home"].focus_duration == 30 * MINUTE
    assert by_id[None].category_name == DEFAULT_CATEGORY_NAME
    assert by_id[None].focus_duration == 15 * MINUTE

    total = rows[-1]
    assert total.new_count == 3
    assert total.completed_count == 1
    assert total.active_count == 2
    assert total.focus_duration == 105 * MINUTE


def test_empty_inputs_only_total_row():
    rows = compute_category_stats({}, [], create_range(date(2025, 1, 6), date(2025, 1, 6)), [], now=0)
    assert len(rows) == 1
    assert rows[0].category_id == TOTAL_KEY
    assert rows[0].new_count == 0
