from datetime import date, datetime

from report_engine.categories import DEFAULT_CATEGORY_NAME
from report_engine.category_series import UNCATEGORIZED_KEY, build_category_series
from report_engine.daykeys import create_range
from report_engine.schema import BreakEvent, Category, TaskEvent, TaskLifecycleRecord


def _ms(*args) -> int:
    return int(datetime(*args).timestamp() * 1000)


def test_minutes_per_category_filled_on_every_day():
    categories = [Category("work", "Work", "#0000ff")]
    ledger = {"t": TaskLifecycleRecord("t", "Linked", created_at=0, latest_category_name="Side project")}
    events = [
        TaskEvent("e1", _ms(2025, 1, 6, 9), _ms(2025, 1, 6, 10), category_id="work"),
        TaskEvent("e2", _ms(2025, 1, 6, 23, 30), _ms(2025, 1, 7, 0, 30), category_id="work"),
        TaskEvent("e3", _ms(2025, 1, 7, 14), _ms(2025, 1, 7, 14, 45)),
        BreakEvent("b1", _ms(2025, 1, 7, 12), _ms(2025, 1, 7, 13)),
        TaskEvent("e4", _ms(2025, 1, 7, 15), _ms(2025, 1, 7, 15, 10), my_task_id="t"),
    ]
    series = build_category_series(
        events, ledger, categories, create_range(date(2025, 1, 6), date(2025, 1, 8)), now=_ms(2025, 1, 9)
    )

    assert [(meta.key, meta.name, meta.color) for meta in series.categories] == [
        ("work", "Work", "#0000ff"),
        (UNCATEGORIZED_KEY, DEFAULT_CATEGORY_NAME, None),
    ]
    assert [datum.label for datum in series.data] == ["Mon", "Tue", "Wed"]
    assert series.data[0].values == {"work": 90.0, UNCATEGORIZED_KEY: 0.0}
    # the linked task without a category id shares the uncategorized column
    assert series.data[1].values == {"work": 30.0, UNCATEGORIZED_KEY: 55.0}
    assert series.data[1].total_minutes == 85.0
    assert series.data[2].values == {"work": 0.0, UNCATEGORIZED_KEY: 0.0}
    assert series.data[2].total_minutes == 0.0


def test_no_task_events_gives_empty_categories():
    series = build_category_series([], {}, [], create_range(date(2025, 1, 6), date(2025, 1, 7)), now=0)
    assert series.categories == []
    assert [datum.values for datum in series.data] == [{}, {}]
