from datetime import date, datetime

from report_engine.daykeys import create_range
from report_engine.pro_summary import build_weekly_pro_summary
from report_engine.schema import InterruptEvent, TaskEvent

MINUTE = 60 * 1000
WEEK = create_range(date(2025, 1, 6), date(2025, 1, 12))


def _ms(*args) -> int:
    return int(datetime(*args).timestamp() * 1000)


def test_standout_days_and_longest_session():
    events = [
        TaskEvent("t1", _ms(2025, 1, 6, 9), _ms(2025, 1, 6, 10)),
        TaskEvent("t2", _ms(2025, 1, 7, 22), _ms(2025, 1, 8, 1), label="Night shift"),
        TaskEvent("t3", _ms(2025, 1, 8, 9), _ms(2025, 1, 8, 11)),
        TaskEvent("t0", _ms(2025, 1, 3, 8), _ms(2025, 1, 3, 20), label="Outside"),
        InterruptEvent("i1", _ms(2025, 1, 6, 11), _ms(2025, 1, 6, 11, 5)),
        InterruptEvent("i2", _ms(2025, 1, 9, 11), _ms(2025, 1, 9, 11, 5)),
        InterruptEvent("i3", _ms(2025, 1, 9, 15), _ms(2025, 1, 9, 15, 5)),
    ]
    summary = build_weekly_pro_summary(events, WEEK, now=_ms(2025, 1, 13))

    assert str(summary.top_focus_day.day_key) == "2025-01-08"
    assert summary.top_focus_day.duration_ms == 180 * MINUTE
    assert str(summary.most_interrupt_day.day_key) == "2025-01-09"
    assert summary.most_interrupt_day.count == 2
    assert summary.longest_focus.label == "Night shift"
    assert summary.longest_focus.duration_ms == 180 * MINUTE


def test_ties_go_to_the_earliest_day_and_unlabeled_focus_gets_default():
    events = [
        TaskEvent("t1", _ms(2025, 1, 6, 9), _ms(2025, 1, 6, 10)),
        TaskEvent("t2", _ms(2025, 1, 7, 9), _ms(2025, 1, 7, 10), label="Second"),
        InterruptEvent("i1", _ms(2025, 1, 8, 9), _ms(2025, 1, 8, 9, 5)),
        InterruptEvent("i2", _ms(2025, 1, 7, 9), _ms(2025, 1, 7, 9, 5)),
    ]
    summary = build_weekly_pro_summary(events, WEEK, now=_ms(2025, 1, 13))

    assert str(summary.top_focus_day.day_key) == "2025-01-06"
    assert str(summary.most_interrupt_day.day_key) == "2025-01-07"
    assert summary.longest_focus.label == "Task"


def test_empty_week():
    summary = build_weekly_pro_summary([], WEEK, now=_ms(2025, 1, 13))
    assert summary.top_focus_day is None
    assert summary.most_interrupt_day is None
    assert summary.longest_focus is None
