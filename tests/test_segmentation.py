from datetime import datetime

from report_engine.daykeys import DayKey
from report_engine.schema import InterruptEvent, TaskEvent
from report_engine.segmentation import build_index, split_event

HOUR = 60 * 60 * 1000


def _ms(*args) -> int:
    return int(datetime(*args).timestamp() * 1000)


def _day(text: str) -> DayKey:
    return DayKey.parse(text)


def test_single_day_event_is_indexed_unmodified():
    event = TaskEvent("t1", _ms(2025, 1, 1, 9), _ms(2025, 1, 1, 10), label="Write")
    index = build_index([event], now=_ms(2025, 1, 2))
    assert list(index) == [_day("2025-01-01")]
    assert index[_day("2025-01-01")][0] is event


def test_event_crossing_midnight_is_split_per_day():
    event = TaskEvent("t1", _ms(2025, 1, 1, 23), _ms(2025, 1, 2, 1), label="Release")
    index = build_index([event], now=_ms(2025, 1, 3))

    first = index[_day("2025-01-01")][0]
    second = index[_day("2025-01-02")][0]
    assert first.id == second.id == "t1"
    assert first.split_ref_id == second.split_ref_id == "t1"
    assert (first.start, first.end) == (_ms(2025, 1, 1, 23), _ms(2025, 1, 2))
    assert (second.start, second.end) == (_ms(2025, 1, 2), _ms(2025, 1, 2, 1))
    assert first.label == "Release"
    assert event.split_ref_id is None


def test_fragments_sum_to_original_duration_and_stay_in_their_day():
    event = InterruptEvent("i1", _ms(2025, 1, 1, 22), _ms(2025, 1, 4, 2, 30), who="Alice")
    pieces = split_event(event, now=_ms(2025, 1, 5))

    assert [str(day) for day, _ in pieces] == ["2025-01-01", "2025-01-02", "2025-01-03", "2025-01-04"]
    assert sum(piece.end - piece.start for _, piece in pieces) == event.end - event.start
    for day, piece in pieces:
        day_start, day_end = day.bounds()
        assert day_start <= piece.start < day_end
        assert piece.end <= day_end
        assert piece.who == "Alice"


def test_event_ending_at_midnight_stays_on_one_day():
    event = TaskEvent("t1", _ms(2025, 1, 1, 22), _ms(2025, 1, 2))
    index = build_index([event], now=_ms(2025, 1, 3))
    assert list(index) == [_day("2025-01-01")]


def test_zero_duration_event_belongs_to_start_day():
    moment = _ms(2025, 1, 1, 12)
    index = build_index([TaskEvent("t1", moment, moment)], now=_ms(2025, 1, 3))
    assert list(index) == [_day("2025-01-01")]


def test_running_event_uses_now_for_day_membership():
    event = TaskEvent("t1", _ms(2025, 1, 1, 23))
    index = build_index([event], now=_ms(2025, 1, 2, 3))

    first = index[_day("2025-01-01")][0]
    last = index[_day("2025-01-02")][0]
    assert first.end == _ms(2025, 1, 2)
    assert last.start == _ms(2025, 1, 2)
    assert last.end is None
    assert last.split_ref_id == "t1"


def test_running_event_within_one_day_is_not_split():
    event = TaskEvent("t1", _ms(2025, 1, 2, 9))
    index = build_index([event], now=_ms(2025, 1, 2, 10))
    assert index[_day("2025-01-02")] == [event]


def test_empty_log_gives_empty_index():
    assert build_index([], now=_ms(2025, 1, 1)) == {}
