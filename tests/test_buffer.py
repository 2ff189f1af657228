import pytest

from vzlogger.buffer import AggMode, Buffer
from vzlogger.reading import Reading


def _buffer(mode, *pairs):
    buf = Buffer()
    buf.aggmode = mode
    for value, sec in pairs:
        buf.push(Reading(value, sec))
    return buf


def test_push_and_len():
    buf = _buffer(AggMode.NONE, (1.0, 1), (2.0, 2))
    assert len(buf) == 2
    assert [r.value for r in buf] == [1.0, 2.0]


def test_none_mode_leaves_readings():
    buf = _buffer(AggMode.NONE, (1.0, 1), (2.0, 2))
    buf.aggregate(0, False)
    assert [r.value for r in buf] == [1.0, 2.0]


def test_max_keeps_latest_with_maximum():
    buf = _buffer(AggMode.MAX, (1.0, 1), (3.0, 2), (2.0, 3))
    buf.aggregate(0, False)
    (only,) = list(buf)
    assert only.value == 3.0
    assert only.sec == 3


def test_sum():
    buf = _buffer(AggMode.SUM, (1.0, 1), (2.0, 2), (3.0, 3))
    buf.aggregate(0, False)
    (only,) = list(buf)
    assert only.value == 6.0
    assert only.sec == 3


def test_avg_single_reading_keeps_value():
    buf = _buffer(AggMode.AVG, (5.0, 1))
    buf.aggregate(0, False)
    assert [r.value for r in buf] == [5.0]


def test_avg_uses_previous_call_as_start():
    buf = _buffer(AggMode.AVG, (10.0, 0), (20.0, 1))
    buf.aggregate(0, False)
    assert [r.value for r in buf] == [10.0]

    buf.clean(False)
    buf.push(Reading(30.0, 2))
    buf.aggregate(0, False)
    # The span since the last reading of the previous call carries its value.
    assert [r.value for r in buf] == [20.0]


def test_avg_equal_spacing_equal_values_is_stable():
    buf = _buffer(AggMode.AVG, (4.0, 1), (4.0, 2), (4.0, 3))
    buf.aggregate(0, False)
    assert [r.value for r in buf] == [4.0]


def test_fixed_interval_truncates_time():
    buf = Buffer()
    buf.aggmode = AggMode.MAX
    buf.push(Reading(1.0, 25, 500000))
    buf.aggregate(10, True)
    (only,) = list(buf)
    assert (only.sec, only.usec) == (20, 0)


def test_fixed_interval_ignored_without_aggtime():
    buf = Buffer()
    buf.aggmode = AggMode.MAX
    buf.push(Reading(1.0, 25, 500000))
    buf.aggregate(0, True)
    (only,) = list(buf)
    assert (only.sec, only.usec) == (25, 500000)


def test_clean_deleted_only():
    buf = _buffer(AggMode.NONE, (1.0, 1), (2.0, 2))
    first = next(iter(buf))
    first.mark_delete()
    buf.clean()
    assert [r.value for r in buf] == [2.0]


def test_clean_all():
    buf = _buffer(AggMode.NONE, (1.0, 1), (2.0, 2))
    buf.clean(False)
    assert len(buf) == 0


def test_undelete():
    buf = _buffer(AggMode.NONE, (1.0, 1), (2.0, 2))
    for reading in buf:
        reading.mark_delete()
    buf.undelete()
    assert not any(r.deleted for r in buf)


def test_dump():
    buf = _buffer(AggMode.NONE, (1.0, 1), (2.5, 2))
    assert buf.dump() == "{1,2.5,}"


@pytest.mark.parametrize("mode", [AggMode.MAX, AggMode.SUM, AggMode.AVG])
def test_aggregate_empty_buffer(mode):
    buf = _buffer(mode)
    buf.aggregate(10, True)
    assert len(buf) == 0