import pytest

from vzlogger.buffer import AggMode
from vzlogger.channel import Channel
from vzlogger.options import InvalidTypeError, Option, VZError
from vzlogger.reading import Reading, StringIdentifier


def test_defaults():
    ch = Channel([], "volkszaehler", "bla_uuid")
    assert ch.buffer.aggmode is AggMode.NONE
    assert ch.duplicates == 0
    assert ch.uuid == "bla_uuid"
    assert ch.api_protocol == "volkszaehler"


@pytest.mark.parametrize(
    "text,mode",
    [("max", AggMode.MAX), ("AVG", AggMode.AVG), ("Sum", AggMode.SUM), ("none", AggMode.NONE)],
)
def test_aggmode(text, mode):
    ch = Channel([Option("aggmode", text)], "volkszaehler", "bla_uuid")
    assert ch.buffer.aggmode is mode


def test_unknown_aggmode():
    with pytest.raises(VZError, match="Aggmode unknown"):
        Channel([Option("aggmode", "median")], "volkszaehler", "bla_uuid")


def test_aggmode_wrong_type():
    with pytest.raises(InvalidTypeError):
        Channel([Option("aggmode", 1)], "volkszaehler", "bla_uuid")


def test_duplicates():
    ch = Channel([Option("duplicates", 10)], "bla_api", "bla_uuid")
    assert ch.duplicates == 10


def test_negative_duplicates():
    with pytest.raises(VZError, match="duplicates"):
        Channel([Option("duplicates", -1)], "bla_api", "bla_uuid")


def test_duplicates_wrong_type():
    with pytest.raises(InvalidTypeError):
        Channel([Option("duplicates", "ten")], "bla_api", "bla_uuid")


def test_names_follow_ids():
    first = Channel([], "bla_api", "bla_uuid")
    second = Channel([], "bla_api", "bla_uuid")
    assert second.id == first.id + 1
    assert first.name == f"chn{first.id}"


def test_push_goes_to_buffer():
    ch = Channel([], "bla_api", "bla_uuid", StringIdentifier("x"))
    reading = Reading(1.0, 1, 1)
    ch.push(reading)
    assert list(ch.buffer) == [reading]