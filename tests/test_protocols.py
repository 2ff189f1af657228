import pytest

from vzlogger.options import VZError
from vzlogger.protocols import (
    MeterDetails,
    MeterProtocol,
    get_details,
    get_protocols,
    lookup_protocol,
)


def test_lookup_is_case_insensitive():
    assert lookup_protocol("d0") is MeterProtocol.D0
    assert lookup_protocol("D0") is MeterProtocol.D0
    assert lookup_protocol("SmL") is MeterProtocol.SML
    assert lookup_protocol("SOS_S0") is MeterProtocol.SOS_S0


@pytest.mark.parametrize("name", ["unknown", "", None, "none"])
def test_lookup_unknown_raises(name):
    with pytest.raises(VZError):
        lookup_protocol(name)


@pytest.mark.parametrize("details", get_protocols(), ids=lambda d: d.name)
def test_names_round_trip(details):
    assert isinstance(details, MeterDetails)
    assert lookup_protocol(details.name) is details.id
    assert get_details(details.id) == details
    assert details.max_readings > 0


def test_details_from_table():
    d0 = get_details(MeterProtocol.D0)
    assert d0.desc == "DLMS/IEC 62056-21 plaintext protocol"
    assert d0.max_readings == 400
    assert get_details(MeterProtocol.RANDOM).max_readings == 1
    assert get_details(MeterProtocol.S0).desc == "S0-meter directly connected to RS232"


def test_none_has_no_details():
    assert get_details(MeterProtocol.NONE) is None
    assert all(d.id is not MeterProtocol.NONE for d in get_protocols())


def test_table_covers_every_real_protocol_once():
    ids = [d.id for d in get_protocols()]
    assert len(ids) == len(set(ids))
    assert set(ids) == set(MeterProtocol) - {MeterProtocol.NONE}