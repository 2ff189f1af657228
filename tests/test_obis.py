import pytest

from vzlogger.obis import DC, Obis, ObisAlias, get_aliases, lookup_alias
from vzlogger.options import VZError


def test_parse_full_form():
    assert Obis.from_string("1-0:1.8.1*255") == Obis(1, 0, 1, 8, 1, 255)


def test_parse_ampersand_separator():
    assert Obis.from_string("1-0:1.8.2&255") == Obis(1, 0, 1, 8, 2, 255)


def test_parse_only_mandatory_fields():
    obis = Obis.from_string("1.8")
    assert obis.indicator == 1
    assert obis.mode == 8
    assert obis.media == DC and obis.channel == DC
    assert obis.quantities == DC and obis.storage == DC


def test_parse_special_character():
    obis = Obis.from_string("C.1")
    assert obis.indicator == 96
    assert obis.mode == 1


@pytest.mark.parametrize(
    "text", ["", "1", "abc", "CC.8", "1C.8", "F1.8", "256.8", "1-0:1.8.0*1*2", "1.8-0"]
)
def test_parse_invalid_raises(text):
    with pytest.raises(VZError):
        Obis.from_string(text)


def test_parse_alias():
    assert Obis.from_string("power") == Obis(1, 0, 1, 7, DC, DC)
    assert Obis.from_string("lg-counter-ht") == Obis(255, 255, 16, 8, 1, 255)


def test_alias_lookup_is_case_sensitive():
    assert lookup_alias("counter") == Obis(1, 0, 1, 8, DC, DC)
    assert lookup_alias("COUNTER") is None


def test_unknown_alias_raises():
    with pytest.raises(VZError):
        Obis.from_string("no-such-alias")


def test_unparse_format():
    assert Obis(1, 0, 1, 8, 0, 255).unparse() == "1-0:1.8.0*255"


def test_str_matches_unparse():
    obis = Obis(1, 0, 96, 50, 0, 7)
    assert str(obis) == obis.unparse()


@pytest.mark.parametrize("alias", get_aliases(), ids=lambda a: a.name)
def test_alias_round_trip(alias):
    assert isinstance(alias, ObisAlias)
    assert Obis.from_string(alias.id.unparse()) == alias.id
    assert lookup_alias(alias.name) == alias.id


def test_aliases_are_unique_and_given():
    names = [a.name for a in get_aliases()]
    assert len(names) == len(set(names))
    assert all(not a.id.is_all_not_given() for a in get_aliases())


def test_all_not_given():
    assert Obis().is_all_not_given()
    assert Obis(DC, DC, DC, DC, DC, DC).is_all_not_given()
    assert not Obis(1, DC, DC, DC, DC, DC).is_all_not_given()


def test_equality_treats_dc_as_value():
    assert Obis(1, 0, 1, 8, 0, DC) != Obis(1, 0, 1, 8, 0, 0)


def test_is_valid():
    assert Obis(1, 0, 1, 8, 0, DC).is_valid()
    assert Obis(9, 64, 1, 8, 0, 99).is_valid()
    assert not Obis(10, 0, 1, 8, 0, DC).is_valid()
    assert not Obis(1, 65, 1, 8, 0, DC).is_valid()
    assert not Obis(1, 0, 1, 8, 0, 100).is_valid()


def test_is_manufacturer_specific():
    assert not Obis(1, 0, 1, 8, 0, DC).is_manufacturer_specific()
    assert Obis(1, 0, 240, 8, 0, DC).is_manufacturer_specific()
    assert Obis(1, 129, 1, 8, 0, DC).is_manufacturer_specific()
    assert Obis(1, 0, 1, 8, 128, DC).is_manufacturer_specific()
    assert not Obis(1, 0, 1, 255, 255, 255).is_manufacturer_specific()


def test_value_range_enforced():
    with pytest.raises(ValueError):
        Obis(256, 0, 1, 8, 0, 0)
    with pytest.raises(ValueError):
        Obis(1, -1, 1, 8, 0, 0)