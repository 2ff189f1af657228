"""OBIS identifiers as specified in DIN EN 62056-61."""

from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import Optional

from vzlogger.options import VZError

DC = 0xFF  # "not given"

# Special characters and their OBIS codes.
_SPECIAL_CHARS = {"C": 96, "F": 97, "L": 98, "P": 99}

_A, _B, _C, _D, _E, _F = range(6)


@dataclass(frozen=True)
class Obis:
    """An OBIS id made of the six value groups A to F."""

    media: int = DC
    channel: int = DC
    indicator: int = DC
    mode: int = DC
    quantities: int = DC
    storage: int = DC

    def __post_init__(self) -> None:
        for group in astuple(self):
            if not 0 <= group <= 255:
                raise ValueError(f"OBIS value group out of range: {group}")

    @classmethod
    def from_string(cls, text: str) -> "Obis":
        """Parse 'A-B:C.D.E*F' (A, B, E, F optional) or a known alias."""
        parsed = _parse(text)
        if parsed is not None:
            return parsed
        alias = lookup_alias(text)
        if alias is not None:
            return alias
        raise VZError("Parse ObisString failed.")

    def unparse(self) -> str:
        return "{}-{}:{}.{}.{}*{}".format(*astuple(self))

    def __str__(self) -> str:
        return self.unparse()

    def is_manufacturer_specific(self) -> bool:
        return (
            128 <= self.channel <= 199
            or 128 <= self.indicator <= 199
            or self.indicator == 240
            or 128 <= self.mode <= 254
            or 128 <= self.quantities <= 254
            or 128 <= self.storage <= 254
        )

    def is_all_not_given(self) -> bool:
        return self == Obis()

    def is_valid(self) -> bool:
        """Basic sanity check; C, D and E are not checked."""
        if not 0 <= self.media <= 9:
            return False
        if self.channel > 64:
            return False
        if self.storage != DC and self.storage > 99:
            return False
        return True


def _parse(text: str) -> Optional[Obis]:
    raw = [DC] * 6
    num = 0
    field = -1
    digit = 0
    has_sc = False

    for ch in text:
        digit += 1
        if "0" <= ch <= "9":
            if has_sc:
                return None
            num = num * 10 + int(ch)
        elif ch in _SPECIAL_CHARS:
            num = _SPECIAL_CHARS[ch]
            has_sc = True
            if digit > 1:
                return None
        else:
            if ch == "-" and field < _A:
                field = _A
            elif ch == ":" and field < _B:
                field = _B
            elif ch == "." and field < _D:
                field = _C if field < _C else _D
            elif ch in ("*", "&") and field == _D:
                field = _E
            else:
                return None
            if not 0 <= num <= 255:
                return None
            raw[field] = num
            num = 0
            digit = 0
            has_sc = False

    field += 1
    raw[field] = num & 0xFF
    if field < _D:
        return None
    return Obis(*raw)


@dataclass(frozen=True)
class ObisAlias:
    """A named, described OBIS id."""

    id: Obis
    name: str
    desc: str


_ALIASES = (
    # General
    ObisAlias(Obis(1, 0, 1, 7, DC, DC), "power", "Wirkleistung  (Summe)"),
    ObisAlias(Obis(1, 0, 21, 7, DC, DC), "power-l1", "Wirkleistung  (Phase 1)"),
    ObisAlias(Obis(1, 0, 41, 7, DC, DC), "power-l2", "Wirkleistung  (Phase 2)"),
    ObisAlias(Obis(1, 0, 61, 7, DC, DC), "power-l3", "Wirkleistung  (Phase 3)"),
    ObisAlias(Obis(1, 0, 12, 7, DC, DC), "voltage", "Spannung      (Mittelwert)"),
    ObisAlias(Obis(1, 0, 32, 7, DC, DC), "voltage-l1", "Spannung      (Phase 1)"),
    ObisAlias(Obis(1, 0, 52, 7, DC, DC), "voltage-l2", "Spannung      (Phase 2)"),
    ObisAlias(Obis(1, 0, 72, 7, DC, DC), "voltage-l3", "Spannung      (Phase 3)"),
    ObisAlias(Obis(1, 0, 11, 7, DC, DC), "current", "Stromstaerke  (Summe)"),
    ObisAlias(Obis(1, 0, 31, 7, DC, DC), "current-l1", "Stromstaerke  (Phase 1)"),
    ObisAlias(Obis(1, 0, 51, 7, DC, DC), "current-l2", "Stromstaerke  (Phase 2)"),
    ObisAlias(Obis(1, 0, 71, 7, DC, DC), "current-l3", "Stromstaerke  (Phase 3)"),
    ObisAlias(Obis(1, 0, 14, 7, 0, DC), "frequency", "Netzfrequenz"),
    ObisAlias(Obis(1, 0, 12, 7, 0, DC), "powerfactor", "Leistungsfaktor"),
    ObisAlias(Obis(0, 0, 96, 1, DC, DC), "device", "Zaehler Seriennr."),
    ObisAlias(Obis(1, 0, 96, 5, 5, DC), "status", "Zaehler Status"),
    ObisAlias(Obis(1, 0, 1, 8, DC, DC), "counter", "Zaehlerstand Wirkleistung"),
    ObisAlias(Obis(1, 0, 2, 8, DC, DC), "counter-out", "Zaehlerstand Lieferg."),
    # Easymeter Q3B
    ObisAlias(Obis(1, 0, 1, 8, 1, DC), "esy-counter-t1", "Active Power Counter Tariff 1"),
    ObisAlias(Obis(1, 0, 1, 8, 2, DC), "esy-counter-t2", "Active Power Counter Tariff 2"),
    # Hager eHz
    ObisAlias(Obis(1, 0, 0, 0, 0, DC), "hag-id", "Eigentumsnr."),
    ObisAlias(Obis(1, 0, 96, 50, 0, 0), "hag-status", "Netz Status"),
    ObisAlias(Obis(1, 0, 96, 50, 0, 1), "hag-frequency", "Netz Periode"),
    ObisAlias(Obis(1, 0, 96, 50, 0, 2), "hag-temp", "aktuelle Chiptemperatur"),
    ObisAlias(Obis(1, 0, 96, 50, 0, 3), "hag-temp-min", "minimale Chiptemperatur"),
    ObisAlias(Obis(1, 0, 96, 50, 0, 4), "hag-temp-avg", "gemittelte Chiptemperatur"),
    ObisAlias(Obis(1, 0, 96, 50, 0, 5), "hag-temp-max", "maximale Chiptemperatur"),
    ObisAlias(Obis(1, 0, 96, 50, 0, 6), "hag-check", "Kontrollnr."),
    ObisAlias(Obis(1, 0, 96, 50, 0, 7), "hag-diag", "Diagnose"),
    # Swiss grid operators
    ObisAlias(Obis(255, 255, 16, 8, 0, 255), "lg-counter-et", "Sum active energy (Total)"),
    ObisAlias(Obis(255, 255, 16, 8, 1, 255), "lg-counter-ht", "Sum active energy (T1)"),
    ObisAlias(Obis(255, 255, 16, 8, 2, 255), "lg-counter-lt", "Sum active energy (T2)"),
)


def get_aliases() -> tuple[ObisAlias, ...]:
    """All known OBIS aliases, in table order."""
    return _ALIASES


def lookup_alias(name: str) -> Optional[Obis]:
    """The OBIS id for an alias name (case sensitive), or None if unknown."""
    for alias in _ALIASES:
        if alias.name == name:
            return alias.id
    return None