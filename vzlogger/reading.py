"""Readings and the identifiers that tell which quantity a reading belongs to."""

from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from vzlogger.obis import Obis
from vzlogger.options import VZError
from vzlogger.protocols import MeterProtocol

# "sensor%u/%12s": a channel number and a type word of at most 12 characters.
_SENSOR_RE = re.compile(r"sensor\s*(\d+)/\s*(\S+)")
_SENSOR_TYPE_LEN = 12


def _scan_sensor(text: str) -> Optional[tuple[int, str]]:
    match = _SENSOR_RE.match(text)
    if match is None:
        return None
    return int(match.group(1)), match.group(2)[:_SENSOR_TYPE_LEN]


class ReadingIdentifier(ABC):
    """Identifies the quantity a reading measures."""

    @abstractmethod
    def unparse(self) -> str:
        """The identifier as text."""


@dataclass(frozen=True)
class ObisIdentifier(ReadingIdentifier):
    """An identifier given by an OBIS id."""

    obis: Obis = field(default_factory=Obis)

    def unparse(self) -> str:
        return self.obis.unparse()


@dataclass(frozen=True)
class StringIdentifier(ReadingIdentifier):
    """An identifier given by free text."""

    string: str = ""

    def unparse(self) -> str:
        return self.string


@dataclass(frozen=True)
class ChannelIdentifier(ReadingIdentifier):
    """A sensor channel; positive for power, negative for consumption.

    The stored channel is the sensor number plus one so that sensor 0 keeps
    its sign.
    """

    channel: int = 0

    @classmethod
    def parse(cls, text: str) -> "ChannelIdentifier":
        """Parse 'sensor<N>/power' or 'sensor<N>/consumption'."""
        scanned = _scan_sensor(text)
        if scanned is None:
            raise VZError("Failed to parse channel identifier")
        number, kind = scanned
        channel = number + 1
        if kind == "consumption":
            channel = -channel
        elif kind != "power":
            raise VZError("Invalid channel type")
        return cls(channel)

    def unparse(self) -> str:
        kind = "power" if self.channel > 0 else "consumption"
        return f"sensor{abs(self.channel) - 1}/{kind}"


@dataclass(frozen=True)
class NilIdentifier(ReadingIdentifier):
    """Stands for protocols that do not identify their readings."""

    def unparse(self) -> str:
        return "NilIdentifier"


@dataclass
class Reading:
    """A value measured at a point in time."""

    value: float = 0.0
    sec: int = 0
    usec: int = 0
    identifier: Optional[ReadingIdentifier] = None
    deleted: bool = field(default=False, compare=False)

    @property
    def time_ms(self) -> int:
        return self.sec * 1000 + int(self.usec / 1000)

    def time_from_double(self, ts: float) -> None:
        """Set the time from seconds since the epoch."""
        fraction, integral = math.modf(ts)
        self.usec = int(fraction * 1e6)
        self.sec = int(integral)

    def tvtod(self) -> float:
        """The time as seconds since the epoch."""
        return self.sec + self.usec / 1e6

    def mark_delete(self) -> None:
        self.deleted = True

    def reset(self) -> None:
        self.deleted = False

    def unparse(self) -> str:
        """The identifier of this reading as text."""
        if self.identifier is None:
            return ""
        return self.identifier.unparse()


_OBIS_PROTOCOLS = {MeterProtocol.D0, MeterProtocol.SML, MeterProtocol.OMS}
_STRING_PROTOCOLS = {
    MeterProtocol.FILE,
    MeterProtocol.EXEC,
    MeterProtocol.S0,
    MeterProtocol.SOS_S0,
    MeterProtocol.OCR,
    MeterProtocol.W1THERM,
}


def parse_reading_id(protocol: MeterProtocol, text: str) -> ReadingIdentifier:
    """Parse a configured identifier in the form the protocol uses."""
    if protocol in _OBIS_PROTOCOLS:
        return ObisIdentifier(Obis.from_string(text))
    if protocol is MeterProtocol.FLUKSOV2:
        scanned = _scan_sensor(text)
        if scanned is None:
            raise VZError("meter-fluksov4 failed")
        return ChannelIdentifier(scanned[0] + 1)
    if protocol in _STRING_PROTOCOLS:
        return StringIdentifier(text)
    return NilIdentifier()