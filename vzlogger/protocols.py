"""Meter protocols and their details."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from vzlogger.options import VZError


class MeterProtocol(enum.Enum):
    NONE = "none"
    FILE = "file"
    EXEC = "exec"
    RANDOM = "random"
    FLUKSOV2 = "fluksov2"
    S0 = "s0"
    D0 = "d0"
    SOS_S0 = "sos_s0"
    SML = "sml"
    OCR = "ocr"
    W1THERM = "w1therm"
    OMS = "oms"


@dataclass(frozen=True)
class MeterDetails:
    """Name, description and reading capacity of a protocol."""

    id: MeterProtocol
    name: str
    desc: str
    max_readings: int


def _detail(protocol: MeterProtocol, desc: str, max_readings: int) -> MeterDetails:
    return MeterDetails(protocol, protocol.value, desc, max_readings)


_PROTOCOLS = (
    _detail(MeterProtocol.FILE, "Read from file or fifo", 32),
    _detail(MeterProtocol.EXEC, "Parse program output", 32),
    _detail(MeterProtocol.RANDOM, "Generate random values with a random walk", 1),
    _detail(MeterProtocol.FLUKSOV2, "Read from Flukso's onboard SPI fifo", 16),
    _detail(MeterProtocol.S0, "S0-meter directly connected to RS232", 4),
    _detail(MeterProtocol.D0, "DLMS/IEC 62056-21 plaintext protocol", 400),
    _detail(MeterProtocol.SOS_S0, "SOS S0 Pulse Meter via USB", 5),
    _detail(
        MeterProtocol.SML, "Smart Message Language as used by EDL-21, eHz and SyM²", 32
    ),
    _detail(MeterProtocol.OCR, "Image processing/recognizing meter", 32),
    _detail(MeterProtocol.W1THERM, "W1-therm / 1wire temperature devices", 400),
    _detail(MeterProtocol.OMS, "OMS (M-BUS) protocol based devices", 100),
)


def get_protocols() -> tuple[MeterDetails, ...]:
    """All known protocols, in table order."""
    return _PROTOCOLS


def lookup_protocol(name: Optional[str]) -> MeterProtocol:
    """The protocol with this name, compared case-insensitively."""
    if name:
        wanted = name.lower()
        for details in _PROTOCOLS:
            if details.name.lower() == wanted:
                return details.id
    raise VZError("Protocol not found.")


def get_details(protocol: MeterProtocol) -> Optional[MeterDetails]:
    """Details of a protocol, or None if it has none."""
    for details in _PROTOCOLS:
        if details.id is protocol:
            return details
    return None