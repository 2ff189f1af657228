"""Meter configuration."""

from __future__ import annotations

import itertools
import logging
from typing import Callable, Iterable

from vzlogger.options import (
    Option,
    OptionNotFoundError,
    VZError,
    lookup,
    lookup_bool,
    lookup_string,
)
from vzlogger.protocols import MeterProtocol, get_details, lookup_protocol
from vzlogger.reading import (
    ChannelIdentifier,
    NilIdentifier,
    ObisIdentifier,
    ReadingIdentifier,
    StringIdentifier,
)

logger = logging.getLogger(__name__)

_IDENTIFIERS: dict[MeterProtocol, Callable[[], ReadingIdentifier]] = {
    MeterProtocol.FILE: StringIdentifier,
    MeterProtocol.EXEC: StringIdentifier,
    MeterProtocol.RANDOM: NilIdentifier,
    MeterProtocol.S0: StringIdentifier,
    MeterProtocol.D0: ObisIdentifier,
    MeterProtocol.SML: ObisIdentifier,
    MeterProtocol.FLUKSOV2: ChannelIdentifier,
    MeterProtocol.OCR: StringIdentifier,
    MeterProtocol.W1THERM: StringIdentifier,
    MeterProtocol.OMS: ObisIdentifier,
    MeterProtocol.SOS_S0: StringIdentifier,
}


class Meter:
    """A configured meter: its protocol and reading settings."""

    _ids = itertools.count()

    def __init__(self, options: Iterable[Option]) -> None:
        self.id = next(Meter._ids)
        self.name = f"mtr{self.id}"
        self.options = list(options)

        try:
            protocol_name = lookup_string(self.options, "protocol")
            logger.debug("[%s] Creating new meter with protocol %s.", self.name, protocol_name)
            self.protocol_id = lookup_protocol(protocol_name)
        except VZError as exc:
            logger.error("[%s] Missing protocol or invalid type (%s)", self.name, exc)
            raise

        self.interval = self._int_option("interval", -1)
        self.aggtime = self._int_option("aggtime", -1)
        self.agg_fixed_interval = self._bool_option("aggfixedinterval", False)

        self.details = get_details(self.protocol_id)
        if self.details is None:
            logger.error("[%s] Missing protocol or invalid type", self.name)
            raise VZError("Protocol not found.")
        self.identifier: ReadingIdentifier = _IDENTIFIERS[self.protocol_id]()

        self.enabled = self._bool_option("enabled", False)
        self.skip = self._bool_option("allowskip", False)

        logger.debug(
            "[%s] Meter configured, %s.", self.name, "enabled" if self.enabled else "disabled"
        )

    def _int_option(self, key: str, default: int) -> int:
        try:
            return lookup(self.options, key).as_int()
        except OptionNotFoundError:
            return default
        except VZError:
            logger.error("[%s] Invalid type for %s", self.name, key)
            raise

    def _bool_option(self, key: str, default: bool) -> bool:
        try:
            return lookup_bool(self.options, key)
        except OptionNotFoundError:
            return default
        except VZError:
            logger.error("[%s] Invalid type for %s", self.name, key)
            raise