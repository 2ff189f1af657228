"""A logging channel: one configured quantity of a meter."""

from __future__ import annotations

import itertools
import logging
from typing import Iterable, Optional

from vzlogger.buffer import AggMode, Buffer
from vzlogger.options import (
    Option,
    OptionNotFoundError,
    VZError,
    lookup_int,
    lookup_string,
)
from vzlogger.reading import Reading, ReadingIdentifier

logger = logging.getLogger(__name__)


class Channel:
    """Readings of one identifier, buffered for sending to a middleware."""

    _ids = itertools.count()

    def __init__(
        self,
        options: Iterable[Option],
        api_protocol: str,
        uuid: str,
        identifier: Optional[ReadingIdentifier] = None,
    ) -> None:
        self.id = next(Channel._ids)
        self.name = f"chn{self.id}"
        self.options = list(options)
        self.api_protocol = api_protocol
        self.uuid = uuid
        self.identifier = identifier
        self.buffer = Buffer()
        self.last: Optional[Reading] = None
        self.buffer.aggmode = self._parse_aggmode()
        self.duplicates = self._parse_duplicates()

    def _parse_aggmode(self) -> AggMode:
        try:
            text = lookup_string(self.options, "aggmode")
        except OptionNotFoundError:
            return AggMode.NONE
        except VZError as exc:
            logger.error("[%s] Missing or invalid aggmode (%s)", self.name, exc)
            raise
        try:
            return AggMode(text.lower())
        except ValueError:
            logger.error("[%s] Missing or invalid aggmode (Aggmode unknown.)", self.name)
            raise VZError("Aggmode unknown.") from None

    def _parse_duplicates(self) -> int:
        try:
            duplicates = lookup_int(self.options, "duplicates")
        except OptionNotFoundError:
            return 0
        except VZError as exc:
            logger.error("[%s] Invalid parameter duplicates (%s)", self.name, exc)
            raise
        if duplicates < 0:
            logger.error("[%s] Invalid parameter duplicates (< 0)", self.name)
            raise VZError("duplicates < 0 not allowed")
        return duplicates

    def push(self, reading: Reading) -> None:
        self.buffer.push(reading)