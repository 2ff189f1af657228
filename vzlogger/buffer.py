"""Buffer of recent readings with aggregation."""

from __future__ import annotations

import copy
import enum
import logging
import threading
from typing import Iterator, Optional

from vzlogger.reading import Reading

logger = logging.getLogger(__name__)


class AggMode(enum.Enum):
    NONE = "none"
    MAX = "max"
    AVG = "avg"
    SUM = "sum"


class Buffer:
    """Thread safe list of readings waiting to be sent."""

    def __init__(self) -> None:
        self._readings: list[Reading] = []
        self.lock = threading.RLock()
        self.aggmode = AggMode.NONE
        self.keep = 32
        self.new_values = False
        self._last_avg: Optional[Reading] = None

    def push(self, reading: Reading) -> None:
        with self.lock:
            self._readings.append(reading)

    def aggregate(self, aggtime: int, agg_fixed_interval: bool) -> None:
        """Reduce the live readings to the latest one, holding the aggregate."""
        if self.aggmode is AggMode.NONE:
            return

        with self.lock:
            alive = [r for r in self._readings if not r.deleted]
            if alive:
                latest = alive[0]
                for reading in alive[1:]:
                    if reading.time_ms > latest.time_ms:
                        latest = reading

                if self.aggmode is AggMode.MAX:
                    latest.value = max(r.value for r in alive)
                elif self.aggmode is AggMode.SUM:
                    latest.value = sum(r.value for r in alive)
                elif self.aggmode is AggMode.AVG:
                    self._average_into(alive, latest)
                logger.debug(
                    "%s RESULT %f @ %d", self.aggmode.name, latest.value, latest.time_ms
                )

                for reading in alive:
                    if reading is not latest:
                        reading.mark_delete()

            if agg_fixed_interval and aggtime > 0:
                for reading in self._readings:
                    if not reading.deleted:
                        reading.sec = aggtime * ((reading.time_ms // 1000) // aggtime)
                        reading.usec = 0

        self.clean()

    def _average_into(self, alive: list[Reading], latest: Reading) -> None:
        # Time weighted average; the latest reading of the previous call is
        # the starting point so unevenly spaced readings are weighted right.
        aggvalue = 0.0
        aggtimespan = 0.0
        previous = self._last_avg
        for reading in alive:
            if previous is not None:
                timespan = (reading.time_ms - previous.time_ms) / 1000.0
                aggvalue += previous.value * timespan
                aggtimespan += timespan
            previous = reading

        self._last_avg = copy.copy(latest)
        if aggtimespan > 0.0:
            latest.value = aggvalue / aggtimespan

    def clean(self, deleted_only: bool = True) -> None:
        """Drop deleted readings, or all of them."""
        with self.lock:
            if deleted_only:
                self._readings = [r for r in self._readings if not r.deleted]
            else:
                self._readings.clear()

    def undelete(self) -> None:
        with self.lock:
            for reading in self._readings:
                reading.reset()

    def dump(self) -> str:
        """The values in short form, e.g. '{1,2.5,}'."""
        with self.lock:
            values = "".join(f"{r.value:.4g}," for r in self._readings)
        return "{" + values + "}"

    def __len__(self) -> int:
        with self.lock:
            return len(self._readings)

    def __iter__(self) -> Iterator[Reading]:
        with self.lock:
            snapshot = list(self._readings)
        return iter(snapshot)