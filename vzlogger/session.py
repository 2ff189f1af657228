"""One reusable HTTP session per key, handed out to one user at a time."""

from __future__ import annotations

import logging
import threading
import urllib.request
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    session: Any
    in_use: bool = True


class SessionProvider:
    """Hands out one session per key and serializes access to it.

    A caller asking for a key whose session is in use blocks until the
    session is returned.
    """

    def __init__(
        self,
        factory: Callable[[], Any] = urllib.request.build_opener,
        close_timeout: float = 5.0,
    ) -> None:
        self._factory = factory
        self._close_timeout = close_timeout
        self._cond = threading.Condition()
        self._entries: dict[str, _Entry] = {}
        self._closed = False

    def get_session(self, key: str) -> Any:
        """The session for key, created on first use; blocks while it is taken."""
        with self._cond:
            if self._closed:
                raise RuntimeError("session provider closed")
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry(self._factory())
                self._entries[key] = entry
                return entry.session
            self._cond.wait_for(lambda: not entry.in_use or self._closed)
            if self._closed:
                raise RuntimeError("session provider closed")
            entry.in_use = True
            return entry.session

    def return_session(self, key: str, session: Any) -> None:
        """Give a session back so that the next caller for key may use it."""
        with self._cond:
            if self._closed:
                return
            entry = self._entries.get(key)
            if entry is None or entry.session is not session:
                raise ValueError(f"session does not belong to key {key!r}")
            entry.in_use = False
            self._cond.notify_all()

    def in_use(self, key: str) -> bool:
        with self._cond:
            entry = self._entries.get(key)
            return entry is not None and entry.in_use

    def close(self) -> None:
        """Wait a while for sessions in use, then close all of them."""
        with self._cond:
            if self._closed:
                return
            idle = self._cond.wait_for(
                lambda: not any(e.in_use for e in self._entries.values()),
                timeout=self._close_timeout,
            )
            if not idle:
                logger.warning("closing sessions that are still in use")
            self._closed = True
            entries = list(self._entries.values())
            self._entries.clear()
            self._cond.notify_all()
        for entry in entries:
            closer = getattr(entry.session, "close", None)
            if callable(closer):
                closer()

    def __enter__(self) -> "SessionProvider":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()