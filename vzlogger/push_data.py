"""Pushing fresh readings to further middlewares."""

from __future__ import annotations

import json
import logging
import threading
import urllib.error
import urllib.request
from typing import Any, Optional

from vzlogger.api import user_agent
from vzlogger.options import VZError
from vzlogger.session import SessionProvider

logger = logging.getLogger(__name__)

DataMap = dict[str, list[tuple[int, float]]]


class PushDataList:
    """Thread safe collection of readings per uuid waiting to be pushed."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._next: DataMap = {}

    def add(self, uuid: str, time_ms: int, value: float) -> None:
        with self._cond:
            self._next.setdefault(uuid, []).append((time_ms, value))
            self._cond.notify_all()

    def wait_for_data(self, timeout: float = 5.0) -> Optional[DataMap]:
        """Take all collected data, waiting up to timeout; None if none came."""
        with self._cond:
            if not self._cond.wait_for(lambda: bool(self._next), timeout=timeout):
                return None
            data, self._next = self._next, {}
            return data


def _perform(opener: Any, request: urllib.request.Request, timeout: float) -> tuple[int, bytes]:
    try:
        with opener.open(request, timeout=timeout) as response:
            return response.status, response.read()
    except urllib.error.HTTPError as exc:
        body = exc.fp.read() if exc.fp is not None else b""
        return exc.code, body


class PushDataServer:
    """Posts collected readings as JSON to every configured url."""

    def __init__(
        self,
        config: Optional[list] = None,
        session_provider: Optional[SessionProvider] = None,
        *,
        timeout: float = 30,
        wait_timeout: float = 5.0,
    ) -> None:
        self.middlewares: list[str] = []
        self.session_provider = session_provider
        self.timeout = timeout
        self.wait_timeout = wait_timeout
        if config is None:
            logger.error("[push] PushDataServer created without configuration")
        else:
            if not isinstance(config, list) or not config:
                raise VZError("config: push must be a non-empty array")
            for item in config:
                if not isinstance(item, dict):
                    raise VZError("config: push array element not an object")
                if "url" not in item:
                    raise VZError("config: push url not found")
                if not isinstance(item["url"], str):
                    raise VZError("config: push url no string")
                self.middlewares.append(item["url"])
        self.headers = {
            "Content-type": "application/json",
            "Accept": "application/json",
            "User-Agent": user_agent(),
        }

    def generate_json(self, data_map: DataMap) -> str:
        """{"data": [{"uuid": ..., "tuples": [[time_ms, value], ...]}, ...]}"""
        data = [
            {"uuid": uuid, "tuples": [[int(t), float(v)] for t, v in tuples]}
            for uuid, tuples in data_map.items()
        ]
        return json.dumps({"data": data})

    def send(self, middleware: str, data: str) -> bool:
        """Post data to one middleware; True on HTTP 200."""
        if self.session_provider is None:
            logger.error("[push] send without session provider")
            return False
        opener = self.session_provider.get_session(middleware)
        request = urllib.request.Request(
            middleware, data=data.encode("utf-8"), headers=dict(self.headers), method="POST"
        )
        try:
            status, body = _perform(opener, request, self.timeout)
        except OSError as exc:
            logger.error("[push] %s %s", middleware, exc)
            return False
        finally:
            self.session_provider.return_session(middleware, opener)

        if status != 200:
            logger.error(
                "[push] Error from url %s: %d %s",
                middleware,
                status,
                body.decode("utf-8", errors="replace"),
            )
            return False
        logger.debug("[push] Request to %s succeeded with code: %d", middleware, status)
        return True

    def wait_and_send_once_to_all(self, data_list: Optional[PushDataList]) -> bool:
        """Wait for data and send it to all middlewares; True if all succeeded."""
        if data_list is None:
            logger.error("[push] no data list")
            return False
        data_map = data_list.wait_for_data(self.wait_timeout)
        if not data_map:
            return False
        payload = self.generate_json(data_map)
        logger.debug("[push] push: %s", payload)
        results = [self.send(middleware, payload) for middleware in self.middlewares]
        return all(results)


def run_push_loop(
    server: Optional[PushDataServer],
    data_list: Optional[PushDataList],
    stop_event: threading.Event,
) -> None:
    """Push data until stop_event is set."""
    logger.debug("[push] Start push loop")
    if server is not None and data_list is not None:
        while not stop_event.is_set():
            server.wait_and_send_once_to_all(data_list)
    logger.debug("[push] Stopped push loop")