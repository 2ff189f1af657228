"""Helpers shared by the middleware interfaces."""

from __future__ import annotations

import json
import urllib.request
from typing import Any, Optional, Union

from vzlogger.buffer import Buffer

_PACKAGE = "vzlogger"
_VERSION = "1.0.0"

_MISSING = object()


def user_agent() -> str:
    """The User-Agent header value sent to middlewares."""
    return f"{_PACKAGE}/{_VERSION} (Python-urllib/{urllib.request.__version__})"


def json_tuples(buffer: Buffer) -> list[list[float]]:
    """[[timestamp_ms, value], ...] for every reading in the buffer."""
    return [[reading.tvtod() * 1000, reading.value] for reading in buffer]


def _innermost_container(text: str, end: int) -> str:
    stack: list[str] = []
    in_string = escaped = False
    for ch in text[:end]:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch in "[{":
            stack.append(ch)
        elif ch in "]}" and stack:
            stack.pop()
    return stack[-1] if stack else ""


def _error_description(text: str, exc: json.JSONDecodeError) -> str:
    if exc.pos >= len(text.rstrip()) or exc.msg.startswith("Unterminated string"):
        return "continue"
    if exc.msg.startswith("Expecting property name"):
        return "quoted object property name expected"
    if exc.msg == "Expecting ':' delimiter":
        return "object property name separator ':' expected"
    if exc.msg == "Expecting ',' delimiter":
        if _innermost_container(text, exc.pos) == "[":
            return "array value separator ',' expected"
        return "object value separator ',' expected"
    if exc.msg.startswith("Invalid"):
        return "invalid string sequence"
    return "unexpected character"


def _as_text(value: Any) -> str:
    if value is _MISSING or value is None:
        return "(null)"
    if isinstance(value, str):
        return value
    return json.dumps(value)


def parse_exception(data: Union[bytes, str, None]) -> str:
    """Describe the exception in a JSON error response from the middleware."""
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    text = (data or "").lstrip()
    if not text:
        return "continue"
    try:
        document, _ = json.JSONDecoder().raw_decode(text)
    except json.JSONDecodeError as exc:
        return _error_description(text, exc)

    exception: Optional[Any] = (
        document.get("exception") if isinstance(document, dict) else None
    )
    if exception is None:
        return "missing exception"
    if isinstance(exception, dict):
        kind = exception.get("type", _MISSING)
        message = exception.get("message", _MISSING)
    else:
        kind = message = _MISSING
    return f"{_as_text(kind)}: {_as_text(message)}"