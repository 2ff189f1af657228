"""Reading the JSON configuration file into meters and channels."""

from __future__ import annotations

import json
import logging
import re
import string
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from vzlogger.channel import Channel
from vzlogger.meter import Meter
from vzlogger.options import Option, OptionType, VZError
from vzlogger.push_data import PushDataServer
from vzlogger.reading import parse_reading_id
from vzlogger.session import SessionProvider

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "/etc/vzlogger.conf"

_IGNORABLE_RE = re.compile(r"\s*(//.*)?")
_UUID_DASHES = frozenset({8, 13, 18, 23})


def validate_uuid(uuid: str) -> bool:
    """True if uuid has dashes at 8, 13, 18, 23 and hex digits elsewhere."""
    return all(
        ch == "-" if pos in _UUID_DASHES else ch in string.hexdigits
        for pos, ch in enumerate(uuid)
    )


def is_ignorable_line(line: str) -> bool:
    """True for blank lines and single line '//' comments."""
    return _IGNORABLE_RE.fullmatch(line.rstrip("\r\n")) is not None


def _json_type(value: Any) -> OptionType:
    if value is None:
        return OptionType.NULL
    if isinstance(value, bool):
        return OptionType.BOOLEAN
    if isinstance(value, int):
        return OptionType.INT
    if isinstance(value, float):
        return OptionType.DOUBLE
    if isinstance(value, str):
        return OptionType.STRING
    if isinstance(value, dict):
        return OptionType.OBJECT
    return OptionType.ARRAY


def _strip_comments(text: str) -> str:
    """Remove // and /* */ comments outside of JSON strings."""
    out: list[str] = []
    pos = 0
    length = len(text)
    in_string = False
    while pos < length:
        ch = text[pos]
        if in_string:
            if ch == "\\":
                out.append(text[pos : pos + 2])
                pos += 2
                continue
            if ch == '"':
                in_string = False
            out.append(ch)
            pos += 1
        elif ch == '"':
            in_string = True
            out.append(ch)
            pos += 1
        elif text.startswith("//", pos):
            end = text.find("\n", pos)
            if end < 0:
                break
            pos = end
        elif text.startswith("/*", pos):
            end = text.find("*/", pos + 2)
            if end < 0:
                break
            out.append(" ")
            pos = end + 2
        else:
            out.append(ch)
            pos += 1
    return "".join(out)


def _ignore(key: str, value: Any) -> None:
    logger.error(
        "Ignoring invalid field or type: %s=%s (%s)",
        key,
        json.dumps(value),
        _json_type(value).name.lower(),
    )


@dataclass
class MeterMap:
    """A meter together with the channels that log its readings."""

    meter: Meter
    channels: list[Channel] = field(default_factory=list)

    def __iter__(self) -> Iterator[Channel]:
        return iter(self.channels)

    def __len__(self) -> int:
        return len(self.channels)


class ConfigOptions:
    """Application settings and the parser for the configuration file."""

    def __init__(
        self,
        filename: str = DEFAULT_CONFIG,
        session_provider: Optional[SessionProvider] = None,
    ) -> None:
        self.config = filename
        self.session_provider = session_provider
        self.log = ""
        self.pds: Optional[PushDataServer] = None
        self.port = 8080
        self.verbosity = 0
        self.comet_timeout = 30
        self.buffer_length = -1
        self.retry_pause = 15
        self.local = False
        self.foreground = False
        self.time_machine = False
        self.channel_index = False

    def _read_document(self) -> Any:
        try:
            handle = open(self.config, encoding="utf-8")
        except OSError as exc:
            logger.error("Cannot open configfile %s: %s", self.config, exc)
            raise VZError("Cannot open configfile.") from exc

        logger.info("Start parsing configuration from %s", self.config)
        decoder = json.JSONDecoder()
        document: Any = None
        complete = False
        pending = ""
        with handle:
            for number, line in enumerate(handle, start=1):
                if complete:
                    if not is_ignorable_line(line):
                        logger.error(
                            "extra data after end of configuration in %s:%d",
                            self.config,
                            number,
                        )
                        raise VZError("extra data after end of configuration")
                    continue
                pending += line
                text = _strip_comments(pending)
                start = len(text) - len(text.lstrip())
                if start == len(text):
                    continue
                try:
                    document, _ = decoder.raw_decode(text, start)
                except json.JSONDecodeError as exc:
                    if exc.pos >= len(text.rstrip()):
                        continue
                    logger.error("Error in %s:%d %s", self.config, number, exc.msg)
                    raise VZError("Parse configuration failed.") from exc
                complete = True

        if not complete:
            raise VZError("configuration file incomplete, missing closing braces/parens?")
        if not isinstance(document, dict):
            raise VZError("configuration is not a JSON object")
        return document

    def parse(self) -> list[MeterMap]:
        """Parse the configuration file; returns the configured meters."""
        document = self._read_document()
        mappings: list[MeterMap] = []
        try:
            for key, value in document.items():
                self._apply(key, value, mappings)
        except Exception as exc:
            logger.error("parse configuration failed due to: %s", exc)
            raise
        logger.debug("Have %d meters.", len(mappings))
        return mappings

    def _apply(self, key: str, value: Any, mappings: list[MeterMap]) -> None:
        kind = _json_type(value)
        if key == "daemon" and kind is OptionType.BOOLEAN:
            if not value:
                raise VZError(
                    '"daemon" option is not supported anymore, '
                    "you probably want to use -f instead."
                )
        elif key == "log" and kind is OptionType.STRING:
            self.log = value
        elif key == "retry" and kind is OptionType.INT:
            self.retry_pause = value
        elif key == "verbosity" and kind is OptionType.INT:
            self.verbosity = value
        elif key == "local":
            if kind is not OptionType.OBJECT:
                _ignore(key, value)
                return
            for local_key, local_value in value.items():
                self._apply_local(local_key, local_value)
        elif key in ("sensors", "meters") and kind is OptionType.ARRAY:
            mappings.extend(self.parse_meter(meter_json) for meter_json in value)
        elif key == "push" and kind is OptionType.ARRAY:
            if self.pds is None and value:
                self.pds = PushDataServer(value, self.session_provider)
            else:
                logger.error(
                    "[push] Ignoring push entry due to empty array or duplicate section"
                )
        elif key == "i_have_a_time_machine" and kind is OptionType.BOOLEAN:
            self.time_machine = value
        else:
            _ignore(key, value)

    def _apply_local(self, key: str, value: Any) -> None:
        kind = _json_type(value)
        if key == "enabled" and kind is OptionType.BOOLEAN:
            self.local = value
        elif key == "port" and kind is OptionType.INT:
            self.port = value
        elif key == "timeout" and kind is OptionType.INT:
            self.comet_timeout = value
        elif key == "buffer" and kind is OptionType.INT:
            # 0 makes no sense: use size based mode with one element
            self.buffer_length = value or -1
        elif key == "index" and kind is OptionType.BOOLEAN:
            self.channel_index = value
        else:
            _ignore(key, value)

    def parse_meter(self, meter_json: dict) -> MeterMap:
        """Build a meter and its channels from one meter section."""
        if not isinstance(meter_json, dict):
            raise VZError("meter configuration is not an object")
        channel_sections: list[dict] = []
        options: list[Option] = []
        for key, value in meter_json.items():
            kind = _json_type(value)
            if key == "channels" and kind is OptionType.ARRAY:
                channel_sections.extend(value)
            elif key == "channel" and kind is OptionType.OBJECT:
                channel_sections.append(value)
            else:
                options.append(Option(key, value))

        mapping = MeterMap(Meter(options))
        logger.info("New meter initialized (protocol=%s)", mapping.meter.protocol_id.value)
        for channel_json in channel_sections:
            self.parse_channel(channel_json, mapping)
        return mapping

    def parse_channel(self, channel_json: dict, mapping: MeterMap) -> Channel:
        """Build a channel from one channel section and add it to mapping."""
        if not isinstance(channel_json, dict):
            raise VZError("channel configuration is not an object")
        logger.debug("Configure channel.")
        options: list[Option] = []
        uuid: Optional[str] = None
        id_str: Optional[str] = None
        api_protocol = ""
        for key, value in channel_json.items():
            is_str = isinstance(value, str)
            if key == "uuid" and is_str:
                uuid = value
            elif key == "identifier" and is_str:
                id_str = value
            elif key == "api" and is_str:
                api_protocol = value
            else:
                options.append(Option(key, value))

        if uuid is None:
            logger.error("Missing UUID")
            raise VZError("Missing UUID")
        if not validate_uuid(uuid):
            logger.error("Invalid UUID: %s", uuid)
            raise VZError("Invalid UUID.")
        if id_str is None:
            logger.error("Identifier is not set. Using default value 'NilIdentifier'.")
            id_str = "NilIdentifier"
        if not api_protocol:
            api_protocol = "volkszaehler"

        try:
            identifier = parse_reading_id(mapping.meter.protocol_id, id_str)
        except VZError as exc:
            logger.error("Invalid id: %s due to: '%s'", id_str, exc)
            raise VZError("Invalid reader.") from exc

        channel = Channel(options, api_protocol, uuid, identifier)
        logger.info(
            "[%s] New channel initialized (uuid=...%s api=%s id=%s)",
            channel.name,
            uuid[30:],
            api_protocol,
            id_str,
        )
        mapping.channels.append(channel)
        return channel