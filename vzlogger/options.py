"""Typed configuration options and lookups over option lists."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Any, Iterable


class VZError(Exception):
    """Base error of the logger."""


class OptionNotFoundError(VZError):
    """A looked up option is missing."""


class InvalidTypeError(VZError):
    """An option holds a value of another type than requested."""


class MeterConnectionError(VZError):
    """A meter could not be opened."""


class OptionType(enum.IntEnum):
    NULL = 0
    BOOLEAN = 1
    DOUBLE = 2
    INT = 3
    OBJECT = 4
    ARRAY = 5
    STRING = 6


def _infer_type(key: str, value: Any) -> OptionType:
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
    if isinstance(value, list):
        return OptionType.ARRAY
    raise VZError(f"Option not a valid type {key} {type(value).__name__}")


@dataclass(frozen=True)
class Option:
    """A named value whose type follows its JSON representation."""

    key: str
    value: Any
    type: OptionType = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", _infer_type(self.key, self.value))

    def as_str(self) -> str:
        if self.type is not OptionType.STRING:
            raise InvalidTypeError("not a string")
        return self.value

    def as_int(self) -> int:
        if self.type is not OptionType.INT:
            raise InvalidTypeError("Invalid type")
        return self.value

    def as_float(self) -> float:
        if self.type is not OptionType.DOUBLE:
            raise InvalidTypeError("Invalid type")
        return self.value

    def as_bool(self) -> bool:
        if self.type is not OptionType.BOOLEAN:
            raise InvalidTypeError("Invalid type")
        return self.value

    def as_json(self) -> Any:
        if self.type not in (OptionType.ARRAY, OptionType.OBJECT):
            raise InvalidTypeError("json_object not an array/object")
        return self.value

    def __str__(self) -> str:
        return f"{self.key} = {json.dumps(self.value)} ({self.type.name.lower()})"


def lookup(options: Iterable[Option], key: str) -> Option:
    """The first option with the given key."""
    for option in options:
        if option.key == key:
            return option
    raise OptionNotFoundError(f"Option '{key}' not found")


def lookup_string(options: Iterable[Option], key: str) -> str:
    return lookup(options, key).as_str()


def lookup_string_tolower(options: Iterable[Option], key: str) -> str:
    return lookup_string(options, key).lower()


def lookup_int(options: Iterable[Option], key: str) -> int:
    return lookup(options, key).as_int()


def lookup_bool(options: Iterable[Option], key: str) -> bool:
    return lookup(options, key).as_bool()


def lookup_double(options: Iterable[Option], key: str) -> float:
    return lookup(options, key).as_float()


def lookup_json_array(options: Iterable[Option], key: str) -> list:
    option = lookup(options, key)
    if option.type is not OptionType.ARRAY:
        raise InvalidTypeError("json_object not an array")
    return option.value


def lookup_json_object(options: Iterable[Option], key: str) -> dict:
    option = lookup(options, key)
    if option.type is not OptionType.OBJECT:
        raise InvalidTypeError("json_object not an object")
    return option.value


def dump(options: Iterable[Option]) -> None:
    """Print all options to standard output."""
    print("OptionList dump")
    for option in options:
        print(option)