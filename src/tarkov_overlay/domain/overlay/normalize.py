"""Order-insensitive canonical form for JSON-shaped values.

Two values canonicalize to the same tree when they only differ in object key
order or array element order. Arrays are re-sorted by a derived text key:

- absent -> ``"undefined"``, null -> ``"null"``
- booleans, numbers and strings -> their plain text form
- arrays and objects -> their compact JSON serialization

Ties on the text key (``1`` vs ``"1"``) are broken by value kind so the
resulting order is total and the output deterministic.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum
from functools import singledispatch

from tarkov_overlay.domain.errors import InvalidOverlayDataError

from .types import ABSENT, Absent, FieldValue, JsonValue


class ValueKind(IntEnum):
    ABSENT = 0
    NULL = 1
    BOOL = 2
    NUMBER = 3
    STRING = 4
    ARRAY = 5
    OBJECT = 6


@dataclass(frozen=True, slots=True)
class CanonicalAbsent:
    kind = ValueKind.ABSENT

    def to_json(self) -> FieldValue:
        return ABSENT

    def sort_text(self) -> str:
        return "undefined"


@dataclass(frozen=True, slots=True)
class CanonicalNull:
    kind = ValueKind.NULL

    def to_json(self) -> FieldValue:
        return None

    def sort_text(self) -> str:
        return "null"


@dataclass(frozen=True, slots=True)
class CanonicalBool:
    value: bool
    kind = ValueKind.BOOL

    def to_json(self) -> FieldValue:
        return self.value

    def sort_text(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True, slots=True)
class CanonicalNumber:
    value: int | float
    kind = ValueKind.NUMBER

    def to_json(self) -> FieldValue:
        return self.value

    def sort_text(self) -> str:
        return json.dumps(self.value)


@dataclass(frozen=True, slots=True)
class CanonicalString:
    value: str
    kind = ValueKind.STRING

    def to_json(self) -> FieldValue:
        return self.value

    def sort_text(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class CanonicalArray:
    items: tuple[CanonicalValue, ...]
    kind = ValueKind.ARRAY

    def to_json(self) -> FieldValue:
        return [_require_present(item.to_json()) for item in self.items]

    def sort_text(self) -> str:
        return _compact_json(self.to_json())


@dataclass(frozen=True, slots=True)
class CanonicalObject:
    entries: tuple[tuple[str, CanonicalValue], ...]
    kind = ValueKind.OBJECT

    def to_json(self) -> FieldValue:
        return {key: _require_present(value.to_json()) for key, value in self.entries}

    def sort_text(self) -> str:
        return _compact_json(self.to_json())


type CanonicalValue = (
    CanonicalAbsent
    | CanonicalNull
    | CanonicalBool
    | CanonicalNumber
    | CanonicalString
    | CanonicalArray
    | CanonicalObject
)


def canonicalize(value: object) -> CanonicalValue:
    """Build the canonical tree for a JSON-shaped value (or ``ABSENT``)."""

    return _canonicalize(value)


def normalize(value: object) -> FieldValue:
    """Return a fresh JSON value with sorted object keys and sorted arrays."""

    return canonicalize(value).to_json()


def values_equal(a: object, b: object) -> bool:
    """Structural equality ignoring key order and array element order."""

    if a is ABSENT and b is ABSENT:
        return True
    return canonicalize(a) == canonicalize(b)


def sort_key(value: CanonicalValue) -> tuple[str, int]:
    return value.sort_text(), int(value.kind)


@singledispatch
def _canonicalize(value: object) -> CanonicalValue:
    raise InvalidOverlayDataError(
        f"Unsupported value of type {type(value).__name__}: {value!r}"
    )


@_canonicalize.register
def _(value: Absent) -> CanonicalValue:
    return CanonicalAbsent()


@_canonicalize.register(type(None))
def _(_value: None) -> CanonicalValue:
    return CanonicalNull()


@_canonicalize.register
def _(value: bool) -> CanonicalValue:  # noqa: FBT001
    return CanonicalBool(value)


@_canonicalize.register
def _(value: int) -> CanonicalValue:
    return CanonicalNumber(value)


@_canonicalize.register
def _(value: float) -> CanonicalValue:
    if not math.isfinite(value):
        raise InvalidOverlayDataError(f"Non-finite number is not valid JSON: {value!r}")
    if value.is_integer():
        return CanonicalNumber(int(value))
    return CanonicalNumber(value)


@_canonicalize.register
def _(value: str) -> CanonicalValue:
    return CanonicalString(value)


@_canonicalize.register(list)
@_canonicalize.register(tuple)
def _(value: list[JsonValue] | tuple[JsonValue, ...]) -> CanonicalValue:
    items = [_canonicalize(item) for item in value]
    for item in items:
        if isinstance(item, CanonicalAbsent):
            raise InvalidOverlayDataError("Arrays cannot contain absent values")
    return CanonicalArray(tuple(sorted(items, key=sort_key)))


@_canonicalize.register(Mapping)
def _(value: Mapping[object, JsonValue]) -> CanonicalValue:
    entries: list[tuple[str, CanonicalValue]] = []
    for key in sorted(value, key=_require_string_key):
        canonical = _canonicalize(value[key])
        if isinstance(canonical, CanonicalAbsent):
            continue
        entries.append((key, canonical))
    return CanonicalObject(tuple(entries))


def _require_string_key(key: object) -> str:
    if not isinstance(key, str):
        raise InvalidOverlayDataError(f"Object keys must be strings, got {key!r}")
    return key


def _require_present(value: FieldValue) -> JsonValue:
    if value is ABSENT:
        raise InvalidOverlayDataError("Absent values have no JSON representation")
    return value


def _compact_json(value: FieldValue) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
