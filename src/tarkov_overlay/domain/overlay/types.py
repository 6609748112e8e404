"""JSON-shaped value aliases shared by the overlay kernel."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Final, Literal

from tarkov_overlay.domain.errors import InvalidOverlayDataError


class Absent(Enum):
    """Marker for "field not present", distinct from an explicit ``null``."""

    ABSENT = "absent"

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> Literal[False]:
        return False


ABSENT: Final = Absent.ABSENT

type JsonScalar = str | int | float | bool | None
type JsonValue = JsonScalar | Sequence[JsonValue] | Mapping[str, JsonValue]
type Entity = Mapping[str, JsonValue]
type FieldValue = JsonValue | Absent


def get_field(container: object, key: str) -> FieldValue:
    """Look up ``key`` on a JSON object, returning ``ABSENT`` when it is missing."""

    if isinstance(container, Mapping):
        return container.get(key, ABSENT)
    return ABSENT


def is_json_array(value: object) -> bool:
    return isinstance(value, (list, tuple))


def entity_id(entity: Entity) -> str:
    value = entity.get("id")
    if not isinstance(value, str):
        raise InvalidOverlayDataError(f"Entity is missing a string 'id': {value!r}")
    return value
