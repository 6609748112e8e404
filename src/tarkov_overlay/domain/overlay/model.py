"""Typed overlay entries and the merged overlay document.

An overlay maps category names (``tasks``, ``items``, ``editions``...) to
ID-keyed entries. Each entry is one of two variants:

- :class:`FieldOverride` corrects fields of an entity the live API already has
- :class:`Addition` describes a record the live API is missing entirely
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Final, cast

from tarkov_overlay.domain.errors import InvalidOverlayDataError

from .types import ABSENT, FieldValue, JsonValue, is_json_array

META_KEY: Final[str] = "$meta"
MODES_KEY: Final[str] = "modes"
OBJECTIVES_FIELD: Final[str] = "objectives"
OBJECTIVES_ADD_FIELD: Final[str] = "objectivesAdd"
DISABLED_FIELD: Final[str] = "disabled"

ADDITION_CATEGORY_SUFFIX: Final[str] = "Add"
ADDITION_CATEGORIES: Final[frozenset[str]] = frozenset({"editions", "storyChapters"})


class MergeStrategy(StrEnum):
    """How one patch field is folded into an entity."""

    REPLACE = "replace"
    KEYED_MERGE = "keyed_merge"
    APPEND = "append"
    CONTROL = "control"


FIELD_MERGE_STRATEGIES: Final[Mapping[str, MergeStrategy]] = MappingProxyType(
    {
        OBJECTIVES_FIELD: MergeStrategy.KEYED_MERGE,
        OBJECTIVES_ADD_FIELD: MergeStrategy.APPEND,
        DISABLED_FIELD: MergeStrategy.CONTROL,
    }
)


def merge_strategy_for(field_name: str) -> MergeStrategy:
    return FIELD_MERGE_STRATEGIES.get(field_name, MergeStrategy.REPLACE)


def is_addition_category(category: str) -> bool:
    return category.endswith(ADDITION_CATEGORY_SUFFIX) or category in ADDITION_CATEGORIES


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldOverride:
    """Correction patch for one existing entity."""

    entity_id: str
    fields: Mapping[str, JsonValue] = field(default_factory=dict["str", "JsonValue"])
    objectives: Mapping[str, Mapping[str, JsonValue]] = field(
        default_factory=dict["str", "Mapping[str, JsonValue]"]
    )
    objectives_add: tuple[Mapping[str, JsonValue], ...] = ()
    disabled: bool = False

    @classmethod
    def from_mapping(cls, entity_id: str, raw: object) -> FieldOverride:
        if not isinstance(raw, Mapping):
            raise InvalidOverlayDataError(
                f"Override for {entity_id} must be an object, got {type(raw).__name__}"
            )

        fields: dict[str, JsonValue] = {}
        objectives: dict[str, Mapping[str, JsonValue]] = {}
        objectives_add: tuple[Mapping[str, JsonValue], ...] = ()
        disabled = False
        for key, value in raw.items():
            match merge_strategy_for(key):
                case MergeStrategy.KEYED_MERGE:
                    objectives = _parse_objective_patches(entity_id, value)
                case MergeStrategy.APPEND:
                    objectives_add = _parse_added_objectives(entity_id, value)
                case MergeStrategy.CONTROL:
                    disabled = _parse_disabled(entity_id, value)
                case MergeStrategy.REPLACE:
                    fields[key] = value

        return cls(
            entity_id=entity_id,
            fields=MappingProxyType(fields),
            objectives=MappingProxyType(objectives),
            objectives_add=objectives_add,
            disabled=disabled,
        )

    def declared(self, field_name: str) -> FieldValue:
        """Return the replacement value declared for ``field_name`` or ``ABSENT``."""

        return self.fields.get(field_name, ABSENT)


@dataclass(frozen=True, slots=True)
class Addition:
    """Record for something the live API does not define yet."""

    key: str
    record: Mapping[str, JsonValue]

    @classmethod
    def from_mapping(cls, key: str, raw: object) -> Addition:
        if not isinstance(raw, Mapping):
            raise InvalidOverlayDataError(
                f"Addition {key} must be an object, got {type(raw).__name__}"
            )
        return cls(key=key, record=MappingProxyType(dict(raw)))

    def _text(self, name: str) -> str | None:
        value = self.record.get(name)
        return value if isinstance(value, str) else None

    @property
    def id(self) -> str:
        return self._text("id") or self.key

    @property
    def name(self) -> str:
        return self._text("name") or self._text("title") or self.key

    @property
    def description(self) -> str | None:
        return self._text("description")

    @property
    def wiki_link(self) -> str | None:
        return self._text("wikiLink")


type OverlayEntry = FieldOverride | Addition


@dataclass(frozen=True, slots=True)
class OverlayMeta:
    version: str
    generated: str
    sha256: str | None = None

    @classmethod
    def from_mapping(cls, raw: object) -> OverlayMeta:
        if not isinstance(raw, Mapping):
            raise InvalidOverlayDataError(f"{META_KEY} must be an object")
        version = raw.get("version")
        generated = raw.get("generated")
        sha256 = raw.get("sha256")
        if not isinstance(version, str) or not isinstance(generated, str):
            raise InvalidOverlayDataError(f"{META_KEY} requires string version and generated")
        if sha256 is not None and not isinstance(sha256, str):
            raise InvalidOverlayDataError(f"{META_KEY}.sha256 must be a string")
        return cls(version=version, generated=generated, sha256=sha256)


@dataclass(frozen=True, slots=True, kw_only=True)
class Overlay:
    """Merged overlay: ID-keyed entries per category, plus per-mode layers."""

    categories: Mapping[str, Mapping[str, OverlayEntry]] = field(
        default_factory=dict["str", "Mapping[str, OverlayEntry]"]
    )
    modes: Mapping[str, Overlay] = field(default_factory=dict["str", "Overlay"])
    meta: OverlayMeta | None = None

    @classmethod
    def from_mapping(cls, raw: object) -> Overlay:
        if not isinstance(raw, Mapping):
            raise InvalidOverlayDataError("Overlay document must be an object")

        meta: OverlayMeta | None = None
        modes: dict[str, Overlay] = {}
        categories: dict[str, Mapping[str, OverlayEntry]] = {}
        for key, value in raw.items():
            if key == META_KEY:
                meta = OverlayMeta.from_mapping(value)
            elif key == MODES_KEY:
                modes = _parse_modes(value)
            else:
                categories[key] = _parse_category(key, value)
        return cls(categories=categories, modes=modes, meta=meta)

    def overrides(self, category: str = "tasks") -> dict[str, FieldOverride]:
        entries = self.categories.get(category, {})
        return {key: entry for key, entry in entries.items() if isinstance(entry, FieldOverride)}

    def additions(self, category: str) -> dict[str, Addition]:
        entries = self.categories.get(category, {})
        return {key: entry for key, entry in entries.items() if isinstance(entry, Addition)}

    def patch_for(self, category: str, entity_id: str) -> FieldOverride | None:
        entry = self.categories.get(category, {}).get(entity_id)
        return entry if isinstance(entry, FieldOverride) else None

    def for_mode(self, mode: str) -> Overlay:
        """Return the overlay seen by ``mode``: base entries with the mode's entries on top."""

        layer = self.modes.get(mode)
        if layer is None:
            return Overlay(categories=self.categories, meta=self.meta)

        categories: dict[str, Mapping[str, OverlayEntry]] = dict(self.categories)
        for category, entries in layer.categories.items():
            merged = dict(categories.get(category, {}))
            merged.update(entries)
            categories[category] = merged
        return Overlay(categories=categories, meta=self.meta)


def _parse_category(category: str, raw: object) -> Mapping[str, OverlayEntry]:
    if not isinstance(raw, Mapping):
        raise InvalidOverlayDataError(f"Category {category} must be an object keyed by ID")
    if is_addition_category(category):
        return {key: Addition.from_mapping(key, value) for key, value in raw.items()}
    return {key: FieldOverride.from_mapping(key, value) for key, value in raw.items()}


def _parse_modes(raw: object) -> dict[str, Overlay]:
    if not isinstance(raw, Mapping):
        raise InvalidOverlayDataError(f"{MODES_KEY} must be an object keyed by game mode")
    modes: dict[str, Overlay] = {}
    for mode, layer in raw.items():
        if not isinstance(layer, Mapping):
            raise InvalidOverlayDataError(f"Mode {mode} must be an object keyed by category")
        modes[mode] = Overlay(
            categories={
                category: _parse_category(category, entries) for category, entries in layer.items()
            }
        )
    return modes


def _parse_objective_patches(
    entity_id: str, raw: object
) -> dict[str, Mapping[str, JsonValue]]:
    if not isinstance(raw, Mapping):
        raise InvalidOverlayDataError(
            f"{entity_id}.{OBJECTIVES_FIELD} must be an object keyed by objective ID"
        )
    patches: dict[str, Mapping[str, JsonValue]] = {}
    for objective_id, patch in raw.items():
        if not isinstance(patch, Mapping):
            raise InvalidOverlayDataError(
                f"{entity_id}.{OBJECTIVES_FIELD}.{objective_id} must be an object"
            )
        patches[objective_id] = MappingProxyType(dict(patch))
    return patches


def _parse_added_objectives(
    entity_id: str, raw: object
) -> tuple[Mapping[str, JsonValue], ...]:
    if not is_json_array(raw):
        raise InvalidOverlayDataError(f"{entity_id}.{OBJECTIVES_ADD_FIELD} must be an array")
    records: list[Mapping[str, JsonValue]] = []
    for index, record in enumerate(cast("Sequence[object]", raw)):
        if not isinstance(record, Mapping):
            raise InvalidOverlayDataError(
                f"{entity_id}.{OBJECTIVES_ADD_FIELD}[{index}] must be an object"
            )
        records.append(record)
    return tuple(records)


def _parse_disabled(entity_id: str, raw: object) -> bool:
    if not isinstance(raw, bool):
        raise InvalidOverlayDataError(f"{entity_id}.{DISABLED_FIELD} must be a boolean")
    return raw
