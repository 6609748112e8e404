"""Read cached tarkov.dev snapshots from disk.

Snapshots may be saved as a bare list, as ``{"<category>": [...]}`` or as the
full GraphQL envelope ``{"data": {"<category>": [...]}}``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import ValidationError

from tarkov_overlay.adapters.source_files import SourceFileError

from .schema import TasksData

if TYPE_CHECKING:
    from pathlib import Path

    from tarkov_overlay.domain.overlay.types import Entity


def _read_snapshot(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SourceFileError(path, f"cannot load snapshot: {exc}") from exc


def _unwrap(raw: object, category: str) -> object:
    if isinstance(raw, Mapping) and isinstance(raw.get("data"), Mapping):
        raw = raw["data"]
    if isinstance(raw, Mapping) and category in raw:
        raw = raw[category]
    return raw


def load_entity_snapshot(path: Path, category: str = "tasks") -> list[Entity]:
    """Load a list of ID-keyed entities of any category without further validation."""

    raw = _unwrap(_read_snapshot(path), category)
    if not isinstance(raw, list) or not all(isinstance(item, Mapping) for item in raw):
        raise SourceFileError(path, f"expected a list of {category} objects")
    return [dict(item) for item in raw]


def load_task_snapshot(path: Path) -> list[Entity]:
    """Load tasks, requiring every record to carry a string ``id`` and ``name``."""

    raw = _unwrap(_read_snapshot(path), "tasks")
    try:
        data = TasksData.model_validate({"tasks": raw})
    except ValidationError as exc:
        raise SourceFileError(path, f"invalid task snapshot: {exc}") from exc
    return [task.to_entity() for task in data.tasks]


@dataclass(slots=True, frozen=True)
class SnapshotTaskFetcher:
    path: Path

    def __call__(self) -> list[Entity]:
        return load_task_snapshot(self.path)
