"""Apply overlay patches to live entities.

Field handling follows ``FIELD_MERGE_STRATEGIES``: plain fields replace the
entity value, ``objectives`` patches merge into objectives by ID, and
``objectivesAdd`` records are appended after that merge. Inputs are never
mutated; every correction produces a new mapping.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, cast

from tarkov_overlay.domain.errors import InvalidOverlayDataError

from .model import OBJECTIVES_FIELD
from .types import entity_id, is_json_array

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .model import FieldOverride, Overlay
    from .types import Entity, JsonValue

log = logging.getLogger(__name__)


def apply_patch(entity: Entity, patch: FieldOverride) -> Entity | None:
    """Return the corrected entity, or ``None`` when the patch disables it."""

    if patch.disabled:
        log.debug("Dropping disabled entity %s", patch.entity_id)
        return None

    corrected: dict[str, JsonValue] = dict(entity)
    corrected.update(patch.fields)

    if patch.objectives:
        objectives = _objectives_of(corrected, patch.entity_id)
        if objectives is not None:
            corrected[OBJECTIVES_FIELD] = [
                _merge_objective(objective, patch) for objective in objectives
            ]

    if patch.objectives_add:
        existing = _objectives_of(corrected, patch.entity_id) or []
        _warn_on_duplicate_objectives(patch, existing)
        corrected[OBJECTIVES_FIELD] = [*existing, *patch.objectives_add]

    return corrected


def apply_overlay(entity: Entity, overlay: Overlay, *, category: str = "tasks") -> Entity | None:
    """Apply the overlay entry for ``entity`` (if any) from ``category``."""

    patch = overlay.patch_for(category, entity_id(entity))
    if patch is None:
        return entity
    return apply_patch(entity, patch)


def apply_overlay_to_all(
    entities: Iterable[Entity],
    overlay: Overlay,
    *,
    category: str = "tasks",
) -> list[Entity]:
    """Apply the overlay to every entity, dropping disabled ones and keeping order."""

    corrected: list[Entity] = []
    for entity in entities:
        result = apply_overlay(entity, overlay, category=category)
        if result is not None:
            corrected.append(result)
    return corrected


def _objectives_of(entity: Mapping[str, JsonValue], owner_id: str) -> list[JsonValue] | None:
    objectives = entity.get(OBJECTIVES_FIELD)
    if objectives is None:
        return None
    if not is_json_array(objectives):
        raise InvalidOverlayDataError(
            f"{owner_id}.{OBJECTIVES_FIELD} must be an array, got {type(objectives).__name__}"
        )
    return list(cast("Sequence[JsonValue]", objectives))


def _merge_objective(objective: JsonValue, patch: FieldOverride) -> JsonValue:
    if not isinstance(objective, Mapping):
        return objective
    objective_id = objective.get("id")
    if not isinstance(objective_id, str):
        return objective
    objective_patch = patch.objectives.get(objective_id)
    if objective_patch is None:
        return objective
    return {**objective, **objective_patch}


def _warn_on_duplicate_objectives(patch: FieldOverride, existing: list[JsonValue]) -> None:
    existing_ids = {
        objective.get("id")
        for objective in existing
        if isinstance(objective, Mapping) and isinstance(objective.get("id"), str)
    }
    for record in patch.objectives_add:
        record_id = record.get("id")
        if isinstance(record_id, str) and record_id in existing_ids:
            log.warning(
                "objectivesAdd record %s on %s duplicates an existing objective ID",
                record_id,
                patch.entity_id,
            )
