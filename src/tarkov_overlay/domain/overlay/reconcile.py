"""Reconcile declared overrides against current live data.

Each override is classified as still needed, already fixed upstream, or
orphaned because the entity is gone (or explicitly disabled). Field checks
run in the fixed order of ``FIELD_CHECKS`` so reports are reproducible.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final, cast

from tarkov_overlay.domain.errors import InvalidOverlayDataError

from .compare import compare_subset
from .model import OBJECTIVES_ADD_FIELD, OBJECTIVES_FIELD
from .types import ABSENT, get_field, is_json_array

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .model import FieldOverride
    from .types import Entity, FieldValue, JsonValue

log = logging.getLogger(__name__)

UNKNOWN_NAME: Final[str] = "Unknown"
TASK_REQUIREMENTS_FIELD: Final[str] = "taskRequirements"


class DetailStatus(StrEnum):
    """Outcome of one field-level check."""

    FIXED = "fixed"
    NEEDED = "needed"
    CHECK = "check"
    INFO = "info"


class ResultStatus(StrEnum):
    """Outcome for one overridden entity."""

    NEEDED = "NEEDED"
    FIXED = "FIXED"
    REMOVED_FROM_API = "REMOVED_FROM_API"


_ACTIONABLE: Final[frozenset[DetailStatus]] = frozenset({DetailStatus.NEEDED, DetailStatus.CHECK})


@dataclass(frozen=True, slots=True)
class ValidationDetail:
    field: str
    status: DetailStatus
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "status": str(self.status), "message": self.message}


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationResult:
    id: str
    name: str
    status: ResultStatus
    details: tuple[ValidationDetail, ...] = ()

    @property
    def still_needed(self) -> bool:
        return self.status is ResultStatus.NEEDED

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "status": str(self.status),
            "stillNeeded": self.still_needed,
            "details": [detail.to_dict() for detail in self.details],
        }


type FieldCheck = Callable[[FieldOverride, Entity], ValidationDetail | None]


def format_value(value: FieldValue) -> str:
    """Render a value for report messages."""

    if value is ABSENT or value is None:
        return "undefined"
    if isinstance(value, str):
        return f"'{value}'"
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True, slots=True)
class SubsetFieldCheck:
    """Compare one top-level field of the override against the live entity."""

    field: str
    extract: Callable[[Entity, str], FieldValue] = get_field
    compare: Callable[[object, object], bool] = compare_subset

    def __call__(self, override: FieldOverride, live: Entity) -> ValidationDetail | None:
        override_value = override.declared(self.field)
        if override_value is ABSENT:
            return None

        live_value = self.extract(live, self.field)
        if self.compare(override_value, live_value):
            return ValidationDetail(
                field=self.field,
                status=DetailStatus.FIXED,
                message=f"{self.field}: {format_value(live_value)} - FIXED IN API",
            )
        return ValidationDetail(
            field=self.field,
            status=DetailStatus.NEEDED,
            message=(
                f"{self.field}: API={format_value(live_value)}, "
                f"Override={format_value(override_value)} - STILL NEEDED"
            ),
        )


def check_task_requirements(override: FieldOverride, live: Entity) -> ValidationDetail | None:
    """Compare prerequisite task IDs, ignoring requirements already marked active."""

    declared = override.declared(TASK_REQUIREMENTS_FIELD)
    if declared is ABSENT:
        return None
    override_reqs = _requirement_list(declared, owner=f"override {override.entity_id}")
    live_reqs = [
        requirement
        for requirement in _requirement_list(
            get_field(live, TASK_REQUIREMENTS_FIELD), owner=f"API task {override.entity_id}"
        )
        if not _is_active_requirement(requirement)
    ]

    if not live_reqs:
        if not override_reqs:
            return None
        return ValidationDetail(
            field=TASK_REQUIREMENTS_FIELD,
            status=DetailStatus.NEEDED,
            message=(
                f"{TASK_REQUIREMENTS_FIELD}: API=[] (empty), Override has "
                f"{len(override_reqs)} requirement(s) - STILL NEEDED"
            ),
        )

    live_ids = _sorted_requirement_ids(live_reqs)
    override_ids = _sorted_requirement_ids(override_reqs)
    if live_ids != override_ids:
        return ValidationDetail(
            field=TASK_REQUIREMENTS_FIELD,
            status=DetailStatus.NEEDED,
            message=(
                f"{TASK_REQUIREMENTS_FIELD}: API has different requirements "
                f"({_join_ids(live_ids)}) vs Override ({_join_ids(override_ids)}) - NEEDS REVIEW"
            ),
        )
    return ValidationDetail(
        field=TASK_REQUIREMENTS_FIELD,
        status=DetailStatus.FIXED,
        message=f"{TASK_REQUIREMENTS_FIELD}: FIXED IN API",
    )


FIELD_CHECKS: Final[tuple[FieldCheck, ...]] = (
    SubsetFieldCheck("minPlayerLevel"),
    SubsetFieldCheck("name"),
    SubsetFieldCheck("wikiLink"),
    SubsetFieldCheck("map"),
    SubsetFieldCheck("experience"),
    SubsetFieldCheck("finishRewards"),
    check_task_requirements,
)


def reconcile(
    entity_id: str,
    override: FieldOverride,
    live_entities: Iterable[Entity],
) -> ValidationResult:
    """Reconcile one override against the live entity with the same ID."""

    live = next((entity for entity in live_entities if entity.get("id") == entity_id), None)
    return _reconcile_entity(entity_id, override, live)


def reconcile_all(
    overrides: Mapping[str, FieldOverride],
    live_entities: Iterable[Entity],
) -> list[ValidationResult]:
    """Reconcile every override, in declaration order."""

    index: dict[str, Entity] = {}
    for entity in live_entities:
        live_id = entity.get("id")
        if isinstance(live_id, str):
            index.setdefault(live_id, entity)
    return [
        _reconcile_entity(entity_id, override, index.get(entity_id))
        for entity_id, override in overrides.items()
    ]


def _reconcile_entity(
    entity_id: str,
    override: FieldOverride,
    live: Entity | None,
) -> ValidationResult:
    if live is None:
        log.debug("Override %s has no live counterpart", entity_id)
        return ValidationResult(
            id=entity_id,
            name=UNKNOWN_NAME,
            status=ResultStatus.REMOVED_FROM_API,
            details=(
                ValidationDetail(
                    field="task",
                    status=DetailStatus.INFO,
                    message="Task not found in API - has been removed from tarkov.dev",
                ),
            ),
        )

    name = _live_name(live)
    if override.disabled:
        return ValidationResult(
            id=entity_id,
            name=name,
            status=ResultStatus.REMOVED_FROM_API,
            details=(
                ValidationDetail(
                    field="disabled",
                    status=DetailStatus.INFO,
                    message=(
                        "Task still in API but marked as disabled - should be removed "
                        "from API or override can be removed"
                    ),
                ),
            ),
        )

    details: list[ValidationDetail] = []
    for check in FIELD_CHECKS:
        detail = check(override, live)
        if detail is not None:
            details.append(detail)
    details.extend(_check_objective_patches(override, live))
    details.extend(_check_added_objectives(override, live))

    still_needed = any(detail.status in _ACTIONABLE for detail in details)
    status = ResultStatus.NEEDED if still_needed else ResultStatus.FIXED
    log.debug("Override %s reconciled as %s (%d details)", entity_id, status, len(details))
    return ValidationResult(id=entity_id, name=name, status=status, details=tuple(details))


def _check_objective_patches(override: FieldOverride, live: Entity) -> list[ValidationDetail]:
    details: list[ValidationDetail] = []
    live_objectives = _live_objectives(live)
    for objective_id, objective_patch in override.objectives.items():
        live_objective = next(
            (objective for objective in live_objectives if objective.get("id") == objective_id),
            None,
        )
        if live_objective is None:
            details.append(
                ValidationDetail(
                    field=f"objective:{objective_id}",
                    status=DetailStatus.CHECK,
                    message=f"objective {objective_id}: Not found in API - CHECK MANUALLY",
                )
            )
            continue

        for field_name, override_value in objective_patch.items():
            live_value = get_field(live_objective, field_name)
            qualified = f"objective:{objective_id}:{field_name}"
            if compare_subset(override_value, live_value):
                details.append(
                    ValidationDetail(
                        field=qualified,
                        status=DetailStatus.FIXED,
                        message=f"objective {field_name}: {format_value(live_value)} - FIXED IN API",
                    )
                )
            else:
                details.append(
                    ValidationDetail(
                        field=qualified,
                        status=DetailStatus.NEEDED,
                        message=(
                            f"objective {field_name}: API={format_value(live_value)}, "
                            f"Override={format_value(override_value)} - STILL NEEDED"
                        ),
                    )
                )
    return details


def _check_added_objectives(override: FieldOverride, live: Entity) -> list[ValidationDetail]:
    details: list[ValidationDetail] = []
    live_objectives = _live_objectives(live)
    for index, added in enumerate(override.objectives_add):
        added_id = added.get("id")
        description = added.get("description")
        key = added_id or description or f"#{index}"
        label = f"{OBJECTIVES_ADD_FIELD}:{key}"
        matched = any(
            (added_id is not None and objective.get("id") == added_id)
            or (description is not None and objective.get("description") == description)
            for objective in live_objectives
        )
        if matched:
            details.append(
                ValidationDetail(
                    field=label,
                    status=DetailStatus.FIXED,
                    message=(
                        f"added objective '{description or key}': NOW IN API - "
                        "MOVE TO OBJECTIVES OR REMOVE"
                    ),
                )
            )
        else:
            details.append(
                ValidationDetail(
                    field=label,
                    status=DetailStatus.NEEDED,
                    message=(
                        f"added objective '{description or key}': "
                        "Still missing from API - STILL NEEDED"
                    ),
                )
            )
    return details


def _live_name(live: Entity) -> str:
    name = live.get("name")
    return name if isinstance(name, str) else UNKNOWN_NAME


def _live_objectives(live: Entity) -> list[Mapping[str, JsonValue]]:
    objectives = live.get(OBJECTIVES_FIELD)
    if not is_json_array(objectives):
        return []
    return [
        objective
        for objective in cast("Sequence[JsonValue]", objectives)
        if isinstance(objective, Mapping)
    ]


def _requirement_list(value: FieldValue, *, owner: str) -> list[JsonValue]:
    if value is ABSENT or value is None:
        return []
    if not is_json_array(value):
        raise InvalidOverlayDataError(
            f"{TASK_REQUIREMENTS_FIELD} of {owner} must be an array, got {type(value).__name__}"
        )
    return list(cast("Sequence[JsonValue]", value))


def _is_active_requirement(requirement: JsonValue) -> bool:
    status = get_field(requirement, "status")
    if isinstance(status, str):
        return "active" in status
    if is_json_array(status):
        return "active" in cast("Sequence[JsonValue]", status)
    return False


def _requirement_task_id(requirement: JsonValue) -> str | None:
    task_id = get_field(get_field(requirement, "task"), "id")
    return task_id if isinstance(task_id, str) else None


def _sorted_requirement_ids(requirements: list[JsonValue]) -> list[str | None]:
    ids = [_requirement_task_id(requirement) for requirement in requirements]
    return sorted(ids, key=lambda task_id: (task_id is None, task_id or ""))


def _join_ids(ids: list[str | None]) -> str:
    return ", ".join(task_id or "" for task_id in ids)
