from __future__ import annotations

import pytest

from tarkov_overlay.domain.errors import InvalidOverlayDataError
from tarkov_overlay.domain.overlay import (
    ABSENT,
    FIELD_MERGE_STRATEGIES,
    Addition,
    FieldOverride,
    MergeStrategy,
    Overlay,
)
from tarkov_overlay.domain.overlay.model import is_addition_category, merge_strategy_for


def test_merge_strategy_table() -> None:
    assert FIELD_MERGE_STRATEGIES["objectives"] is MergeStrategy.KEYED_MERGE
    assert FIELD_MERGE_STRATEGIES["objectivesAdd"] is MergeStrategy.APPEND
    assert FIELD_MERGE_STRATEGIES["disabled"] is MergeStrategy.CONTROL
    assert merge_strategy_for("minPlayerLevel") is MergeStrategy.REPLACE


def test_field_override_splits_fields_by_strategy() -> None:
    override = FieldOverride.from_mapping(
        "task-a",
        {
            "minPlayerLevel": 10,
            "map": None,
            "objectives": {"obj-1": {"count": 5}},
            "objectivesAdd": [{"id": "obj-9", "description": "New"}],
            "disabled": False,
        },
    )

    assert dict(override.fields) == {"minPlayerLevel": 10, "map": None}
    assert dict(override.objectives["obj-1"]) == {"count": 5}
    assert override.objectives_add == ({"id": "obj-9", "description": "New"},)
    assert override.disabled is False


def test_declared_distinguishes_null_from_absent() -> None:
    override = FieldOverride.from_mapping("task-a", {"map": None})

    assert override.declared("map") is None
    assert override.declared("wikiLink") is ABSENT


@pytest.mark.parametrize(
    "raw",
    [
        "not an object",
        {"objectives": ["obj-1"]},
        {"objectives": {"obj-1": 5}},
        {"objectivesAdd": {"id": "obj-9"}},
        {"objectivesAdd": ["obj-9"]},
        {"disabled": "yes"},
    ],
)
def test_field_override_rejects_malformed_patches(raw: object) -> None:
    with pytest.raises(InvalidOverlayDataError):
        FieldOverride.from_mapping("task-a", raw)


def test_addition_lookups_fall_back_to_key() -> None:
    named = Addition.from_mapping(
        "new-task",
        {"id": "abc", "name": "Fresh Start", "wikiLink": "https://wiki/Fresh_Start"},
    )
    edition = Addition.from_mapping("unheard", {"title": "Unheard Edition"})

    assert named.id == "abc"
    assert named.name == "Fresh Start"
    assert named.wiki_link == "https://wiki/Fresh_Start"
    assert named.description is None
    assert edition.id == "unheard"
    assert edition.name == "Unheard Edition"


def test_addition_categories() -> None:
    assert is_addition_category("tasksAdd")
    assert is_addition_category("itemsAdd")
    assert is_addition_category("editions")
    assert is_addition_category("storyChapters")
    assert not is_addition_category("tasks")


def test_overlay_from_mapping_builds_typed_views() -> None:
    overlay = Overlay.from_mapping(
        {
            "tasks": {"task-a": {"minPlayerLevel": 10}},
            "tasksAdd": {"new-task": {"id": "new-task", "name": "Fresh Start"}},
            "$meta": {"version": "1.2.0", "generated": "2025-01-01T00:00:00.000Z", "sha256": "ab"},
        }
    )

    assert list(overlay.overrides("tasks")) == ["task-a"]
    assert list(overlay.additions("tasksAdd")) == ["new-task"]
    assert overlay.overrides("tasksAdd") == {}
    assert overlay.patch_for("tasks", "task-a") is not None
    assert overlay.patch_for("tasks", "task-z") is None
    assert overlay.meta is not None
    assert overlay.meta.version == "1.2.0"


def test_overlay_rejects_non_object_category() -> None:
    with pytest.raises(InvalidOverlayDataError):
        Overlay.from_mapping({"tasks": []})


def test_overlay_rejects_incomplete_meta() -> None:
    with pytest.raises(InvalidOverlayDataError):
        Overlay.from_mapping({"$meta": {"version": "1.0.0"}})


def test_for_mode_layers_mode_entries_by_id() -> None:
    overlay = Overlay.from_mapping(
        {
            "tasks": {
                "task-a": {"minPlayerLevel": 10},
                "task-b": {"name": "Base"},
            },
            "modes": {
                "pve": {
                    "tasks": {"task-a": {"minPlayerLevel": 5}},
                    "tasksAdd": {"pve-only": {"name": "PvE Only"}},
                }
            },
        }
    )

    pve = overlay.for_mode("pve")
    regular = overlay.for_mode("regular")

    pve_a = pve.patch_for("tasks", "task-a")
    regular_a = regular.patch_for("tasks", "task-a")
    assert pve_a is not None
    assert regular_a is not None
    assert pve_a.declared("minPlayerLevel") == 5
    assert regular_a.declared("minPlayerLevel") == 10
    assert pve.patch_for("tasks", "task-b") is not None
    assert list(pve.additions("tasksAdd")) == ["pve-only"]
    assert pve.modes == {}
