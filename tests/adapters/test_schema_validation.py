from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tarkov_overlay.adapters.schema_validation import (
    SCHEMA_CONFIGS,
    get_validator,
    initialize_validators,
    validate_file,
    validate_source_files,
)
from tarkov_overlay.config import bundled_schemas_dir

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from tarkov_overlay.adapters.schema_validation import ValidatorCache
    from tarkov_overlay.config import OverlayPathsConfig


@pytest.fixture(scope="module")
def validators() -> ValidatorCache:
    return initialize_validators(bundled_schemas_dir())


def test_every_configured_schema_is_bundled(validators: ValidatorCache) -> None:
    assert set(validators) == {config.pattern for config in SCHEMA_CONFIGS}
    assert get_validator("tasks.json5", validators) is not None
    assert get_validator("traders.json5", validators) is None


def test_valid_task_overrides(
    tmp_path: Path, write_source: Callable[[Path, str], Path], validators: ValidatorCache
) -> None:
    path = write_source(
        tmp_path / "tasks.json5",
        """{
          "task-a": {
            minPlayerLevel: 10,
            map: null,
            objectives: { "obj-1": { count: 5 } },
            objectivesAdd: [{ id: "obj-9", description: "New" }],
          },
        }""",
    )

    result = validate_file(path, "overrides/tasks.json5", validators)

    assert result.valid
    assert result.errors == ()


def test_schema_errors_carry_json_pointer(
    tmp_path: Path, write_source: Callable[[Path, str], Path], validators: ValidatorCache
) -> None:
    path = write_source(
        tmp_path / "tasks.json5",
        '{ "task-a": { minPlayerLevel: "ten", disabled: "yes" } }',
    )

    result = validate_file(path, "overrides/tasks.json5", validators)

    assert not result.valid
    assert any(error.startswith("/task-a/minPlayerLevel: ") for error in result.errors)
    assert any(error.startswith("/task-a/disabled: ") for error in result.errors)


def test_parse_errors_make_file_invalid(
    tmp_path: Path, write_source: Callable[[Path, str], Path], validators: ValidatorCache
) -> None:
    path = write_source(tmp_path / "tasks.json5", "{ oops")

    result = validate_file(path, "overrides/tasks.json5", validators)

    assert not result.valid
    assert len(result.errors) == 1


def test_empty_and_unconfigured_files_are_valid(
    tmp_path: Path, write_source: Callable[[Path, str], Path], validators: ValidatorCache
) -> None:
    empty = write_source(tmp_path / "tasks.json5", "{}")
    other = write_source(tmp_path / "traders.json5", "{ anything: [1, 2] }")

    assert validate_file(empty, "overrides/tasks.json5", validators).valid
    assert validate_file(other, "overrides/traders.json5", validators).valid


def test_validate_source_files_walks_all_directories(
    populated_paths: OverlayPathsConfig,
    write_source: Callable[[Path, str], Path],
    validators: ValidatorCache,
) -> None:
    write_source(populated_paths.mode_additions_dir("regular") / "itemsAdd.json5", '{ "x": { id: "x" } }')

    results = validate_source_files(populated_paths, ("regular", "pve"), validators)

    assert [(result.file, result.valid) for result in results] == [
        ("overrides/tasks.json5", True),
        ("additions/editions.json5", True),
        ("additions/tasksAdd.json5", True),
        ("additions/modes/regular/itemsAdd.json5", False),
        ("overrides/modes/pve/tasks.json5", True),
    ]


def test_undecodable_file_is_reported_and_others_still_validated(
    populated_paths: OverlayPathsConfig, validators: ValidatorCache
) -> None:
    (populated_paths.overrides_dir / "tasks.json5").write_bytes(b"\xff")

    results = validate_source_files(populated_paths, ("regular", "pve"), validators)

    by_file = {result.file: result for result in results}
    assert not by_file["overrides/tasks.json5"].valid
    assert "cannot read file" in by_file["overrides/tasks.json5"].errors[0]
    assert [file for file, result in by_file.items() if not result.valid] == ["overrides/tasks.json5"]
    assert "additions/tasksAdd.json5" in by_file
    assert "overrides/modes/pve/tasks.json5" in by_file
