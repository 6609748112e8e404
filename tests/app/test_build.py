from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from tarkov_overlay.adapters.source_files import SourceFileError
from tarkov_overlay.app import build_overlay
from tarkov_overlay.config import OverlayBuildConfig
from tarkov_overlay.domain.artifact import verify_artifact
from tarkov_overlay.domain.errors import InvalidOverlayDataError

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from tarkov_overlay.config import OverlayPathsConfig

NOW = datetime(2025, 6, 1, 8, 0, tzinfo=UTC)
BUILD_CONFIG = OverlayBuildConfig(version="1.2.3")


def test_build_writes_stamped_artifact(populated_paths: OverlayPathsConfig) -> None:
    result = build_overlay(paths=populated_paths, build_config=BUILD_CONFIG, now=NOW)

    written = json.loads(result.path.read_text(encoding="utf-8"))
    assert result.path == populated_paths.overlay_path
    assert written == result.artifact
    assert list(written) == ["tasks", "editions", "tasksAdd", "modes", "$meta"]
    assert written["$meta"]["version"] == "1.2.3"
    assert written["$meta"]["generated"] == "2025-06-01T08:00:00.000Z"
    assert verify_artifact(written)
    assert result.summary.entity_counts == {"tasks": 3, "editions": 1, "tasksAdd": 1}
    assert result.summary.mode_counts == {"pve": {"tasks": 1}}


def test_build_is_reproducible(populated_paths: OverlayPathsConfig) -> None:
    first = build_overlay(paths=populated_paths, build_config=BUILD_CONFIG, now=NOW)
    first_text = first.path.read_text(encoding="utf-8")
    second = build_overlay(paths=populated_paths, build_config=BUILD_CONFIG, now=NOW)

    assert second.path.read_text(encoding="utf-8") == first_text


def test_build_with_no_sources_writes_meta_only(overlay_paths: OverlayPathsConfig) -> None:
    result = build_overlay(paths=overlay_paths, build_config=BUILD_CONFIG, now=NOW)

    assert list(result.artifact) == ["$meta"]
    assert result.path.is_file()


def test_build_parse_failure_writes_nothing(
    overlay_paths: OverlayPathsConfig, write_source: Callable[[Path, str], Path]
) -> None:
    write_source(overlay_paths.overrides_dir / "tasks.json5", "{ broken")

    with pytest.raises(SourceFileError):
        build_overlay(paths=overlay_paths, build_config=BUILD_CONFIG, now=NOW)

    assert not overlay_paths.overlay_path.exists()


def test_build_malformed_patch_keeps_previous_artifact(
    populated_paths: OverlayPathsConfig, write_source: Callable[[Path, str], Path]
) -> None:
    previous = build_overlay(paths=populated_paths, build_config=BUILD_CONFIG, now=NOW)
    previous_text = previous.path.read_text(encoding="utf-8")
    write_source(populated_paths.overrides_dir / "tasks.json5", '{ "task-a": { disabled: "yes" } }')

    with pytest.raises(InvalidOverlayDataError):
        build_overlay(paths=populated_paths, build_config=BUILD_CONFIG, now=NOW)

    assert populated_paths.overlay_path.read_text(encoding="utf-8") == previous_text
