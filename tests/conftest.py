from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tarkov_overlay.config import OverlayPathsConfig, bundled_schemas_dir

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

TASK_OVERRIDES = """
// corrections for tarkov.dev tasks
{
  "task-a": {
    minPlayerLevel: 10,
    objectives: {
      "obj-1": { count: 5 },
    },
  },
  "task-b": { name: "Shooter Born in Heaven" },
  "task-gone": { minPlayerLevel: 3 },
}
"""

TASK_ADDITIONS = """
{
  "new-task": {
    id: "new-task",
    name: "Fresh Start",
    wikiLink: "https://escapefromtarkov.fandom.com/wiki/Fresh_Start",
  },
}
"""

EDITIONS = """
{
  "standard": {
    id: "standard",
    title: "Standard",
    exclusiveTaskIds: ["task-a", "task-unknown"],
  },
}
"""

PVE_TASK_OVERRIDES = """
{
  "task-a": { minPlayerLevel: 5 },
}
"""


@pytest.fixture
def write_source() -> Callable[[Path, str], Path]:
    def _write(path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def overlay_paths(tmp_path: Path) -> OverlayPathsConfig:
    return OverlayPathsConfig(root_dir=tmp_path, schemas_dir=bundled_schemas_dir())


@pytest.fixture
def populated_paths(
    overlay_paths: OverlayPathsConfig,
    write_source: Callable[[Path, str], Path],
) -> OverlayPathsConfig:
    write_source(overlay_paths.overrides_dir / "tasks.json5", TASK_OVERRIDES)
    write_source(overlay_paths.additions_dir / "tasksAdd.json5", TASK_ADDITIONS)
    write_source(overlay_paths.additions_dir / "editions.json5", EDITIONS)
    write_source(overlay_paths.mode_overrides_dir("pve") / "tasks.json5", PVE_TASK_OVERRIDES)
    return overlay_paths


@pytest.fixture
def live_tasks() -> list[dict[str, object]]:
    return [
        {
            "id": "task-a",
            "name": "Debut",
            "minPlayerLevel": 10,
            "wikiLink": "https://escapefromtarkov.fandom.com/wiki/Debut",
            "taskRequirements": [],
            "objectives": [
                {"id": "obj-1", "description": "Eliminate Scavs", "count": 3},
                {"id": "obj-2", "description": "Hand over items", "count": 2},
            ],
        },
        {
            "id": "task-b",
            "name": "Shooter Born in Heaven",
            "minPlayerLevel": 42,
            "objectives": [],
        },
        {
            "id": "task-c",
            "name": "Fresh Start",
            "wikiLink": "https://escapefromtarkov.fandom.com/wiki/Fresh_Start/",
            "objectives": [],
        },
    ]
