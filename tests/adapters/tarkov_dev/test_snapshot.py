from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from tarkov_overlay.adapters.source_files import SourceFileError
from tarkov_overlay.adapters.tarkov_dev import (
    SnapshotTaskFetcher,
    load_entity_snapshot,
    load_task_snapshot,
)

if TYPE_CHECKING:
    from pathlib import Path

TASKS = [{"id": "task-a", "name": "Debut", "minPlayerLevel": 10}]


@pytest.mark.parametrize(
    "payload",
    [TASKS, {"tasks": TASKS}, {"data": {"tasks": TASKS}}],
    ids=["list", "tasks-key", "graphql-envelope"],
)
def test_load_task_snapshot_accepts_saved_shapes(tmp_path: Path, payload: object) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    assert load_task_snapshot(path) == TASKS
    assert SnapshotTaskFetcher(path)() == TASKS


def test_load_task_snapshot_rejects_records_without_id(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"name": "No ID"}]), encoding="utf-8")

    with pytest.raises(SourceFileError, match="invalid task snapshot"):
        load_task_snapshot(path)


def test_missing_snapshot_raises(tmp_path: Path) -> None:
    with pytest.raises(SourceFileError):
        load_task_snapshot(tmp_path / "missing.json")


def test_load_entity_snapshot_for_other_categories(tmp_path: Path) -> None:
    path = tmp_path / "items.json"
    path.write_text(json.dumps({"data": {"items": [{"id": "item-1"}]}}), encoding="utf-8")

    assert load_entity_snapshot(path, "items") == [{"id": "item-1"}]

    path.write_text(json.dumps({"data": {"items": {"id": "item-1"}}}), encoding="utf-8")
    with pytest.raises(SourceFileError, match="expected a list of items objects"):
        load_entity_snapshot(path, "items")
