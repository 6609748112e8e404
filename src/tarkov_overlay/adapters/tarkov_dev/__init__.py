"""tarkov.dev live-data adapter."""

from __future__ import annotations

from .client import TASKS_QUERY, TarkovDevAPIError, TarkovDevClient
from .schema import TaskPayload, TasksData, TasksResponse
from .snapshot import SnapshotTaskFetcher, load_entity_snapshot, load_task_snapshot

__all__ = [
    "TASKS_QUERY",
    "SnapshotTaskFetcher",
    "TarkovDevAPIError",
    "TarkovDevClient",
    "TaskPayload",
    "TasksData",
    "TasksResponse",
    "load_entity_snapshot",
    "load_task_snapshot",
]
