"""Ports for obtaining live data."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tarkov_overlay.domain.overlay.types import Entity


@runtime_checkable
class TaskFetcher(Protocol):
    """Callable port returning a fully materialized list of live tasks."""

    def __call__(self) -> list[Entity]: ...


__all__ = ["TaskFetcher"]
