"""Summaries over reconciliation results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .reconcile import ResultStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .reconcile import ValidationResult


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconciliationReport:
    """Views over a result list: what to keep, what to delete, what is gone."""

    still_needed: tuple[ValidationResult, ...] = ()
    fixed: tuple[ValidationResult, ...] = ()
    removed_from_api: tuple[ValidationResult, ...] = ()

    @property
    def obsolete_count(self) -> int:
        return len(self.fixed) + len(self.removed_from_api)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "stillNeeded": [result.id for result in self.still_needed],
            "fixed": [result.id for result in self.fixed],
            "removedFromApi": [result.id for result in self.removed_from_api],
        }


def categorize(results: Iterable[ValidationResult]) -> ReconciliationReport:
    materialized = tuple(results)
    return ReconciliationReport(
        still_needed=tuple(result for result in materialized if result.still_needed),
        fixed=tuple(result for result in materialized if result.status is ResultStatus.FIXED),
        removed_from_api=tuple(
            result for result in materialized if result.status is ResultStatus.REMOVED_FROM_API
        ),
    )
