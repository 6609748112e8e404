"""Overlay kernel: normalization, subset comparison, patch application and reconciliation.

Two pipelines share the comparison kernel:

- apply: ``Overlay x live entities -> corrected entities``
- reconcile: ``Overlay x live entities -> validation report``

Both are pure functions over immutable inputs.
"""

from __future__ import annotations

from .additions import (
    AdditionResult,
    AdditionsReport,
    AdditionStatus,
    EditionTaskReference,
    categorize_additions,
    check_edition_task_references,
    check_task_additions,
)
from .apply import apply_overlay, apply_overlay_to_all, apply_patch
from .compare import compare_subset
from .model import (
    FIELD_MERGE_STRATEGIES,
    Addition,
    FieldOverride,
    MergeStrategy,
    Overlay,
    OverlayEntry,
    OverlayMeta,
)
from .normalize import canonicalize, normalize, values_equal
from .reconcile import (
    FIELD_CHECKS,
    DetailStatus,
    ResultStatus,
    ValidationDetail,
    ValidationResult,
    reconcile,
    reconcile_all,
)
from .report import ReconciliationReport, categorize
from .types import ABSENT, Absent, Entity, JsonValue

__all__ = [
    "ABSENT",
    "FIELD_CHECKS",
    "FIELD_MERGE_STRATEGIES",
    "Absent",
    "Addition",
    "AdditionResult",
    "AdditionStatus",
    "AdditionsReport",
    "DetailStatus",
    "EditionTaskReference",
    "Entity",
    "FieldOverride",
    "JsonValue",
    "MergeStrategy",
    "Overlay",
    "OverlayEntry",
    "OverlayMeta",
    "ReconciliationReport",
    "ResultStatus",
    "ValidationDetail",
    "ValidationResult",
    "apply_overlay",
    "apply_overlay_to_all",
    "apply_patch",
    "canonicalize",
    "categorize",
    "categorize_additions",
    "check_edition_task_references",
    "check_task_additions",
    "compare_subset",
    "normalize",
    "reconcile",
    "reconcile_all",
    "values_equal",
]
