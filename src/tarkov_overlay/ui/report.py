# ruff: noqa: T201

"""Plain-text rendering of command results."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, cast

from tarkov_overlay.domain.overlay import AdditionStatus, DetailStatus, ResultStatus
from tarkov_overlay.domain.overlay.model import META_KEY

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from tarkov_overlay.adapters.schema_validation import SchemaValidationResult
    from tarkov_overlay.app import BuildResult, OverrideCheckReport
    from tarkov_overlay.domain.overlay import (
        AdditionResult,
        EditionTaskReference,
        ValidationResult,
    )

RULE = "=" * 60

_RESULT_MARKERS = {
    ResultStatus.NEEDED: "[needed]",
    ResultStatus.FIXED: "[fixed]",
    ResultStatus.REMOVED_FROM_API: "[removed]",
}
_DETAIL_MARKERS = {
    DetailStatus.FIXED: "+",
    DetailStatus.NEEDED: "!",
    DetailStatus.CHECK: "?",
    DetailStatus.INFO: "-",
}
_ADDITION_MARKERS = {
    AdditionStatus.RESOLVED: "[resolved]",
    AdditionStatus.MISSING: "[missing]",
    AdditionStatus.CHECK: "[check]",
}


def print_header(title: str) -> None:
    print(RULE)
    print(title)
    print(RULE)
    print()


def _print_bucket(label: str, entries: Sequence[tuple[str, str]]) -> None:
    print(f"{label} ({len(entries)})")
    if entries:
        for name, key in entries:
            print(f"  - {name} ({key})")
    else:
        print("  None")
    print()


def print_build_result(result: BuildResult) -> None:
    meta = cast("dict[str, str]", result.artifact[META_KEY])
    entities = ", ".join(f"{key}: {count}" for key, count in result.summary.entity_counts.items())
    print("Built overlay.json")
    print(f"   Entities: {entities or 'none'}")
    if result.summary.mode_counts:
        modes = ", ".join(
            f"{mode}({', '.join(f'{key}: {count}' for key, count in counts.items())})"
            for mode, counts in result.summary.mode_counts.items()
        )
        print(f"   Modes: {modes}")
    print(f"   Version: {meta['version']}")
    print(f"   Generated: {meta['generated']}")
    print(f"   SHA256: {str(meta['sha256'])[:16]}...")
    print(f"\nOutput: {result.path}")


def print_validation_results(results: Sequence[SchemaValidationResult]) -> None:
    for result in results:
        print(f"{'ok  ' if result.valid else 'FAIL'} {result.file}")
        for error in result.errors:
            print(f"     {error}")
    print()
    if all(result.valid for result in results):
        print("All files valid!")
    else:
        print("Validation failed!")


def print_override_results(results: Sequence[ValidationResult]) -> None:
    print_header("OVERLAY VALIDATION REPORT")
    for result in results:
        print(f"{_RESULT_MARKERS[result.status]} {result.name} ({result.id})")
        for detail in result.details:
            print(f"   {_DETAIL_MARKERS[detail.status]} {detail.message}")
        print()


def print_addition_results(results: Sequence[AdditionResult]) -> None:
    print_header("ADDITIONS CHECK")
    for result in results:
        print(f"{_ADDITION_MARKERS[result.status]} {result.name} ({result.key})")
        print(f"   {result.message}")
        print()


def print_edition_references(references: Sequence[EditionTaskReference]) -> None:
    print_header("EDITION EXCLUSIONS CHECK")
    if not references:
        print("All edition task references exist in API")
        print()
        return
    print(f"Missing edition task references (review) ({len(references)})")
    for reference in references:
        title = reference.edition_title or reference.edition_id
        print(f"  - {title} ({reference.edition_id}) {reference.kind} task ID {reference.task_id}")
    print()


def print_check_report(check: OverrideCheckReport) -> None:
    print_override_results(check.results)

    print_header("SUMMARY")
    report = check.report
    _print_bucket("Still need overrides", [(r.name, r.id) for r in report.still_needed])
    _print_bucket("Fixed in API, can remove", [(r.name, r.id) for r in report.fixed])
    _print_bucket(
        "Removed from API, delete from overlay",
        [(r.name, r.id) for r in report.removed_from_api],
    )
    if report.obsolete_count:
        print("RECOMMENDATION:")
        print(f"   Update overrides/tasks.json5 to remove {report.obsolete_count} obsolete override(s)")
        print()

    print_addition_results(check.additions)
    print_header("ADDITIONS SUMMARY")
    additions = check.additions_report
    _print_bucket("Resolved in API (remove from tasksAdd)", [(r.name, r.key) for r in additions.resolved])
    _print_bucket("Still missing from API", [(r.name, r.key) for r in additions.missing])
    _print_bucket("Needs review (name-only matches)", [(r.name, r.key) for r in additions.review])

    print_edition_references(check.edition_references)


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def write_json(path: Path, data: object) -> None:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
