"""Application orchestration entry points."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from tarkov_overlay.adapters.schema_validation import validate_source_files
from tarkov_overlay.adapters.source_files import (
    SourceFileError,
    load_json5_file,
    load_optional_json5_file,
    load_overlay_sources,
)
from tarkov_overlay.adapters.tarkov_dev import TarkovDevClient, load_entity_snapshot
from tarkov_overlay.config import (
    VALID_MODES,
    get_overlay_build_config,
    get_paths_config,
    get_tarkov_dev_config,
    require_valid_mode,
)
from tarkov_overlay.domain.artifact import (
    ArtifactSummary,
    serialize_artifact,
    stamp_artifact,
    summarize_artifact,
    verify_artifact,
)
from tarkov_overlay.domain.overlay import (
    AdditionResult,
    AdditionsReport,
    EditionTaskReference,
    Overlay,
    ReconciliationReport,
    ValidationResult,
    apply_overlay_to_all,
    categorize,
    categorize_additions,
    check_edition_task_references,
    check_task_additions,
    reconcile_all,
)
from tarkov_overlay.domain.overlay.model import MODES_KEY

if TYPE_CHECKING:
    from pathlib import Path

    from tarkov_overlay.adapters.schema_validation import SchemaValidationResult
    from tarkov_overlay.config import OverlayBuildConfig, OverlayPathsConfig
    from tarkov_overlay.domain.overlay import Entity
    from tarkov_overlay.domain.ports import TaskFetcher


log = getLogger(__name__)

TASK_OVERRIDES_FILE = "tasks.json5"
TASK_ADDITIONS_FILE = "tasksAdd.json5"
EDITIONS_FILE = "editions.json5"


@dataclass(frozen=True, slots=True)
class BuildResult:
    path: Path
    artifact: dict[str, object]
    summary: ArtifactSummary


@dataclass(frozen=True, slots=True)
class OverrideCheckReport:
    """Everything ``check-overrides`` found for one run against live data."""

    results: tuple[ValidationResult, ...]
    report: ReconciliationReport
    additions: tuple[AdditionResult, ...] = ()
    edition_references: tuple[EditionTaskReference, ...] = ()

    @property
    def additions_report(self) -> AdditionsReport:
        return categorize_additions(self.additions)

    def to_dict(self) -> dict[str, object]:
        return {
            "results": [result.to_dict() for result in self.results],
            "summary": self.report.to_dict(),
            "additions": [result.to_dict() for result in self.additions],
            "editionReferences": [reference.to_dict() for reference in self.edition_references],
        }


def build_overlay(
    *,
    paths: OverlayPathsConfig | None = None,
    build_config: OverlayBuildConfig | None = None,
    now: datetime | None = None,
) -> BuildResult:
    """Merge every source file into ``dist/overlay.json``.

    The document is fully loaded, stamped and parsed before anything touches
    the filesystem, so a failure never leaves a partial artifact behind.
    """

    effective_paths = paths or get_paths_config()
    effective_config = build_config or get_overlay_build_config()
    generated = now or datetime.now(UTC)
    log.info(
        "Building overlay %s from %s (modes: %s)",
        effective_config.version,
        effective_paths.data_dir,
        ", ".join(effective_config.modes),
    )

    sources = load_overlay_sources(effective_paths, effective_config.modes)
    artifact = stamp_artifact(sources, version=effective_config.version, generated=generated)
    Overlay.from_mapping(artifact)
    content = serialize_artifact(artifact)

    effective_paths.ensure_dist_dir()
    target = effective_paths.overlay_path
    staging = target.with_name(f".{target.name}.tmp")
    staging.write_text(content, encoding="utf-8")
    staging.replace(target)

    summary = summarize_artifact(artifact)
    log.info(
        "Wrote %s: %s",
        target,
        ", ".join(f"{category}={count}" for category, count in summary.entity_counts.items())
        or "no entries",
    )
    return BuildResult(path=target, artifact=artifact, summary=summary)


def validate_sources(
    *,
    paths: OverlayPathsConfig | None = None,
    modes: tuple[str, ...] = VALID_MODES,
) -> list[SchemaValidationResult]:
    """Validate every source file against its JSON Schema."""

    effective_paths = paths or get_paths_config()
    results = validate_source_files(effective_paths, modes)
    invalid = sum(1 for result in results if not result.valid)
    log.info("Validated %d source file(s), %d invalid", len(results), invalid)
    return results


def check_overrides(
    *,
    paths: OverlayPathsConfig | None = None,
    fetch_tasks: TaskFetcher | None = None,
    game_mode: str | None = None,
) -> OverrideCheckReport:
    """Reconcile task overrides, task additions and edition references against live data."""

    effective_paths = paths or get_paths_config()
    mode = require_valid_mode(game_mode) if game_mode is not None else None
    fetcher = fetch_tasks
    if fetcher is None:
        tarkov_dev_config = get_tarkov_dev_config(game_mode=mode)
        mode = tarkov_dev_config.game_mode
        fetcher = TarkovDevClient(config=tarkov_dev_config)

    sources: dict[str, object] = {
        "tasks": load_json5_file(effective_paths.overrides_dir / TASK_OVERRIDES_FILE),
        "tasksAdd": load_optional_json5_file(effective_paths.additions_dir / TASK_ADDITIONS_FILE),
        "editions": load_optional_json5_file(effective_paths.additions_dir / EDITIONS_FILE),
    }
    if mode is not None:
        sources[MODES_KEY] = {mode: _load_task_mode_layer(effective_paths, mode)}
    overlay = Overlay.from_mapping(sources)
    if mode is not None:
        overlay = overlay.for_mode(mode)
    overrides = overlay.overrides("tasks")
    additions = overlay.additions("tasksAdd")
    editions = overlay.additions("editions")
    log.info(
        "Loaded %d task override(s), %d task addition(s) and %d edition(s) for %s",
        len(overrides),
        len(additions),
        len(editions),
        mode or "base overlay",
    )

    live_tasks = fetcher()
    log.info("Fetched %d live task(s)", len(live_tasks))

    results = tuple(reconcile_all(overrides, live_tasks))
    report = categorize(results)
    log.info(
        "Overrides: still needed=%d, fixed=%d, removed=%d",
        len(report.still_needed),
        len(report.fixed),
        len(report.removed_from_api),
    )
    return OverrideCheckReport(
        results=results,
        report=report,
        additions=tuple(check_task_additions(additions, live_tasks)),
        edition_references=tuple(check_edition_task_references(editions, live_tasks)),
    )


def _load_task_mode_layer(paths: OverlayPathsConfig, mode: str) -> dict[str, object]:
    return {
        "tasks": load_optional_json5_file(paths.mode_overrides_dir(mode) / TASK_OVERRIDES_FILE),
        "tasksAdd": load_optional_json5_file(paths.mode_additions_dir(mode) / TASK_ADDITIONS_FILE),
    }


def load_overlay_artifact(overlay_path: Path) -> Overlay:
    """Parse a built overlay, warning when its hash does not match its content."""

    try:
        raw = json.loads(overlay_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SourceFileError(overlay_path, f"cannot load overlay: {exc}") from exc
    if isinstance(raw, dict) and not verify_artifact(raw):
        log.warning("Overlay %s failed sha256 verification", overlay_path)
    return Overlay.from_mapping(raw)


def apply_overlay_file(
    overlay_path: Path,
    entities_path: Path,
    *,
    category: str = "tasks",
    mode: str | None = None,
) -> list[Entity]:
    """Apply a built overlay to a snapshot of live entities."""

    overlay = load_overlay_artifact(overlay_path)
    if mode is not None:
        overlay = overlay.for_mode(require_valid_mode(mode))
    entities = load_entity_snapshot(entities_path, category)
    corrected = apply_overlay_to_all(entities, overlay, category=category)
    log.info(
        "Applied %s overlay to %d %s entit(ies), %d remain",
        mode or "base",
        len(entities),
        category,
        len(corrected),
    )
    return corrected
