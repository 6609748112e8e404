"""JSON Schema validation of overlay source files."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from jsonschema import Draft7Validator
from jsonschema.validators import validator_for

from .source_files import SourceFileError, list_json5_files, load_json5_file

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from jsonschema.exceptions import ValidationError
    from jsonschema.protocols import Validator

    from tarkov_overlay.config.paths import OverlayPathsConfig

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SchemaConfig:
    """Maps a source file name to the schema that governs it."""

    pattern: str
    schema_file: str


SCHEMA_CONFIGS: Final[tuple[SchemaConfig, ...]] = (
    SchemaConfig(pattern="tasks.json5", schema_file="task-override.schema.json"),
    SchemaConfig(pattern="tasksAdd.json5", schema_file="task-additions.schema.json"),
    SchemaConfig(pattern="editions.json5", schema_file="edition.schema.json"),
    SchemaConfig(pattern="itemsAdd.json5", schema_file="item-additions.schema.json"),
)

type ValidatorCache = dict[str, Validator]


@dataclass(frozen=True, slots=True)
class SchemaValidationResult:
    file: str
    valid: bool
    errors: tuple[str, ...] = field(default_factory=tuple)


def initialize_validators(
    schemas_dir: Path,
    configs: tuple[SchemaConfig, ...] = SCHEMA_CONFIGS,
) -> ValidatorCache:
    """Load and check every configured schema, keyed by file name pattern."""

    cache: ValidatorCache = {}
    for config in configs:
        schema_path = schemas_dir / config.schema_file
        schema = json.loads(schema_path.read_text(encoding="utf-8"))
        validator_cls = validator_for(schema, default=Draft7Validator)
        validator_cls.check_schema(schema)
        cache[config.pattern] = validator_cls(schema)
    return cache


def get_validator(filename: str, validators: ValidatorCache) -> Validator | None:
    return validators.get(filename)


def format_schema_error(error: ValidationError) -> str:
    pointer = "".join(f"/{part}" for part in error.absolute_path)
    return f"{pointer}: {error.message}"


def validate_file(path: Path, display_path: str, validators: ValidatorCache) -> SchemaValidationResult:
    """Validate one source file; parse failures are reported, not raised."""

    try:
        data = load_json5_file(path)
    except SourceFileError as exc:
        return SchemaValidationResult(file=display_path, valid=False, errors=(exc.reason,))

    if not data:
        return SchemaValidationResult(file=display_path, valid=True)

    validator = get_validator(path.name, validators)
    if validator is None:
        log.debug("No schema configured for %s", display_path)
        return SchemaValidationResult(file=display_path, valid=True)

    errors = tuple(format_schema_error(error) for error in validator.iter_errors(data))
    return SchemaValidationResult(file=display_path, valid=not errors, errors=errors)


def _source_directories(paths: OverlayPathsConfig, modes: tuple[str, ...]) -> Iterator[Path]:
    yield paths.overrides_dir
    yield paths.additions_dir
    for mode in modes:
        yield paths.mode_overrides_dir(mode)
        yield paths.mode_additions_dir(mode)


def validate_source_files(
    paths: OverlayPathsConfig,
    modes: tuple[str, ...],
    validators: ValidatorCache | None = None,
) -> list[SchemaValidationResult]:
    """Validate every overlay source file, reported relative to the data directory."""

    cache = validators if validators is not None else initialize_validators(paths.schemas_dir)
    results: list[SchemaValidationResult] = []
    for directory in _source_directories(paths, modes):
        for name in list_json5_files(directory):
            path = directory / name
            display_path = path.relative_to(paths.data_dir).as_posix()
            results.append(validate_file(path, display_path, cache))
    return results
