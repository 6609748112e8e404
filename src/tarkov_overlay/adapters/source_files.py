"""Loading JSON5 overlay source files."""

from __future__ import annotations

from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING, Final

import json5

from tarkov_overlay.domain.errors import OverlayError
from tarkov_overlay.domain.overlay.model import MODES_KEY

if TYPE_CHECKING:
    from pathlib import Path

    from tarkov_overlay.config.paths import OverlayPathsConfig

log = getLogger(__name__)

JSON5_SUFFIX: Final[str] = ".json5"

type SourceData = dict[str, object]
type CategoryData = dict[str, SourceData]


class SourceFileError(OverlayError):
    """Raised when an overlay source file cannot be read or parsed."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.reason = message


def list_json5_files(directory: Path) -> list[str]:
    """Return the sorted ``.json5`` file names directly inside ``directory``."""

    if not directory.is_dir():
        return []
    return sorted(
        entry.name for entry in directory.iterdir() if entry.is_file() and entry.suffix == JSON5_SUFFIX
    )


def load_json5_file(path: Path) -> SourceData:
    """Parse one JSON5 file; empty files count as an empty object."""

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceFileError(path, f"cannot read file: {exc}") from exc

    if not text.strip():
        return {}

    try:
        data = json5.loads(text)
    except ValueError as exc:
        raise SourceFileError(path, str(exc)) from exc

    if not isinstance(data, Mapping):
        raise SourceFileError(path, f"top-level value must be an object, got {type(data).__name__}")
    return dict(data)


def load_all_json5_from_dir(directory: Path) -> CategoryData:
    """Load every JSON5 file in ``directory`` keyed by file stem."""

    loaded: CategoryData = {}
    for name in list_json5_files(directory):
        path = directory / name
        loaded[path.stem] = load_json5_file(path)
        log.debug("Loaded %s (%d entries)", path, len(loaded[path.stem]))
    return loaded


def load_mode_sources(paths: OverlayPathsConfig, modes: tuple[str, ...]) -> dict[str, CategoryData]:
    """Load mode-specific overrides and additions; modes without files are omitted."""

    loaded: dict[str, CategoryData] = {}
    for mode in modes:
        mode_data: CategoryData = {}
        mode_data.update(load_all_json5_from_dir(paths.mode_overrides_dir(mode)))
        mode_data.update(load_all_json5_from_dir(paths.mode_additions_dir(mode)))
        if mode_data:
            loaded[mode] = mode_data
    return loaded


def load_overlay_sources(paths: OverlayPathsConfig, modes: tuple[str, ...]) -> dict[str, object]:
    """Load overrides, then additions, then per-mode layers in a stable order."""

    output: dict[str, object] = {}
    output.update(load_all_json5_from_dir(paths.overrides_dir))
    output.update(load_all_json5_from_dir(paths.additions_dir))
    mode_data = load_mode_sources(paths, modes)
    if mode_data:
        output[MODES_KEY] = mode_data
    return output


def load_optional_json5_file(path: Path) -> SourceData:
    """Like :func:`load_json5_file` but a missing file yields ``{}``."""

    if not path.exists():
        log.info("Optional source %s not found, treating as empty", path)
        return {}
    return load_json5_file(path)
