"""Filesystem layout of an overlay project."""

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Final

ROOT_ENV_VAR: Final[str] = "TARKOV_OVERLAY_ROOT"
SCHEMAS_ENV_VAR: Final[str] = "TARKOV_OVERLAY_SCHEMAS_DIR"

DATA_DIR_NAME: Final[str] = "data"
DIST_DIR_NAME: Final[str] = "dist"
OVERLAY_FILENAME: Final[str] = "overlay.json"
OVERRIDES_DIR_NAME: Final[str] = "overrides"
ADDITIONS_DIR_NAME: Final[str] = "additions"
MODES_DIR_NAME: Final[str] = "modes"


@dataclass(frozen=True, slots=True)
class OverlayPathsConfig:
    root_dir: Path
    schemas_dir: Path

    @property
    def data_dir(self) -> Path:
        return self.root_dir / DATA_DIR_NAME

    @property
    def overrides_dir(self) -> Path:
        return self.data_dir / OVERRIDES_DIR_NAME

    @property
    def additions_dir(self) -> Path:
        return self.data_dir / ADDITIONS_DIR_NAME

    @property
    def dist_dir(self) -> Path:
        return self.root_dir / DIST_DIR_NAME

    @property
    def overlay_path(self) -> Path:
        return self.dist_dir / OVERLAY_FILENAME

    def mode_overrides_dir(self, mode: str) -> Path:
        return self.overrides_dir / MODES_DIR_NAME / mode

    def mode_additions_dir(self, mode: str) -> Path:
        return self.additions_dir / MODES_DIR_NAME / mode

    def ensure_dist_dir(self) -> Path:
        self.dist_dir.mkdir(parents=True, exist_ok=True)
        return self.dist_dir


def bundled_schemas_dir() -> Path:
    """Return the directory of JSON Schemas shipped with the package."""

    return Path(str(resources.files("tarkov_overlay") / "schemas"))


def get_paths_config(*, root_dir: Path | None = None) -> OverlayPathsConfig:
    if root_dir is None:
        env_root = os.getenv(ROOT_ENV_VAR)
        root_dir = Path(env_root) if env_root else Path.cwd()
    env_schemas = os.getenv(SCHEMAS_ENV_VAR)
    schemas_dir = Path(env_schemas) if env_schemas else bundled_schemas_dir()
    return OverlayPathsConfig(
        root_dir=root_dir.expanduser().resolve(),
        schemas_dir=schemas_dir.expanduser().resolve(),
    )
