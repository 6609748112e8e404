"""Overlay build settings."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import metadata
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

VALID_MODES: Final[tuple[str, ...]] = ("regular", "pve")
VERSION_ENV_VAR: Final[str] = "TARKOV_OVERLAY_VERSION"
_FALLBACK_VERSION = "0.0.0+local"


@dataclass(frozen=True, slots=True)
class OverlayBuildConfig:
    version: str
    modes: tuple[str, ...] = VALID_MODES


def _package_version() -> str:
    try:
        return metadata.version("tarkov-overlay")
    except metadata.PackageNotFoundError:
        return _FALLBACK_VERSION


def require_valid_mode(mode: str) -> str:
    if mode not in VALID_MODES:
        valid = ", ".join(VALID_MODES)
        raise ConfigurationError(f"Unknown game mode {mode!r} (expected one of: {valid})")
    return mode


def get_overlay_build_config() -> OverlayBuildConfig:
    version = optional_env_var(VERSION_ENV_VAR, "") or _package_version()
    return OverlayBuildConfig(version=version)
