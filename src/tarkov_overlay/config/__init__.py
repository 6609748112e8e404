"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var
from .errors import ConfigurationError
from .http_resilience import ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .overlay import VALID_MODES, OverlayBuildConfig, get_overlay_build_config, require_valid_mode
from .paths import OverlayPathsConfig, bundled_schemas_dir, get_paths_config
from .tarkov_dev import TarkovDevConfig, get_tarkov_dev_config

__all__ = [
    "VALID_MODES",
    "ConfigurationError",
    "OverlayBuildConfig",
    "OverlayPathsConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "TarkovDevConfig",
    "bundled_schemas_dir",
    "configure_logging",
    "get_overlay_build_config",
    "get_paths_config",
    "get_tarkov_dev_config",
    "optional_env_var",
    "require_valid_mode",
]
