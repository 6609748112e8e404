"""tarkov.dev API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var
from .http_resilience import ResilienceConfig, RetryPolicy
from .overlay import require_valid_mode

DEFAULT_TARKOV_DEV_API_URL = "https://api.tarkov.dev/graphql"
DEFAULT_TARKOV_DEV_LANG = "en"
DEFAULT_TARKOV_DEV_GAME_MODE = "regular"
TARKOV_DEV_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class TarkovDevConfig:
    """Holds tarkov.dev GraphQL API settings."""

    lang: str
    game_mode: str
    resilience: ResilienceConfig


def get_tarkov_dev_config(
    *,
    game_mode: str | None = None,
    resilience: ResilienceConfig | None = None,
) -> TarkovDevConfig:
    api_url = optional_env_var("TARKOV_DEV_API_URL", DEFAULT_TARKOV_DEV_API_URL)
    lang = optional_env_var("TARKOV_DEV_LANG", DEFAULT_TARKOV_DEV_LANG)
    mode = game_mode or optional_env_var("TARKOV_DEV_GAME_MODE", DEFAULT_TARKOV_DEV_GAME_MODE)
    return TarkovDevConfig(
        lang=lang,
        game_mode=require_valid_mode(mode),
        resilience=resilience
        or ResilienceConfig(
            name="tarkov-dev",
            base_url=api_url,
            timeout_seconds=TARKOV_DEV_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            default_headers={"Content-Type": "application/json"},
        ),
    )
