"""GraphQL client for the tarkov.dev API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from tarkov_overlay.adapters.http_resilience import ResilientClient
from tarkov_overlay.config.tarkov_dev import DEFAULT_TARKOV_DEV_API_URL, get_tarkov_dev_config

from .schema import TasksResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from tarkov_overlay.config.http_resilience import ResilienceConfig
    from tarkov_overlay.config.tarkov_dev import TarkovDevConfig
    from tarkov_overlay.domain.overlay.types import Entity

log = getLogger(__name__)

TASKS_QUERY: Final[str] = """
query OverlayTasks($lang: LanguageCode, $gameMode: GameMode) {
  tasks(lang: $lang, gameMode: $gameMode) {
    id
    name
    minPlayerLevel
    wikiLink
    experience
    map { id name }
    taskRequirements { task { id name } status }
    finishRewards {
      items { count item { id name } }
      traderStanding { standing trader { id name } }
    }
    objectives {
      id
      description
      type
      optional
      maps { id name }
      ... on TaskObjectiveItem { count items { id name } }
      ... on TaskObjectiveShoot { count }
    }
  }
}
"""


class TarkovDevAPIError(RuntimeError):
    """Raised when the tarkov.dev API returns errors or an unexpected payload."""


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class TarkovDevClient:
    config: TarkovDevConfig = field(default_factory=get_tarkov_dev_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(self) -> list[Entity]:
        return self.fetch_tasks()

    def fetch_tasks(self) -> list[Entity]:
        return asyncio.run(self._fetch_tasks_async())

    async def _fetch_tasks_async(self) -> list[Entity]:
        resilience = self.config.resilience
        endpoint = resilience.base_url or DEFAULT_TARKOV_DEV_API_URL
        body = {
            "query": TASKS_QUERY,
            "variables": {"lang": self.config.lang, "gameMode": self.config.game_mode},
        }
        log.info("Fetching %s tasks from %s", self.config.game_mode, endpoint)

        async with self.client_factory(resilience) as client:
            response = await client.post(endpoint, json=body)
        response.raise_for_status()

        try:
            payload = TasksResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise TarkovDevAPIError(f"Unexpected tarkov.dev response payload: {exc}") from exc

        if payload.errors:
            messages = "; ".join(error.message for error in payload.errors)
            log.error("tarkov.dev GraphQL errors: %s", messages)
            raise TarkovDevAPIError(messages)
        if payload.data is None:
            raise TarkovDevAPIError("tarkov.dev response contained no data")

        return [task.to_entity() for task in payload.data.tasks]
