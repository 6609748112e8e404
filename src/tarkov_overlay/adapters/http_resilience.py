"""Async HTTP client with transient-failure retries."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from httpx_retries import Retry, RetryTransport

from tarkov_overlay.config.http_resilience import ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from types import TracebackType

__all__ = ["ResilienceConfig", "ResilientClient", "RetryPolicy", "build_retry"]

log = getLogger(__name__)


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        allowed_methods=sorted(policy.retry_methods),
        status_forcelist=sorted(policy.retry_statuses),
        retry_on_exceptions=policy.retry_errors,
    )


class ResilientClient:
    """``httpx.AsyncClient`` wrapper configured from a :class:`ResilienceConfig`.

    Use as an async context manager; the underlying client is closed on exit.
    """

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url or "",
            timeout=config.timeout_seconds,
            headers=dict(config.default_headers or {}),
            event_hooks={"response": list(config.response_hooks)},
            transport=RetryTransport(retry=build_retry(config.retry)),
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def post(self, url: str, *, json: Any = None) -> httpx.Response:  # noqa: ANN401
        log.debug("%s POST %s", self.config.name, url)
        return await self._client.post(url, json=json)
