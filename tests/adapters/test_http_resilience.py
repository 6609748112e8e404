from __future__ import annotations

import asyncio

import httpx

from tarkov_overlay.adapters.http_resilience import (
    ResilienceConfig,
    ResilientClient,
    RetryPolicy,
    build_retry,
)


def test_build_retry_copies_policy() -> None:
    retry = build_retry(RetryPolicy(total=5, backoff_factor=0.1, retry_methods=frozenset({"POST"})))

    assert retry.total == 5
    assert retry.backoff_factor == 0.1


def test_resilient_client_uses_configured_defaults() -> None:
    config = ResilienceConfig(
        name="test",
        base_url="https://api.example/",
        timeout_seconds=12.0,
        default_headers={"Content-Type": "application/json"},
    )

    client = ResilientClient(config)
    inner = client._client  # noqa: SLF001  # type: ignore[reportPrivateUsage]

    assert inner.headers["content-type"] == "application/json"
    assert str(inner.base_url) == "https://api.example/"
    assert inner.timeout.read == 12.0
    asyncio.run(client.aclose())
