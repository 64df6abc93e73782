"""httpx client builder for the completion endpoints."""

from __future__ import annotations

import httpx

from gpt_assistant.config import APIConfig


def build_async_client(
    config: APIConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` bound to the configured base URL.

    The bearer token is attached per request, so a client built without a
    credential never sends an unauthenticated call.
    """
    return httpx.AsyncClient(
        base_url=config.base_url.rstrip("/") + "/",
        timeout=httpx.Timeout(config.timeout),
        headers={"Content-Type": "application/json"},
        transport=transport,
    )
