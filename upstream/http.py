"""Shared GET helper translating httpx outcomes into upstream errors."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from services.errors import (
    RateLimitedError,
    UpstreamConnectionError,
    UpstreamShapeError,
    UpstreamStatusError,
)

logger = logging.getLogger(__name__)


async def get_json(
    client: httpx.AsyncClient,
    upstream: str,
    url: str,
    *,
    params: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Any:
    # Only the path is logged; query strings may carry API keys.
    logger.debug("Requesting upstream", extra={"upstream": upstream, "path": url})
    try:
        response = await client.get(url, params=params, headers=headers)
    except httpx.TimeoutException as exc:
        raise UpstreamConnectionError(upstream, f"Request timed out: {type(exc).__name__}") from exc
    except httpx.TransportError as exc:
        raise UpstreamConnectionError(upstream, f"Request failed: {type(exc).__name__}") from exc

    if response.status_code == 429:
        raise RateLimitedError(upstream)
    if not response.is_success:
        raise UpstreamStatusError(upstream, response.status_code)

    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamShapeError(upstream, "Response body is not valid JSON.") from exc
