"""Bounded retries with exponential backoff for upstream calls."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from services.errors import RateLimitedError, UpstreamError
from services.rate_limiter import RateLimiter, Sleep

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy:
    """Runs an upstream request through the rate limiter, retrying transient failures.

    429 responses and other transient errors (non-2xx, transport failures) share
    one attempt budget and one backoff sequence: the delay starts at
    ``initial_delay`` and doubles after every failed attempt. Non-transient
    upstream errors are raised immediately.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        max_attempts: int = 3,
        initial_delay: float = 1.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self.rate_limiter = rate_limiter
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self._sleep = sleep

    async def call_with_retry(
        self,
        request: Callable[[], Awaitable[T]],
        upstream_name: str,
        max_attempts: Optional[int] = None,
        initial_delay: Optional[float] = None,
    ) -> T:
        attempts = max_attempts if max_attempts is not None else self.max_attempts
        delay = initial_delay if initial_delay is not None else self.initial_delay
        if attempts < 1:
            raise ValueError("max_attempts must be at least 1.")

        for attempt in range(1, attempts + 1):
            await self.rate_limiter.acquire(upstream_name)
            try:
                return await request()
            except RateLimitedError:
                logger.warning(
                    "Upstream rate limited the request",
                    extra={
                        "upstream": upstream_name,
                        "attempt": attempt,
                        "max_attempts": attempts,
                        "delay_s": delay,
                    },
                )
                if attempt == attempts:
                    raise
            except UpstreamError as exc:
                if not exc.transient:
                    raise
                logger.error(
                    "Upstream request failed: %s",
                    exc.message,
                    extra={
                        "upstream": upstream_name,
                        "attempt": attempt,
                        "max_attempts": attempts,
                        "status_code": getattr(exc, "status_code", None),
                    },
                )
                if attempt == attempts:
                    raise

            await self._sleep(delay)
            delay *= 2

        raise RuntimeError("retry loop exited without a result")
