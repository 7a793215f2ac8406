"""Per-upstream minimum spacing between outgoing requests."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class RateLimiter:
    """Spaces requests to each upstream by its configured minimum interval.

    State is process-wide for whoever holds the instance. The check-then-record
    sequence runs under a per-upstream ``asyncio.Lock`` so concurrent callers
    targeting the same upstream are released one interval apart, in lock order.
    """

    def __init__(
        self,
        intervals: Mapping[str, float],
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._intervals: Dict[str, float] = dict(intervals)
        self._clock = clock
        self._sleep = sleep
        self._last_request: Dict[str, float] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def interval_for(self, upstream: str) -> float:
        return self._intervals.get(upstream, 0.0)

    def last_request(self, upstream: str) -> Optional[float]:
        return self._last_request.get(upstream)

    async def acquire(self, upstream: str) -> None:
        lock = self._locks.setdefault(upstream, asyncio.Lock())
        async with lock:
            interval = self.interval_for(upstream)
            last = self._last_request.get(upstream)
            if last is not None:
                wait_for = interval - (self._clock() - last)
                if wait_for > 0:
                    logger.debug(
                        "Rate limiting upstream request",
                        extra={"upstream": upstream, "delay_s": round(wait_for, 3)},
                    )
                    await self._sleep(wait_for)
            self._last_request[upstream] = self._clock()
