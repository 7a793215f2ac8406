from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

from models.records import Reading

Payload = Tuple[Reading, ...]


@dataclass(frozen=True)
class CacheEntry:
    payload: Payload
    stored_at: float


class ReadingsCache:
    """In-memory payload store keyed by city.

    Entries are replaced wholesale and never evicted. ``get`` honours the TTL;
    ``get_stale`` ignores it and is meant for upstream failure fallback.
    """

    def __init__(self, ttl_seconds: float = 15 * 60.0, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, city_key: str) -> Optional[Payload]:
        entry = self._entries.get(city_key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at < self.ttl_seconds:
            return entry.payload
        return None

    def get_stale(self, city_key: str) -> Optional[Payload]:
        entry = self._entries.get(city_key)
        return entry.payload if entry is not None else None

    def put(self, city_key: str, payload: Sequence[Reading]) -> None:
        self._entries[city_key] = CacheEntry(payload=tuple(payload), stored_at=self._clock())

    def age(self, city_key: str) -> Optional[float]:
        entry = self._entries.get(city_key)
        if entry is None:
            return None
        return self._clock() - entry.stored_at

    def summary(self) -> Dict[str, float]:
        now = self._clock()
        return {key: round(now - entry.stored_at, 3) for key, entry in self._entries.items()}
