from __future__ import annotations

from models.records import Reading
from services.cache import ReadingsCache


def _payload(value: float) -> list[Reading]:
    return [Reading(name="pm25", value=value)]


def test_get_returns_payload_within_ttl(clock) -> None:
    cache = ReadingsCache(ttl_seconds=900, clock=clock)
    cache.put("HongKong", _payload(12))

    clock.advance(899)

    assert cache.get("HongKong") == (Reading(name="pm25", value=12),)


def test_expired_entry_is_a_miss_but_stays_available_stale(clock) -> None:
    cache = ReadingsCache(ttl_seconds=900, clock=clock)
    cache.put("HongKong", _payload(12))

    clock.advance(900)

    assert cache.get("HongKong") is None
    assert cache.get_stale("HongKong") == (Reading(name="pm25", value=12),)


def test_missing_key(clock) -> None:
    cache = ReadingsCache(clock=clock)

    assert cache.get("Bangkok") is None
    assert cache.get_stale("Bangkok") is None
    assert cache.age("Bangkok") is None


def test_put_replaces_entry_wholesale(clock) -> None:
    cache = ReadingsCache(ttl_seconds=60, clock=clock)
    cache.put("HongKong", [Reading("pm25", 1), Reading("pm10", 2)])
    clock.advance(120)

    cache.put("HongKong", _payload(3))

    assert cache.get("HongKong") == (Reading(name="pm25", value=3),)
    assert cache.age("HongKong") == 0


def test_summary_reports_ages(clock) -> None:
    cache = ReadingsCache(clock=clock)
    cache.put("HongKong", _payload(1))
    clock.advance(30)
    cache.put("Bangkok", _payload(2))
    clock.advance(10)

    assert cache.summary() == {"HongKong": 40.0, "Bangkok": 10.0}
