from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from services.cache import ReadingsCache
from services.rate_limiter import RateLimiter
from services.relay import AirQualityRelay, build_relay
from services.retry import RetryPolicy

OPENAQ_URL = "https://openaq.test/v3"
IQAIR_URL = "https://iqair.test/v2"


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def location_payload(sensors: List[tuple[int, str]]) -> Dict[str, Any]:
    return {
        "results": [
            {
                "id": 7732,
                "sensors": [
                    {"id": sensor_id, "parameter": {"name": name, "displayName": name.upper()}}
                    for sensor_id, name in sensors
                ],
            }
        ]
    }


def latest_payload(values: List[tuple[int, float]]) -> Dict[str, Any]:
    return {
        "results": [
            {
                "sensorsId": sensor_id,
                "value": value,
                "datetime": {"utc": "2024-01-01T00:00:00Z", "local": "2024-01-01T08:00:00+08:00"},
            }
            for sensor_id, value in values
        ]
    }


def city_payload(aqius: Optional[int]) -> Dict[str, Any]:
    pollution = {"ts": "2024-01-01T00:00:00.000Z", "mainus": "p2"}
    if aqius is not None:
        pollution["aqius"] = aqius
    return {
        "status": "success",
        "data": {
            "city": "Hong Kong",
            "state": "Hong Kong",
            "country": "Hong Kong",
            "current": {"pollution": pollution},
        },
    }


class FakeUpstream:
    """Serves canned OpenAQ and IQAir responses and records every request."""

    def __init__(self) -> None:
        self.locations: Dict[str, Dict[str, Any]] = {
            "7732": location_payload([(1, "pm25"), (2, "pm10")]),
            "225643": location_payload([(10, "o3"), (11, "no2"), (12, "pm25")]),
        }
        self.latest: Dict[str, Dict[str, Any]] = {
            "7732": latest_payload([(2, 40), (1, 12)]),
            "225643": latest_payload([(12, 31.5), (10, 18), (11, 22.1)]),
        }
        self.city: Dict[str, Any] = city_payload(55)
        self.requests: List[httpx.Request] = []
        self.forced_statuses: List[int] = []
        self.fail_all: Optional[int] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_all is not None:
            return httpx.Response(self.fail_all, json={"message": "failure"})
        if self.forced_statuses:
            return httpx.Response(self.forced_statuses.pop(0), json={"message": "failure"})

        path = request.url.path
        if path == "/v2/city":
            return httpx.Response(200, json=self.city)
        parts = path.strip("/").split("/")
        if parts[:2] == ["v3", "locations"] and len(parts) == 3:
            return httpx.Response(200, json=self.locations[parts[2]])
        if parts[:2] == ["v3", "locations"] and len(parts) == 4 and parts[3] == "latest":
            return httpx.Response(200, json=self.latest[parts[2]])
        return httpx.Response(404, json={"message": "not found"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def make_relay(clock: FakeClock, upstream: FakeUpstream) -> Callable[..., AirQualityRelay]:
    def factory(
        openaq_key: Optional[str] = "openaq-key",
        iqair_key: Optional[str] = "iqair-key",
        ttl_seconds: float = 900.0,
        max_attempts: int = 3,
    ) -> AirQualityRelay:
        http = httpx.AsyncClient(transport=upstream.transport())
        limiter = RateLimiter({"openaq": 2.0, "iqair": 5.0}, clock=clock, sleep=clock.sleep)
        return build_relay(
            http,
            openaq_key,
            iqair_key,
            openaq_base_url=OPENAQ_URL,
            iqair_base_url=IQAIR_URL,
            rate_limiter=limiter,
            retry=RetryPolicy(limiter, max_attempts=max_attempts, initial_delay=1.0, sleep=clock.sleep),
            cache=ReadingsCache(ttl_seconds=ttl_seconds, clock=clock),
        )

    return factory
