"""Fetch, merge and cache orchestration for the air-quality endpoint."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Mapping, Optional, Tuple

import httpx

from models.records import CITIES, DEFAULT_CITY, CityConfig, Reading
from services.cache import ReadingsCache
from services.errors import (
    ConfigurationError,
    InvalidCityError,
    UpstreamError,
    UpstreamFailureError,
)
from services.merger import build_sensor_mapping, merge_readings
from services.rate_limiter import RateLimiter
from services.retry import RetryPolicy
from settings import get_settings
from upstream.iqair import IQAirClient
from upstream.openaq import OpenAQClient

logger = logging.getLogger(__name__)


class AirQualityRelay:
    """Coordinates upstream clients, merging and the per-city cache."""

    def __init__(
        self,
        openaq: OpenAQClient,
        iqair: IQAirClient,
        cache: ReadingsCache,
        cities: Mapping[str, CityConfig] = CITIES,
        default_city: str = DEFAULT_CITY,
        http: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.openaq = openaq
        self.iqair = iqair
        self.cache = cache
        self.cities = dict(cities)
        self.default_city = default_city
        self._http = http

    def supported_cities(self) -> list[str]:
        return list(self.cities)

    async def get_latest(self, city_key: Optional[str] = None) -> Tuple[Reading, ...]:
        key = city_key or self.default_city
        city = self.cities.get(key)
        if city is None:
            supported = "' or '".join(self.cities)
            raise InvalidCityError(f"Invalid city parameter. Use '{supported}'.")

        if not (self.openaq.configured and self.iqair.configured):
            raise ConfigurationError("API key not configured")

        cached = self.cache.get(key)
        if cached is not None:
            logger.info(
                "Serving cached readings",
                extra={"city": key, "cache_age_s": _rounded(self.cache.age(key))},
            )
            return cached

        try:
            payload = await self._fetch(city)
        except UpstreamError as exc:
            stale = self.cache.get_stale(key)
            if stale is not None:
                logger.warning(
                    "Upstream failed, serving stale readings: %s",
                    exc.message,
                    extra={
                        "city": key,
                        "upstream": exc.upstream,
                        "cache_age_s": _rounded(self.cache.age(key)),
                    },
                )
                return stale
            logger.error(
                "Upstream failed with no cached fallback: %s",
                exc.message,
                extra={"city": key, "upstream": exc.upstream},
            )
            raise UpstreamFailureError(exc.message) from exc

        self.cache.put(key, payload)
        logger.info("Fetched fresh readings", extra={"city": key, "reading_count": len(payload)})
        return payload

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()

    async def _fetch(self, city: CityConfig) -> Tuple[Reading, ...]:
        sensors = await self.openaq.fetch_sensors(city.location_id)
        mapping = build_sensor_mapping(sensors)
        latest = await self.openaq.fetch_latest(city.location_id)
        summary = await self.iqair.fetch_city(city.iqair_city, city.iqair_state, city.iqair_country)
        return tuple(merge_readings(mapping, latest, summary))


def _rounded(value: Optional[float]) -> Optional[float]:
    return round(value, 3) if value is not None else None


def build_relay(
    http: httpx.AsyncClient,
    openaq_api_key: Optional[str],
    iqair_api_key: Optional[str],
    openaq_base_url: str = "https://api.openaq.org/v3",
    iqair_base_url: str = "https://api.airvisual.com/v2",
    rate_limiter: Optional[RateLimiter] = None,
    retry: Optional[RetryPolicy] = None,
    cache: Optional[ReadingsCache] = None,
) -> AirQualityRelay:
    """Wire a relay around an existing HTTP client."""
    limiter = rate_limiter or RateLimiter({"openaq": 2.0, "iqair": 5.0})
    policy = retry or RetryPolicy(limiter)
    return AirQualityRelay(
        openaq=OpenAQClient(http, openaq_api_key, policy, openaq_base_url),
        iqair=IQAirClient(http, iqair_api_key, policy, iqair_base_url),
        cache=cache or ReadingsCache(),
        http=http,
    )


@lru_cache
def build_default_relay() -> AirQualityRelay:
    """Factory that wires the relay from environment settings."""
    settings = get_settings()
    http = httpx.AsyncClient(timeout=settings.request_timeout_seconds)
    limiter = RateLimiter(
        {
            "openaq": settings.openaq_min_interval_seconds,
            "iqair": settings.iqair_min_interval_seconds,
        }
    )
    return build_relay(
        http,
        settings.openaq_api_key,
        settings.iqair_api_key,
        openaq_base_url=settings.openaq_base_url,
        iqair_base_url=settings.iqair_base_url,
        rate_limiter=limiter,
        retry=RetryPolicy(
            limiter,
            max_attempts=settings.retry_max_attempts,
            initial_delay=settings.retry_initial_delay_seconds,
        ),
        cache=ReadingsCache(ttl_seconds=settings.cache_ttl_seconds),
    )
