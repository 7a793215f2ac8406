"""Client for the IQAir (AirVisual) city endpoint."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from models.records import CitySummary, Pollution
from services.errors import UpstreamShapeError
from services.retry import RetryPolicy
from upstream.http import get_json

UPSTREAM_NAME = "iqair"


class IQAirClient:
    name = UPSTREAM_NAME

    def __init__(self, http: httpx.AsyncClient, api_key: Optional[str], retry: RetryPolicy, base_url: str) -> None:
        self._http = http
        self._api_key = api_key
        self._retry = retry
        self._base_url = base_url.rstrip("/")

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def fetch_city(self, city: str, state: str, country: str) -> CitySummary:
        """Fetch the city summary; names must match IQAir's spelling exactly."""
        params = {"city": city, "state": state, "country": country, "key": self._api_key or ""}
        url = f"{self._base_url}/city"
        payload = await self._retry.call_with_retry(
            lambda: get_json(self._http, self.name, url, params=params),
            self.name,
        )
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict) or not data or payload.get("status") != "success":
            raise UpstreamShapeError(self.name, f"No data returned for {city}, {state}, {country}.")

        return CitySummary(
            city=str(data.get("city", city)),
            state=str(data.get("state", state)),
            country=str(data.get("country", country)),
            pollution=_parse_pollution(data.get("current")),
        )


def _parse_pollution(current: Any) -> Optional[Pollution]:
    if not isinstance(current, dict):
        return None
    raw = current.get("pollution")
    if not isinstance(raw, dict):
        return None
    aqius = raw.get("aqius")
    if isinstance(aqius, bool) or not isinstance(aqius, (int, float)):
        aqius = None
    return Pollution(aqius=aqius, mainus=raw.get("mainus"), ts=raw.get("ts"))
