"""Client for the OpenAQ v3 location endpoints."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx

from models.records import LatestEntry, Sensor
from services.errors import UpstreamShapeError
from services.retry import RetryPolicy
from upstream.http import get_json

logger = logging.getLogger(__name__)

UPSTREAM_NAME = "openaq"


class OpenAQClient:
    """Reads sensor metadata and latest values for a monitoring location."""

    name = UPSTREAM_NAME

    def __init__(self, http: httpx.AsyncClient, api_key: Optional[str], retry: RetryPolicy, base_url: str) -> None:
        self._http = http
        self._api_key = api_key
        self._retry = retry
        self._base_url = base_url.rstrip("/")

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def fetch_sensors(self, location_id: str) -> List[Sensor]:
        payload = await self._get(f"/locations/{location_id}")
        results = _results(payload)
        if not results or not isinstance(results[0], dict) or not results[0].get("sensors"):
            raise UpstreamShapeError(self.name, "No sensor data found in API response.")

        sensors: List[Sensor] = []
        try:
            for raw in results[0]["sensors"]:
                if not isinstance(raw, dict) or raw.get("id") is None:
                    continue
                parameter = raw.get("parameter") or {}
                name = parameter.get("name") or parameter.get("displayName")
                if not name:
                    continue
                sensors.append(Sensor(id=int(raw["id"]), parameter=str(name)))
        except (AttributeError, TypeError, ValueError) as exc:
            raise UpstreamShapeError(self.name, f"Malformed sensor data in API response: {exc}") from exc
        logger.debug(
            "Fetched sensor list",
            extra={"upstream": self.name, "location_id": location_id, "reading_count": len(sensors)},
        )
        return sensors

    async def fetch_latest(self, location_id: str) -> List[LatestEntry]:
        payload = await self._get(f"/locations/{location_id}/latest")
        results = _results(payload)
        if not results:
            raise UpstreamShapeError(self.name, "No air quality data found in API response.")

        entries: List[LatestEntry] = []
        try:
            for raw in results:
                if not isinstance(raw, dict):
                    continue
                sensor_id = raw.get("sensorsId")
                value = raw.get("value")
                if sensor_id is None or isinstance(value, bool) or not isinstance(value, (int, float)):
                    continue
                local = (raw.get("datetime") or {}).get("local")
                entries.append(LatestEntry(sensor_id=int(sensor_id), value=value, local_datetime=local))
        except (AttributeError, TypeError, ValueError) as exc:
            raise UpstreamShapeError(self.name, f"Malformed air quality data in API response: {exc}") from exc
        return entries

    async def _get(self, path: str) -> Any:
        headers = {"X-API-Key": self._api_key or "", "Accept": "application/json"}
        url = f"{self._base_url}{path}"
        return await self._retry.call_with_retry(
            lambda: get_json(self._http, self.name, url, headers=headers),
            self.name,
        )


def _results(payload: Any) -> list:
    if not isinstance(payload, dict):
        return []
    results = payload.get("results")
    return results if isinstance(results, list) else []
