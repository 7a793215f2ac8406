"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True, slots=True)
class Sensor:
    """A sensor attached to a monitoring location."""

    id: int
    parameter: str


@dataclass(frozen=True, slots=True)
class LatestEntry:
    """Most recent value reported by a single sensor."""

    sensor_id: int
    value: float
    local_datetime: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Pollution:
    aqius: Optional[float] = None
    mainus: Optional[str] = None
    ts: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CitySummary:
    """City-level aggregate returned by the city summary provider."""

    city: str
    state: str
    country: str
    pollution: Optional[Pollution] = None


@dataclass(frozen=True, slots=True)
class Reading:
    """One named value in the relay response."""

    name: str
    value: float

    def as_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass(frozen=True, slots=True)
class CityConfig:
    """Upstream identifiers for a supported city key.

    The IQAir names must match the provider's own spelling exactly.
    """

    key: str
    location_id: str
    iqair_city: str
    iqair_state: str
    iqair_country: str


DEFAULT_CITY = "HongKong"

CITIES: dict[str, CityConfig] = {
    "HongKong": CityConfig(
        key="HongKong",
        location_id="7732",
        iqair_city="Hong Kong",
        iqair_state="Hong Kong",
        iqair_country="Hong Kong",
    ),
    "Bangkok": CityConfig(
        key="Bangkok",
        location_id="225643",
        iqair_city="Bangkok",
        iqair_state="Bangkok",
        iqair_country="Thailand",
    ),
}
