"""Join sensor metadata with latest values into the relay payload."""

from __future__ import annotations

import locale
from typing import Callable, Dict, Iterable, List, Optional

from models.records import CitySummary, LatestEntry, Reading, Sensor

UNKNOWN_SENSOR = "Unknown"
AQI_READING_NAME = "aqius"


def build_sensor_mapping(sensors: Iterable[Sensor]) -> Dict[int, str]:
    """Map sensor ids to pollutant names. Later duplicates win."""
    return {sensor.id: sensor.parameter for sensor in sensors}


def merge_readings(
    mapping: Dict[int, str],
    latest: Iterable[LatestEntry],
    summary: Optional[CitySummary],
    sort_key: Callable[[str], object] = locale.strxfrm,
) -> List[Reading]:
    readings = [
        Reading(name=mapping.get(entry.sensor_id, UNKNOWN_SENSOR), value=entry.value)
        for entry in latest
    ]

    pollution = summary.pollution if summary is not None else None
    if pollution is not None and pollution.aqius is not None:
        readings.append(Reading(name=AQI_READING_NAME, value=pollution.aqius))

    # sorted() is stable, so duplicate names keep their input order.
    return sorted(readings, key=lambda reading: sort_key(reading.name))
