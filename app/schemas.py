"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class ReadingModel(BaseModel):
    """One pollutant measurement or the city AQI."""

    name: str = Field(..., description="Pollutant parameter name, 'aqius' or 'Unknown'.")
    value: float


class ErrorResponse(BaseModel):
    error: str


class CitiesResponse(BaseModel):
    cities: List[str]


class HealthResponse(BaseModel):
    """Service status plus the age in seconds of each cached city payload."""

    status: str = "ok"
    cache: Dict[str, float] = Field(default_factory=dict)
