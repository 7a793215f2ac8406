"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.schemas import CitiesResponse, ErrorResponse, HealthResponse, ReadingModel
from services.relay import AirQualityRelay, build_default_relay

router = APIRouter()


def get_relay() -> AirQualityRelay:
    return build_default_relay()


@router.get(
    "/api/get-latest",
    summary="Latest merged air-quality readings for a city.",
    responses={
        status.HTTP_200_OK: {"model": List[ReadingModel]},
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def get_latest(
    city: Optional[str] = Query(None, description="City key, defaults to HongKong."),
    relay: AirQualityRelay = Depends(get_relay),
) -> list[dict[str, Any]]:
    readings = await relay.get_latest(city)
    return [reading.as_dict() for reading in readings]


@router.get(
    "/api/cities",
    response_model=CitiesResponse,
    summary="Supported city keys.",
)
async def list_cities(relay: AirQualityRelay = Depends(get_relay)) -> CitiesResponse:
    return CitiesResponse(cities=relay.supported_cities())


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck(relay: AirQualityRelay = Depends(get_relay)) -> HealthResponse:
    return HealthResponse(cache=relay.cache.summary())


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
