from __future__ import annotations

import locale
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import router
from logging_config import configure_logging
from services.errors import RelayError
from services.relay import build_default_relay
from settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    relay = build_default_relay()
    settings = get_settings()
    logger.info(
        "Relay started (OpenAQ key configured: %s, IQAir key configured: %s)",
        "yes" if settings.openaq_api_key else "no",
        "yes" if settings.iqair_api_key else "no",
    )
    try:
        yield
    finally:
        await relay.aclose()
        build_default_relay.cache_clear()


async def relay_error_handler(_request: Request, exc: RelayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def _use_host_collation() -> None:
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.warning("Host locale unavailable; sorting readings with C collation.")


def create_app() -> FastAPI:
    configure_logging()
    _use_host_collation()
    settings = get_settings()
    app = FastAPI(
        title="Airphonic Relay",
        description="Merged OpenAQ and IQAir readings for the Airphonic front end.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RelayError, relay_error_handler)
    app.include_router(router)
    return app

app = create_app()
