from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple


_OPENAQ_KEY_ENV = "OPENAQ_API_KEY"
_IQAIR_KEY_ENV = "IQAIR_API_KEY"
_OPENAQ_URL_ENV = "OPENAQ_BASE_URL"
_IQAIR_URL_ENV = "IQAIR_BASE_URL"
_HOST_ENV = "HOST"
_PORT_ENV = "PORT"
_LOG_LEVEL_ENV = "LOG_LEVEL"
_CACHE_TTL_ENV = "CACHE_TTL_SECONDS"
_REQUEST_TIMEOUT_ENV = "REQUEST_TIMEOUT_SECONDS"
_RETRY_ATTEMPTS_ENV = "RETRY_MAX_ATTEMPTS"
_RETRY_DELAY_ENV = "RETRY_INITIAL_DELAY_SECONDS"
_OPENAQ_INTERVAL_ENV = "OPENAQ_MIN_INTERVAL_SECONDS"
_IQAIR_INTERVAL_ENV = "IQAIR_MIN_INTERVAL_SECONDS"
_CORS_ORIGINS_ENV = "CORS_ORIGINS"


@dataclass(frozen=True)
class Settings:
    openaq_api_key: Optional[str]
    iqair_api_key: Optional[str]
    openaq_base_url: str
    iqair_base_url: str
    host: str
    port: int
    log_level: str
    cache_ttl_seconds: float
    request_timeout_seconds: float
    retry_max_attempts: int
    retry_initial_delay_seconds: float
    openaq_min_interval_seconds: float
    iqair_min_interval_seconds: float
    cors_origins: Tuple[str, ...]


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_non_negative_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _read_log_level(default: str) -> str:
    return _read_str_env(_LOG_LEVEL_ENV, default).upper()


def _read_origins(default: str) -> Tuple[str, ...]:
    raw = _read_str_env(_CORS_ORIGINS_ENV, default)
    origins = tuple(part.strip() for part in raw.split(",") if part.strip())
    return origins or (default,)


@lru_cache
def get_settings() -> Settings:
    return Settings(
        openaq_api_key=_read_optional_env(_OPENAQ_KEY_ENV),
        iqair_api_key=_read_optional_env(_IQAIR_KEY_ENV),
        openaq_base_url=_read_str_env(_OPENAQ_URL_ENV, "https://api.openaq.org/v3"),
        iqair_base_url=_read_str_env(_IQAIR_URL_ENV, "https://api.airvisual.com/v2"),
        host=_read_str_env(_HOST_ENV, "0.0.0.0"),
        port=_read_positive_int(_PORT_ENV, 5000),
        log_level=_read_log_level("INFO"),
        cache_ttl_seconds=_read_non_negative_float(_CACHE_TTL_ENV, 15 * 60.0),
        request_timeout_seconds=_read_non_negative_float(_REQUEST_TIMEOUT_ENV, 10.0),
        retry_max_attempts=_read_positive_int(_RETRY_ATTEMPTS_ENV, 3),
        retry_initial_delay_seconds=_read_non_negative_float(_RETRY_DELAY_ENV, 1.0),
        openaq_min_interval_seconds=_read_non_negative_float(_OPENAQ_INTERVAL_ENV, 2.0),
        iqair_min_interval_seconds=_read_non_negative_float(_IQAIR_INTERVAL_ENV, 5.0),
        cors_origins=_read_origins("*"),
    )
