"""Exception types raised by the relay and its upstream clients."""

from __future__ import annotations

from typing import Optional


class RelayError(Exception):
    """Base error surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidCityError(RelayError):
    status_code = 400


class ConfigurationError(RelayError):
    status_code = 500


class UpstreamFailureError(RelayError):
    """Upstream data could not be fetched and nothing is cached."""

    status_code = 500


class UpstreamError(Exception):
    """Base error for problems talking to an upstream provider."""

    transient = False

    def __init__(self, upstream: str, message: str) -> None:
        super().__init__(message)
        self.upstream = upstream
        self.message = message


class UpstreamStatusError(UpstreamError):
    transient = True

    def __init__(self, upstream: str, status_code: int, message: Optional[str] = None) -> None:
        super().__init__(upstream, message or f"API responded with status: {status_code}")
        self.status_code = status_code


class RateLimitedError(UpstreamStatusError):
    def __init__(self, upstream: str) -> None:
        super().__init__(upstream, 429, "Rate limit exceeded")


class UpstreamConnectionError(UpstreamError):
    transient = True


class UpstreamShapeError(UpstreamError):
    """A successful response was missing the fields the relay needs."""
