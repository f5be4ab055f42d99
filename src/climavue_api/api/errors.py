"""Mapping of typed weather errors onto HTTP responses."""

from fastapi import HTTPException

from ..core.exceptions import (
    ConfigurationError,
    GeolocationError,
    NotFoundError,
    UpstreamError,
    UpstreamTimeoutError,
    ValidationError,
    WeatherError,
)

# Most specific first
_STATUS_CODES: list[tuple[type[WeatherError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (GeolocationError, 422),
    (ConfigurationError, 500),
    (UpstreamTimeoutError, 504),
    (UpstreamError, 502),
]


def http_error(error: WeatherError) -> HTTPException:
    """Build the HTTPException for a weather error, keeping its user message.

    Example:
        >>> http_error(NotFoundError()).status_code
        404
    """
    status_code = next(
        (code for kind, code in _STATUS_CODES if isinstance(error, kind)),
        500,
    )
    return HTTPException(status_code=status_code, detail={"error": error.message})
