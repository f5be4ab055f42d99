"""Typed errors raised by the weather client, aggregator and dashboard."""

from enum import Enum


class WeatherError(Exception):
    """Base exception for every user-facing weather failure.

    The message is meant to be shown to the user as-is.
    """

    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(WeatherError):
    """Raised when the OpenWeatherMap API key is not configured."""

    default_message = (
        "API key is missing. Please set OPENWEATHER_API_KEY in your environment or .env file."
    )


class ValidationError(WeatherError):
    """Raised when user input is empty or otherwise unusable."""

    default_message = "Please enter a city name"


class NotFoundError(WeatherError):
    """Raised when the upstream API has no match for a city."""

    default_message = "City not found. Please check the spelling and try again."


class UpstreamError(WeatherError):
    """Raised when the upstream API fails or answers with a non-success status."""

    default_message = "Failed to fetch weather data. Please try again later."


class UpstreamTimeoutError(UpstreamError):
    """Raised when the upstream API does not respond in time."""

    default_message = "Weather service did not respond in time. Please try again later."


class GeolocationFailure(str, Enum):
    """Reasons a one-shot location request can fail."""

    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"


_GEOLOCATION_MESSAGES = {
    GeolocationFailure.PERMISSION_DENIED: "Location permission denied. Please enable location access.",
    GeolocationFailure.POSITION_UNAVAILABLE: "Location information unavailable.",
    GeolocationFailure.TIMEOUT: "Location request timed out.",
    GeolocationFailure.UNSUPPORTED: "Geolocation is not supported.",
}


class GeolocationError(WeatherError):
    """Raised when the current position cannot be determined.

    Example:
        >>> GeolocationError(GeolocationFailure.TIMEOUT).message
        'Location request timed out.'
    """

    def __init__(self, reason: GeolocationFailure, message: str | None = None):
        self.reason = reason
        super().__init__(message or _GEOLOCATION_MESSAGES[reason])
