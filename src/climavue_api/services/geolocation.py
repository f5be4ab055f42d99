"""One-shot geolocation capabilities."""

from typing import Protocol

from ..core.config import settings
from ..core.exceptions import GeolocationError, GeolocationFailure
from ..models.weather import Coordinates


class Geolocator(Protocol):
    """Yields the current position or fails with a GeolocationError."""

    async def locate(self) -> Coordinates: ...


class ConfiguredGeolocator:
    """Reports the home position from settings.

    Example:
        >>> import asyncio
        >>> asyncio.run(ConfiguredGeolocator(latitude=51.5, longitude=-0.12).locate())
        Coordinates(lat=51.5, lon=-0.12)
    """

    def __init__(self, latitude: float | None = None, longitude: float | None = None):
        self._latitude = settings.HOME_LATITUDE if latitude is None else latitude
        self._longitude = settings.HOME_LONGITUDE if longitude is None else longitude

    async def locate(self) -> Coordinates:
        if self._latitude is None or self._longitude is None:
            raise GeolocationError(GeolocationFailure.UNSUPPORTED)
        return Coordinates(lat=self._latitude, lon=self._longitude)


class StaticGeolocator:
    """Position already known to the caller, e.g. sent by a browser."""

    def __init__(self, coordinates: Coordinates):
        self._coordinates = coordinates

    async def locate(self) -> Coordinates:
        return self._coordinates
