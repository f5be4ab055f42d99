"""Stateful dashboard flow: start-up, search, current location and unit toggling."""

from datetime import datetime

from loguru import logger

from ..core.config import settings
from ..core.exceptions import GeolocationError, ValidationError
from ..models.weather import (
    Coordinates,
    DashboardResponse,
    DisplayHints,
    FetchResult,
    Units,
)
from ..utils.formatters import (
    capitalize_words,
    format_date,
    format_day_of_week,
    format_time,
    get_weather_background,
    get_weather_icon_url,
    is_night_time,
    location_timezone,
)
from .fallback import CacheFallbackPolicy
from .geolocation import ConfiguredGeolocator, Geolocator
from .preferences import PreferencesRepository


def build_dashboard_response(result: FetchResult, now: datetime | None = None) -> DashboardResponse:
    """Attach display hints (theme, unit suffixes, labels) to a fetch result."""
    snapshot = result.snapshot
    current = snapshot.current
    tz = location_timezone(snapshot.timezoneOffset, settings.DISPLAY_TIMEZONE)
    night = is_night_time(current.timestamp, current.sunrise, current.sunset)

    return DashboardResponse(
        snapshot=snapshot,
        stale=result.stale,
        errorMessage=result.errorMessage,
        display=DisplayHints(
            isNight=night,
            background=get_weather_background(current.condition, night),
            temperatureUnit=snapshot.units.temperature_unit,
            windSpeedUnit=snapshot.units.wind_speed_unit,
            iconUrl=get_weather_icon_url(current.icon, settings.OPENWEATHER_ICON_URL),
            observedAt=format_time(current.timestamp, tz),
            observedOn=format_date(current.timestamp, tz),
            description=capitalize_words(current.description),
            hourLabels=[format_time(hour.time, tz) for hour in snapshot.hourly],
            dayLabels=[format_day_of_week(day.date, tz, now) for day in snapshot.daily],
        ),
    )


class DashboardSession:
    """The dashboard of a single user.

    Remembers where the last snapshot came from (a city or coordinates) so a unit
    change re-fetches the same place through the same path. Units, last city and
    the geolocation preference are persisted through the preferences repository.

    Example:
        >>> async def example():
        ...     session = DashboardSession()
        ...     view = await session.search("Paris")
        ...     view = await session.toggle_units()
        ...     return view.snapshot.units
    """

    def __init__(
        self,
        policy: CacheFallbackPolicy | None = None,
        preferences: PreferencesRepository | None = None,
        geolocator: Geolocator | None = None,
    ):
        self._policy = policy or CacheFallbackPolicy()
        self._preferences = preferences or PreferencesRepository()
        self._geolocator = geolocator or ConfiguredGeolocator()
        self._source: str | Coordinates | None = None

    @property
    def source(self) -> str | Coordinates | None:
        """City or coordinates of the last fresh fetch, None before the first one."""
        return self._source

    async def initialize(self) -> DashboardResponse:
        """Load the first snapshot.

        With the geolocation preference set, the current location is used. Otherwise
        geolocation is tried once and the last city is used when it fails.
        """
        prefs = await self._preferences.load()
        if prefs.useGeolocation:
            return await self.use_location()

        try:
            coordinates = await self._geolocator.locate()
        except GeolocationError as e:
            # No position: fall back to the last searched city
            logger.info("Geolocation unavailable, using last city", reason=e.reason.value)
            return await self.search(prefs.lastCity)

        return await self._fetch_location(coordinates, prefs.units)

    async def search(self, city: str) -> DashboardResponse:
        """Fetch a snapshot for a city and remember it as the last city.

        Raises:
            ValidationError: If the city is empty or blank
            WeatherError: If the fetch fails and nothing is cached
        """
        if not city or not city.strip():
            raise ValidationError()
        city = city.strip()

        prefs = await self._preferences.load()
        result = await self._policy.get_by_city(city, prefs.units)

        # A stale result belongs to an earlier place; keep the last resolved one
        if not result.stale:
            self._source = city
            await self._remember(lastCity=city, useGeolocation=False)
            await self._remember_search(city)
        return build_dashboard_response(result)

    async def use_location(self, geolocator: Geolocator | None = None) -> DashboardResponse:
        """Fetch a snapshot for the current position.

        Raises:
            GeolocationError: If the position cannot be determined
        """
        coordinates = await (geolocator or self._geolocator).locate()
        prefs = await self._preferences.load()
        return await self._fetch_location(coordinates, prefs.units)

    async def toggle_units(self) -> DashboardResponse:
        """Switch between metric and imperial and re-fetch the current place.

        Values are never converted locally: the snapshot is fetched again, for the
        previously resolved city or coordinates.
        """
        prefs = await self._preferences.load()
        units = prefs.units.toggled()
        await self._remember(units=units)
        logger.info("Units toggled", units=units.value)

        # Same path as the last fresh snapshot: coordinates stay coordinates
        if isinstance(self._source, Coordinates):
            result = await self._policy.get_by_coordinates(self._source.lat, self._source.lon, units)
            return build_dashboard_response(result)
        if isinstance(self._source, str):
            result = await self._policy.get_by_city(self._source, units)
            return build_dashboard_response(result)
        # Nothing fetched yet
        return await self.initialize()

    async def _fetch_location(self, coordinates: Coordinates, units: Units) -> DashboardResponse:
        result = await self._policy.get_by_coordinates(coordinates.lat, coordinates.lon, units)
        if not result.stale:
            self._source = coordinates
            await self._remember(useGeolocation=True)
        return build_dashboard_response(result)

    async def _remember(self, **changes) -> None:
        try:
            await self._preferences.update(**changes)
        except Exception as e:
            logger.warning("Could not persist preferences", error=str(e))

    async def _remember_search(self, city: str) -> None:
        try:
            await self._preferences.add_recent_search(city)
        except Exception as e:
            logger.warning("Could not persist recent search", error=str(e))


# Global dashboard instance; one remembered source per process, shared by all clients
dashboard_session = DashboardSession()
