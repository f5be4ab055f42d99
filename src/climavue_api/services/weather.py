"""Weather aggregation: one snapshot from current weather and a forecast series."""

import asyncio
from collections.abc import Callable

from loguru import logger

from ..core.config import settings
from ..core.exceptions import ValidationError
from ..models.weather import CurrentWeather, ForecastSeries, Units, WeatherData
from ..utils.formatters import location_timezone
from .forecast import build_daily, build_hourly
from .openweather import OpenWeatherClient


class WeatherAggregator:
    """Builds complete weather snapshots for a city or for coordinates.

    This service coordinates:
    - Resolving a city to current conditions and coordinates in one request
    - Fetching a single forecast series that feeds both hourly and daily views
    - Reducing the series to day summaries

    Typed errors from the client propagate unchanged; there are no retries.

    Example:
        >>> async def example():
        ...     aggregator = WeatherAggregator()
        ...     snapshot = await aggregator.get_by_city("Paris", Units.METRIC)
        ...     return len(snapshot.hourly)
    """

    def __init__(self, client_factory: Callable[[], OpenWeatherClient] = OpenWeatherClient):
        self._client_factory = client_factory

    async def get_by_city(self, city: str, units: Units) -> WeatherData:
        """Get a snapshot for a free-text city name.

        The forecast request starts only after the city has been resolved to
        coordinates, and always uses those coordinates.

        Raises:
            ValidationError: If the city is empty or blank
            ConfigurationError: If the API key is missing
            NotFoundError: If the city is unknown upstream
            UpstreamError: On any other upstream failure
        """
        if not city or not city.strip():
            raise ValidationError()

        async with self._client_factory() as client:
            client.ensure_configured()
            # One /weather request yields both current conditions and coordinates
            current, coordinates = await client.locate_city(city.strip(), units)
            series = await client.get_forecast_series(coordinates.lat, coordinates.lon, units)

        logger.debug("Snapshot fetched by city", city=current.cityName, units=units.value)
        return self._assemble(current, series, units)

    async def get_by_coordinates(self, latitude: float, longitude: float, units: Units) -> WeatherData:
        """Get a snapshot for coordinates.

        Current weather and the forecast series are requested concurrently. Both
        requests are awaited; if either fails the whole operation fails with the
        first error in request order and partial results are discarded.
        """
        async with self._client_factory() as client:
            client.ensure_configured()
            results = await asyncio.gather(
                client.get_current_by_coordinates(latitude, longitude, units),
                client.get_forecast_series(latitude, longitude, units),
                return_exceptions=True,
            )

        # Both requests have settled; the first failure in request order wins
        # and any partial result is dropped
        for result in results:
            if isinstance(result, BaseException):
                raise result

        current, series = results
        logger.debug("Snapshot fetched by coordinates", units=units.value)
        return self._assemble(current, series, units)

    @staticmethod
    def _assemble(current: CurrentWeather, series: ForecastSeries, units: Units) -> WeatherData:
        tz = location_timezone(series.utc_offset_seconds, settings.DISPLAY_TIMEZONE)
        return WeatherData(
            current=current,
            hourly=build_hourly(series.samples),
            daily=build_daily(series.samples, tz),
            units=units,
            timezoneOffset=series.utc_offset_seconds,
        )
