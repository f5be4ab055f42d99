"""OpenWeatherMap API client service."""

from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError as PayloadValidationError

from ..core.config import settings
from ..core.exceptions import (
    ConfigurationError,
    NotFoundError,
    UpstreamError,
    UpstreamTimeoutError,
)
from ..models.weather import (
    Coordinates,
    CurrentWeather,
    ForecastSample,
    ForecastSeries,
    OpenWeatherCurrentResponse,
    OpenWeatherForecastResponse,
    Units,
)
from ..utils.formatters import round_half_up


class OpenWeatherClient:
    """Client for the OpenWeatherMap current-weather and forecast endpoints.

    Uses httpx for async HTTP requests. Failures are classified into the typed
    weather errors and are never retried; resilience comes from the offline cache.

    Example:
        >>> async def example():
        ...     async with OpenWeatherClient() as client:
        ...         current = await client.get_current_by_city("Paris", Units.METRIC)
        ...         return current.temperature
    """

    def __init__(self):
        """Initialize the client with configuration from settings."""
        self._client: httpx.AsyncClient | None = None
        self._base_url = settings.OPENWEATHER_BASE_URL
        self._timeout = settings.UPSTREAM_TIMEOUT
        self._api_key = settings.OPENWEATHER_API_KEY

    async def __aenter__(self):
        """Async context manager entry."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()

    def ensure_configured(self) -> None:
        """Fail before any request when no API key is configured.

        Raises:
            ConfigurationError: If OPENWEATHER_API_KEY is not set
        """
        if not self._api_key:
            logger.error("OpenWeatherMap API key is not configured")
            raise ConfigurationError()

    async def get_current_by_city(self, city: str, units: Units) -> CurrentWeather:
        """Fetch current weather for a free-text city name.

        Raises:
            ConfigurationError: If the API key is missing (no request is sent)
            NotFoundError: If the provider has no match for the city
            UpstreamError: On any other failure
        """
        current, _ = await self.locate_city(city, units)
        return current

    async def locate_city(self, city: str, units: Units) -> tuple[CurrentWeather, Coordinates]:
        """Fetch current weather and the resolved coordinates of a city in one request."""
        payload = await self._get_json(
            "/weather",
            {"q": city, "units": units.value},
            city_lookup=True,
        )
        data = self._parse(OpenWeatherCurrentResponse, payload)
        return self._normalize_current(data), data.coord

    async def get_current_by_coordinates(
        self,
        latitude: float,
        longitude: float,
        units: Units,
    ) -> CurrentWeather:
        """Fetch current weather for coordinates (passed through unvalidated)."""
        payload = await self._get_json(
            "/weather",
            {"lat": latitude, "lon": longitude, "units": units.value},
        )
        return self._normalize_current(self._parse(OpenWeatherCurrentResponse, payload))

    async def resolve_coordinates(self, city: str) -> Coordinates:
        """Resolve a free-text city to coordinates.

        Raises:
            NotFoundError: If the provider has no match for the city
        """
        payload = await self._get_json(
            "/weather",
            {"q": city},
            city_lookup=True,
        )
        return self._parse(OpenWeatherCurrentResponse, payload).coord

    async def get_forecast_series(
        self,
        latitude: float,
        longitude: float,
        units: Units,
    ) -> ForecastSeries:
        """Fetch the 3-hour stride forecast series for coordinates.

        The same series feeds both the hourly and the daily views.
        """
        payload = await self._get_json(
            "/forecast",
            {"lat": latitude, "lon": longitude, "units": units.value},
        )
        data = self._parse(OpenWeatherForecastResponse, payload)
        return ForecastSeries(
            samples=[
                ForecastSample(
                    dt=item.dt,
                    temp=item.main.temp,
                    humidity=item.main.humidity,
                    pop=item.pop,
                    condition=item.weather[0].main,
                    icon=item.weather[0].icon,
                    description=item.weather[0].description,
                )
                for item in data.items
            ],
            utc_offset_seconds=data.city.timezone,
        )

    async def _get_json(
        self,
        path: str,
        params: dict[str, Any],
        city_lookup: bool = False,
    ) -> Any:
        """Send a GET request and classify failures.

        A 404 becomes NotFoundError only for city lookups;
        coordinates cannot be "not found".
        """
        self.ensure_configured()
        if not self._client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        query = {**params, "appid": self._api_key}
        url = f"{self._base_url}{path}"

        try:
            logger.debug("Fetching from OpenWeatherMap", path=path)
            response = await self._client.get(url, params=query)

        except httpx.TimeoutException as e:
            logger.warning("OpenWeatherMap request timed out", path=path)
            raise UpstreamTimeoutError() from e

        except httpx.HTTPError as e:
            logger.error("HTTP error occurred", path=path, error=type(e).__name__)
            raise UpstreamError() from e

        if response.status_code == 404 and city_lookup:
            logger.info("OpenWeatherMap has no match", path=path)
            raise NotFoundError()

        if response.status_code >= 400:
            logger.warning(
                "OpenWeatherMap returned an error",
                path=path,
                status_code=response.status_code,
            )
            raise UpstreamError()

        try:
            return response.json()
        except ValueError as e:
            logger.warning("OpenWeatherMap returned invalid JSON", path=path)
            raise UpstreamError() from e

    @staticmethod
    def _parse(model, payload: Any):
        try:
            return model.model_validate(payload)
        except PayloadValidationError as e:
            logger.warning(
                "Unexpected OpenWeatherMap payload",
                model=model.__name__,
                errors=e.error_count(),
            )
            raise UpstreamError() from e

    @staticmethod
    def _normalize_current(data: OpenWeatherCurrentResponse) -> CurrentWeather:
        """Map the provider payload onto the current-weather view model.

        Temperatures and wind speed are rounded half-up to whole units;
        humidity and pressure pass through.

        Example:
            >>> data = OpenWeatherCurrentResponse(
            ...     coord={"lat": 48.85, "lon": 2.35},
            ...     weather=[{"main": "Clear", "description": "clear sky", "icon": "01d"}],
            ...     main={"temp": 21.5, "feels_like": 20.4, "humidity": 40, "pressure": 1015},
            ...     wind={"speed": 3.6},
            ...     sys={"country": "FR", "sunrise": 1, "sunset": 2},
            ...     dt=1, name="Paris",
            ... )
            >>> OpenWeatherClient._normalize_current(data).temperature
            22
        """
        condition = data.weather[0]
        return CurrentWeather(
            temperature=round_half_up(data.main.temp),
            feelsLike=round_half_up(data.main.feels_like),
            condition=condition.main,
            description=condition.description,
            icon=condition.icon,
            humidity=data.main.humidity,
            windSpeed=round_half_up(data.wind.speed),
            pressure=data.main.pressure,
            cityName=data.name,
            country=data.sys.country or "",
            timestamp=data.dt,
            sunrise=data.sys.sunrise,
            sunset=data.sys.sunset,
        )
