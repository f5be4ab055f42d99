"""API routes for weather snapshot endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query
from loguru import logger

from ..core.config import settings
from ..core.exceptions import ValidationError, WeatherError
from ..models.weather import Coordinates, DashboardResponse, Units
from ..services.dashboard import build_dashboard_response
from ..services.fallback import CacheFallbackPolicy
from ..services.openweather import OpenWeatherClient
from .errors import http_error

router = APIRouter()

weather_policy = CacheFallbackPolicy()

_ERROR_RESPONSES = {
    400: {
        "description": "Invalid city or coordinates",
        "content": {"application/json": {"example": {"detail": {"error": "Please enter a city name"}}}},
    },
    404: {
        "description": "City not found",
        "content": {
            "application/json": {
                "example": {"detail": {"error": "City not found. Please check the spelling and try again."}}
            }
        },
    },
    502: {
        "description": "Upstream API error and no cached snapshot",
        "content": {
            "application/json": {
                "example": {"detail": {"error": "Failed to fetch weather data. Please try again later."}}
            }
        },
    },
}


def _resolve_units(units: Units | None) -> Units:
    return units or Units(settings.DEFAULT_UNITS)


def _normalize_coordinate_params(
    lat: float | None,
    latitude: float | None,
    lon: float | None,
    longitude: float | None,
) -> tuple[float, float]:
    """Normalize and validate coordinate query parameters.

    Handles both `lat`/`lon` and `latitude`/`longitude` parameter names.
    Precedence: if both names are provided, use the shorter version (`lat`, `lon`).
    Returns 400 if both names are provided with conflicting values.

    Example:
        >>> _normalize_coordinate_params(52.52, None, 13.41, None)
        (52.52, 13.41)
        >>> _normalize_coordinate_params(None, 52.52, None, 13.41)
        (52.52, 13.41)
    """
    final_lat = _pick_coordinate("latitude", "lat", lat, latitude)
    final_lon = _pick_coordinate("longitude", "lon", lon, longitude)
    return final_lat, final_lon


def _pick_coordinate(name: str, short: str, short_value: float | None, long_value: float | None) -> float:
    if short_value is not None and long_value is not None:
        if short_value != long_value:
            raise HTTPException(
                status_code=400,
                detail={"error": f"Conflicting {name} values provided ({short} and {name})"},
            )
        return short_value
    if short_value is not None:
        return short_value
    if long_value is not None:
        return long_value
    raise HTTPException(
        status_code=400,
        detail={"error": f"{name.capitalize()} parameter required ({short} or {name})"},
    )


@router.get(
    "/v1/weather",
    response_model=DashboardResponse,
    summary="Get a weather snapshot for a city",
    description="Current conditions, next 24 hours and up to 7 days for a city, "
    "served from the offline cache when OpenWeatherMap is unavailable",
    responses=_ERROR_RESPONSES,
)
async def get_weather_by_city(
    city: Annotated[str, Query(description="Free-text city name", examples=["Paris"])] = "",
    units: Annotated[Units | None, Query(description="Unit system")] = None,
) -> DashboardResponse:
    """Get a snapshot for a city name.

    Returns stale=true with an error message when the live fetch failed and the
    last successful snapshot is served instead.

    Example:
        >>> # GET /v1/weather?city=Paris&units=metric
    """
    logger.info("Weather request received", lookup="city")
    try:
        result = await weather_policy.get_by_city(city, _resolve_units(units))
    except WeatherError as e:
        raise http_error(e) from e
    return build_dashboard_response(result)


@router.get(
    "/v1/weather/coordinates",
    response_model=DashboardResponse,
    summary="Get a weather snapshot for coordinates",
    responses=_ERROR_RESPONSES,
)
async def get_weather_by_coordinates(
    lat: Annotated[
        float | None,
        Query(description="Latitude in decimal degrees (-90 to 90)", ge=-90.0, le=90.0, examples=[48.85]),
    ] = None,
    latitude: Annotated[
        float | None,
        Query(description="Alternative to 'lat'", ge=-90.0, le=90.0),
    ] = None,
    lon: Annotated[
        float | None,
        Query(description="Longitude in decimal degrees (-180 to 180)", ge=-180.0, le=180.0, examples=[2.35]),
    ] = None,
    longitude: Annotated[
        float | None,
        Query(description="Alternative to 'lon'", ge=-180.0, le=180.0),
    ] = None,
    units: Annotated[Units | None, Query(description="Unit system")] = None,
) -> DashboardResponse:
    """Get a snapshot for coordinates.

    Query parameters support both short (`lat`, `lon`) and long (`latitude`, `longitude`) forms.

    Example:
        >>> # GET /v1/weather/coordinates?lat=48.85&lon=2.35&units=imperial
    """
    final_lat, final_lon = _normalize_coordinate_params(lat, latitude, lon, longitude)

    # Coordinates are not logged outside debug level
    logger.info("Weather request received", lookup="coordinates")
    try:
        result = await weather_policy.get_by_coordinates(final_lat, final_lon, _resolve_units(units))
    except WeatherError as e:
        raise http_error(e) from e
    return build_dashboard_response(result)


@router.get(
    "/v1/geocode",
    response_model=Coordinates,
    summary="Resolve a city name to coordinates",
    responses=_ERROR_RESPONSES,
)
async def geocode_city(
    city: Annotated[str, Query(description="Free-text city name", examples=["Paris"])] = "",
) -> Coordinates:
    """Resolve a city to coordinates without fetching weather."""
    if not city.strip():
        raise http_error(ValidationError())
    try:
        async with OpenWeatherClient() as client:
            return await client.resolve_coordinates(city.strip())
    except WeatherError as e:
        raise http_error(e) from e
