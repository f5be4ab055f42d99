"""API routes for the stateful dashboard and its preferences.

The dashboard is single-user: one session per process remembers the last city or
position, so every client of these routes shares it (see main.py, one worker).
"""

from fastapi import APIRouter

from ..core.exceptions import WeatherError
from ..models.preferences import (
    CitySearchRequest,
    LocationRequest,
    Preferences,
    PreferencesUpdate,
)
from ..models.weather import Coordinates, DashboardResponse
from ..services.dashboard import dashboard_session
from ..services.geolocation import StaticGeolocator
from ..services.preferences import PreferencesRepository
from .errors import http_error

router = APIRouter()

preferences_repository = PreferencesRepository()


@router.get(
    "/v1/dashboard",
    response_model=DashboardResponse,
    summary="Load the dashboard",
    description="Current location when preferred or available, otherwise the last searched city. "
    "The dashboard session is shared by all clients of this process.",
)
async def load_dashboard() -> DashboardResponse:
    try:
        return await dashboard_session.initialize()
    except WeatherError as e:
        raise http_error(e) from e


@router.post(
    "/v1/dashboard/search",
    response_model=DashboardResponse,
    summary="Search a city",
)
async def search_city(request: CitySearchRequest) -> DashboardResponse:
    """Fetch a city and remember it in the last city and recent searches."""
    try:
        return await dashboard_session.search(request.city)
    except WeatherError as e:
        raise http_error(e) from e


@router.post(
    "/v1/dashboard/location",
    response_model=DashboardResponse,
    summary="Use the current location",
)
async def use_location(request: LocationRequest | None = None) -> DashboardResponse:
    """Fetch the current position.

    The position sent by the client is used when both coordinates are present,
    the server's configured geolocator otherwise.
    """
    request = request or LocationRequest()
    geolocator = None
    if request.lat is not None and request.lon is not None:
        geolocator = StaticGeolocator(Coordinates(lat=request.lat, lon=request.lon))
    try:
        return await dashboard_session.use_location(geolocator)
    except WeatherError as e:
        raise http_error(e) from e


@router.post(
    "/v1/dashboard/units/toggle",
    response_model=DashboardResponse,
    summary="Switch between metric and imperial units",
    description="Re-fetches the last city or position fetched by the shared dashboard session",
)
async def toggle_units() -> DashboardResponse:
    """Flip the unit preference and re-fetch the current place."""
    try:
        return await dashboard_session.toggle_units()
    except WeatherError as e:
        raise http_error(e) from e


@router.get("/v1/preferences", response_model=Preferences, summary="Get preferences")
async def get_preferences() -> Preferences:
    return await preferences_repository.load()


@router.put("/v1/preferences", response_model=Preferences, summary="Update preferences")
async def update_preferences(update: PreferencesUpdate) -> Preferences:
    """Apply a partial update; fields left out keep their stored value."""
    return await preferences_repository.update(**update.model_dump(exclude_none=True))


@router.get("/v1/recent-searches", response_model=list[str], summary="Recently searched cities")
async def get_recent_searches() -> list[str]:
    return await preferences_repository.recent_searches()
