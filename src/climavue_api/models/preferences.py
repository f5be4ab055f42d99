"""Models for persisted dashboard preferences and request bodies."""

from pydantic import BaseModel, Field

from .weather import Units


class Preferences(BaseModel):
    """User preferences persisted in the key-value store.

    Example:
        >>> prefs = Preferences()
        >>> prefs.units
        <Units.METRIC: 'metric'>
        >>> prefs.useGeolocation
        False
    """

    darkMode: bool = Field(default=False, description="Dark theme enabled")
    units: Units = Field(default=Units.METRIC, description="Preferred unit system")
    lastCity: str = Field(default="London", description="Last successfully searched city")
    useGeolocation: bool = Field(
        default=False,
        description="Start from the current location instead of the last city",
    )


class PreferencesUpdate(BaseModel):
    """Partial update of preferences; unset fields are left untouched."""

    darkMode: bool | None = None
    units: Units | None = None
    lastCity: str | None = Field(default=None, min_length=1)
    useGeolocation: bool | None = None


class CitySearchRequest(BaseModel):
    city: str = Field(..., description="Free-text city name", examples=["Paris"])


class LocationRequest(BaseModel):
    """Client-supplied position; the configured geolocator is used when omitted."""

    lat: float | None = Field(default=None, ge=-90.0, le=90.0)
    lon: float | None = Field(default=None, ge=-180.0, le=180.0)
