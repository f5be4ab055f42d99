"""Application configuration using Pydantic Settings."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults but can be overridden via environment variables.
    The OpenWeatherMap API key is optional at startup: a missing key is reported as a
    configuration error when a fetch is attempted, before any network call.

    Example:
        >>> settings = Settings()
        >>> settings.UPSTREAM_TIMEOUT >= 0.1
        True
        >>> settings.DEFAULT_UNITS
        'metric'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Upstream API Configuration
    OPENWEATHER_API_KEY: str | None = Field(
        default=None,
        description="OpenWeatherMap API key (appid); fetches fail fast without it",
    )
    OPENWEATHER_BASE_URL: str = Field(
        default="https://api.openweathermap.org/data/2.5",
        description="Base URL for the OpenWeatherMap 2.5 API",
    )
    OPENWEATHER_ICON_URL: str = Field(
        default="https://openweathermap.org/img/wn",
        description="Base URL for weather condition icons",
    )
    UPSTREAM_TIMEOUT: float = Field(
        default=5.0,
        description="Timeout for OpenWeatherMap requests in seconds",
        ge=0.1,
        le=30.0,
    )

    # Dashboard Defaults
    DEFAULT_CITY: str = Field(
        default="London",
        description="City shown when no previous city or location is known",
    )
    DEFAULT_UNITS: str = Field(
        default="metric",
        description="Unit system used until the user picks one (metric, imperial)",
    )
    DISPLAY_TIMEZONE: str | None = Field(
        default=None,
        description="IANA timezone for day grouping and labels; location offset if unset",
    )

    # Geolocation
    HOME_LATITUDE: float | None = Field(
        default=None,
        description="Latitude reported by the configured geolocator",
        ge=-90.0,
        le=90.0,
    )
    HOME_LONGITUDE: float | None = Field(
        default=None,
        description="Longitude reported by the configured geolocator",
        ge=-180.0,
        le=180.0,
    )

    # Key-Value Store
    STORAGE_PREFIX: str = Field(
        default="climavue-",
        description="Prefix applied to every persisted key",
    )
    STORE_TTL: int = Field(
        default=30 * 24 * 3600,
        description="Lifetime of persisted values in seconds",
        ge=60,
    )

    # Server Configuration
    PORT: int = Field(
        default=8000,
        description="Server port",
        ge=1,
        le=65535,
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Environment Configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment (development, staging, production)",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that LOG_LEVEL is a valid logging level.

        Example:
            >>> Settings(LOG_LEVEL="info").LOG_LEVEL
            'INFO'
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}, got {v}")
        return v_upper

    @field_validator("OPENWEATHER_BASE_URL", "OPENWEATHER_ICON_URL")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate that a URL is properly formatted and strip the trailing slash.

        Example:
            >>> Settings(OPENWEATHER_BASE_URL="https://api.example.com/").OPENWEATHER_BASE_URL
            'https://api.example.com'
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL settings must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("DEFAULT_UNITS")
    @classmethod
    def validate_default_units(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in {"metric", "imperial"}:
            raise ValueError(f"DEFAULT_UNITS must be metric or imperial, got {v}")
        return v_lower

    @field_validator("DISPLAY_TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: str | None) -> str | None:
        """Validate that DISPLAY_TIMEZONE names a known IANA timezone.

        Example:
            >>> Settings(DISPLAY_TIMEZONE="Europe/Paris").DISPLAY_TIMEZONE
            'Europe/Paris'
        """
        if v is None or not v.strip():
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"DISPLAY_TIMEZONE is not a known timezone: {v}") from e
        return v


# Global settings instance
settings = Settings()
