"""Weather data models for upstream payloads and dashboard responses."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Units(str, Enum):
    """Unit system threaded through every fetch of a snapshot.

    Example:
        >>> Units("imperial").temperature_unit
        '°F'
        >>> Units.METRIC.toggled()
        <Units.IMPERIAL: 'imperial'>
    """

    METRIC = "metric"
    IMPERIAL = "imperial"

    @property
    def temperature_unit(self) -> str:
        return "°C" if self is Units.METRIC else "°F"

    @property
    def wind_speed_unit(self) -> str:
        return "m/s" if self is Units.METRIC else "mph"

    def toggled(self) -> "Units":
        return Units.IMPERIAL if self is Units.METRIC else Units.METRIC


class Coordinates(BaseModel):
    """Geographic position; ranges are not validated here.

    Example:
        >>> Coordinates(lat=48.85, lon=2.35).lat
        48.85
    """

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., description="Latitude in decimal degrees")
    lon: float = Field(..., description="Longitude in decimal degrees")


class CurrentWeather(BaseModel):
    """Current conditions for one place.

    Example:
        >>> weather = CurrentWeather(
        ...     temperature=18, feelsLike=17, condition="Clouds",
        ...     description="broken clouds", icon="04d", humidity=72,
        ...     windSpeed=4, pressure=1012, cityName="Paris", country="FR",
        ...     timestamp=1700000000, sunrise=1699985000, sunset=1700020000,
        ... )
        >>> weather.cityName
        'Paris'
    """

    model_config = ConfigDict(frozen=True)

    temperature: int = Field(..., description="Temperature rounded to whole units")
    feelsLike: int = Field(..., description="Feels-like temperature rounded to whole units")
    condition: str = Field(..., description="Short condition code, e.g. 'Rain'")
    description: str = Field(..., description="Human readable condition")
    icon: str = Field(..., description="Provider icon code")
    humidity: int | float = Field(..., description="Relative humidity in percent")
    windSpeed: int = Field(..., description="Wind speed rounded to whole units")
    pressure: int | float = Field(..., description="Atmospheric pressure in hPa")
    cityName: str = Field(..., description="Place name reported by the provider")
    country: str = Field(default="", description="ISO country code")
    timestamp: int = Field(..., description="Observation time (epoch seconds)")
    sunrise: int = Field(..., description="Sunrise (epoch seconds)")
    sunset: int = Field(..., description="Sunset (epoch seconds)")


class HourlyForecast(BaseModel):
    """One 3-hour forecast sample."""

    model_config = ConfigDict(frozen=True)

    time: int = Field(..., description="Sample time (epoch seconds)")
    temperature: int
    precipitation: int = Field(..., description="Precipitation probability in percent", ge=0, le=100)
    icon: str
    description: str


class DailyForecast(BaseModel):
    """Summary of all forecast samples that fall on one calendar day."""

    model_config = ConfigDict(frozen=True)

    date: int = Field(..., description="Time of the first sample of the day (epoch seconds)")
    tempMax: int
    tempMin: int
    condition: str = Field(..., description="Most frequent condition code of the day")
    icon: str = Field(..., description="Icon of the midday sample")
    precipitation: int = Field(..., description="Mean precipitation probability in percent", ge=0, le=100)
    humidity: int = Field(..., description="Mean relative humidity in percent")
    description: str = Field(..., description="Description of the midday sample")


class WeatherData(BaseModel):
    """Complete current + hourly + daily snapshot for a single place."""

    model_config = ConfigDict(frozen=True)

    current: CurrentWeather
    hourly: list[HourlyForecast] = Field(..., description="Next 8 samples, chronological")
    daily: list[DailyForecast] = Field(..., description="Up to 7 days, chronological")
    units: Units = Field(default=Units.METRIC, description="Unit system of every value")
    timezoneOffset: int = Field(default=0, description="UTC offset of the place in seconds")


class FetchResult(BaseModel):
    """Snapshot plus whether it was served from the offline cache."""

    model_config = ConfigDict(frozen=True)

    snapshot: WeatherData
    stale: bool = False
    errorMessage: str | None = None


class ForecastSample(BaseModel):
    """Normalized 3-hour sample from the forecast endpoint, before reduction."""

    model_config = ConfigDict(frozen=True)

    dt: int
    temp: float
    humidity: float
    pop: float = Field(default=0.0, ge=0.0, le=1.0)
    condition: str
    icon: str
    description: str


class ForecastSeries(BaseModel):
    """Ordered forecast samples and the UTC offset of the forecast location."""

    model_config = ConfigDict(frozen=True)

    samples: list[ForecastSample]
    utc_offset_seconds: int = 0


class DisplayHints(BaseModel):
    """Presentation hints derived from a snapshot for the rendering layer."""

    isNight: bool
    background: str
    temperatureUnit: str
    windSpeedUnit: str
    iconUrl: str
    observedAt: str
    observedOn: str
    description: str
    hourLabels: list[str]
    dayLabels: list[str]


class DashboardResponse(BaseModel):
    """Response of every snapshot endpoint."""

    snapshot: WeatherData
    stale: bool = False
    errorMessage: str | None = None
    display: DisplayHints


class OpenWeatherCondition(BaseModel):
    """Entry of the provider's `weather` array."""

    main: str
    description: str
    icon: str


class OpenWeatherMain(BaseModel):
    temp: float
    feels_like: float
    humidity: int | float
    pressure: int | float


class OpenWeatherWind(BaseModel):
    speed: float = 0.0


class OpenWeatherSys(BaseModel):
    country: str | None = None
    sunrise: int
    sunset: int


class OpenWeatherCurrentResponse(BaseModel):
    """Response of the `/weather` endpoint.

    Example:
        >>> response = OpenWeatherCurrentResponse(
        ...     coord={"lat": 48.85, "lon": 2.35},
        ...     weather=[{"main": "Clear", "description": "clear sky", "icon": "01d"}],
        ...     main={"temp": 21.4, "feels_like": 20.9, "humidity": 40, "pressure": 1015},
        ...     wind={"speed": 3.6},
        ...     sys={"country": "FR", "sunrise": 1, "sunset": 2},
        ...     dt=1, name="Paris",
        ... )
        >>> response.coord.lat
        48.85
    """

    coord: Coordinates
    weather: list[OpenWeatherCondition] = Field(..., min_length=1)
    main: OpenWeatherMain
    wind: OpenWeatherWind = Field(default_factory=OpenWeatherWind)
    sys: OpenWeatherSys
    dt: int
    name: str = ""


class OpenWeatherForecastMain(BaseModel):
    temp: float
    humidity: int | float


class OpenWeatherForecastItem(BaseModel):
    """Entry of the `/forecast` endpoint's `list` array."""

    dt: int
    main: OpenWeatherForecastMain
    weather: list[OpenWeatherCondition] = Field(..., min_length=1)
    pop: float = Field(default=0.0, ge=0.0, le=1.0, description="Probability of precipitation")


class OpenWeatherForecastCity(BaseModel):
    name: str = ""
    country: str | None = None
    timezone: int = Field(default=0, description="UTC offset in seconds")


class OpenWeatherForecastResponse(BaseModel):
    """Response of the `/forecast` endpoint (5 days, 3-hour stride)."""

    items: list[OpenWeatherForecastItem] = Field(..., alias="list")
    city: OpenWeatherForecastCity = Field(default_factory=OpenWeatherForecastCity)
