"""Pytest configuration and fixtures."""

from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend

from climavue_api.app import app
from climavue_api.core.config import settings
from climavue_api.models.weather import CurrentWeather, Units, WeatherData

DAY_ONE = datetime(2026, 1, 20, tzinfo=timezone.utc)


@pytest.fixture(scope="function", autouse=True)
def configure_settings(monkeypatch):
    """Use a test API key and location-based day grouping for each test."""
    monkeypatch.setattr(settings, "OPENWEATHER_API_KEY", "test-key")
    monkeypatch.setattr(settings, "DISPLAY_TIMEZONE", None)
    monkeypatch.setattr(settings, "HOME_LATITUDE", None)
    monkeypatch.setattr(settings, "HOME_LONGITUDE", None)


@pytest.fixture(scope="function", autouse=True)
def setup_cache():
    """Initialize an empty key-value store backend for each test."""
    # InMemoryBackend keeps a single store shared by all of its instances
    InMemoryBackend._store.clear()
    FastAPICache.init(InMemoryBackend(), prefix="test-cache:")
    yield
    FastAPICache.reset()
    InMemoryBackend._store.clear()


@pytest.fixture(scope="function")
def client():
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


class MemoryStore:
    """Dict-backed key-value store shared by every scope of one factory."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.fail_reads = False
        self.fail_writes = False

    async def get(self, key):
        if self.fail_reads:
            raise OSError("store unavailable")
        return self.data.get(key)

    async def set(self, key, value):
        if self.fail_writes:
            raise OSError("store unavailable")
        self.data[key] = value


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def store_factory(memory_store):
    """Store factory with scoped acquisition over a shared MemoryStore."""

    @asynccontextmanager
    async def factory():
        yield memory_store

    return factory


@pytest.fixture
def current_payload():
    """Build a `/weather` response body."""

    def build(
        name="Paris",
        country="FR",
        lat=48.8534,
        lon=2.3488,
        temp=18.6,
        feels_like=17.4,
        condition="Clouds",
        description="broken clouds",
        icon="04d",
        humidity=72,
        pressure=1012,
        wind_speed=4.5,
        dt=int(DAY_ONE.timestamp()) + 12 * 3600,
    ):
        return {
            "coord": {"lat": lat, "lon": lon},
            "weather": [{"id": 803, "main": condition, "description": description, "icon": icon}],
            "main": {
                "temp": temp,
                "feels_like": feels_like,
                "humidity": humidity,
                "pressure": pressure,
            },
            "wind": {"speed": wind_speed, "deg": 240},
            "sys": {"country": country, "sunrise": dt - 5 * 3600, "sunset": dt + 4 * 3600},
            "dt": dt,
            "timezone": 0,
            "name": name,
            "cod": 200,
        }

    return build


@pytest.fixture
def forecast_payload():
    """Build a `/forecast` response body with 3-hour samples starting at DAY_ONE.

    Each keyword is a per-sample list; temps decides the number of samples.
    """

    def build(temps, conditions=None, pops=None, humidities=None, start=DAY_ONE, utc_offset=0):
        items = []
        for index, temp in enumerate(temps):
            condition = conditions[index] if conditions else "Clouds"
            moment = start + timedelta(hours=3 * index)
            items.append(
                {
                    "dt": int(moment.timestamp()),
                    "main": {
                        "temp": temp,
                        "feels_like": temp - 1,
                        "humidity": humidities[index] if humidities else 70,
                        "pressure": 1012,
                    },
                    "weather": [
                        {
                            "main": condition,
                            "description": f"{condition.lower()} {index}",
                            "icon": f"{index:02d}d",
                        }
                    ],
                    "pop": pops[index] if pops else 0.0,
                    "dt_txt": moment.strftime("%Y-%m-%d %H:%M:%S"),
                }
            )
        return {
            "cod": "200",
            "cnt": len(items),
            "list": items,
            "city": {"name": "Paris", "country": "FR", "timezone": utc_offset},
        }

    return build


@pytest.fixture
def two_day_temps():
    """16 samples spanning exactly two calendar days."""
    return [10, 12, 14, 16, 15, 13, 11, 9, 5, 7, 9, 11, 10, 8, 6, 4]


@pytest.fixture
def make_snapshot():
    """Build a minimal snapshot for a city."""

    def build(city="Paris", temperature=18, units=Units.METRIC, condition="Clouds"):
        timestamp = int(DAY_ONE.timestamp()) + 12 * 3600
        return WeatherData(
            current=CurrentWeather(
                temperature=temperature,
                feelsLike=temperature - 1,
                condition=condition,
                description="broken clouds",
                icon="04d",
                humidity=72,
                windSpeed=4,
                pressure=1012,
                cityName=city,
                country="FR",
                timestamp=timestamp,
                sunrise=timestamp - 5 * 3600,
                sunset=timestamp + 4 * 3600,
            ),
            hourly=[],
            daily=[],
            units=units,
        )

    return build


class StubAggregator:
    """Aggregator returning queued outcomes in order; queued exceptions are raised."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def _next(self):
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def get_by_city(self, city, units):
        self.calls.append(("city", city, units))
        return await self._next()

    async def get_by_coordinates(self, latitude, longitude, units):
        self.calls.append(("coordinates", latitude, longitude, units))
        return await self._next()


@pytest.fixture
def stub_aggregator():
    return StubAggregator
