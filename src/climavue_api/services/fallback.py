"""Single-slot offline cache fallback around the weather aggregator."""

from collections.abc import Awaitable, Callable

from loguru import logger
from opentelemetry import metrics

from ..core.cache import StoreFactory, open_store
from ..core.exceptions import ValidationError, WeatherError
from ..models.weather import FetchResult, Units, WeatherData
from .weather import WeatherAggregator

LAST_WEATHER_KEY = "last-weather"
STALE_SUFFIX = " (showing cached data)"

meter = metrics.get_meter(__name__)
fallback_counter = meter.create_counter(
    "climavue.cache.fallbacks",
    description="Snapshots served from the offline cache after a failed fetch",
)


class CacheFallbackPolicy:
    """Serves the last successful snapshot when a live fetch fails.

    Every success overwrites one fixed cache slot, whatever the place. Every
    failure reads it back: if an entry exists it is returned marked stale,
    otherwise the original error propagates. Storage problems on either path
    mean "cache unavailable" and never change the outcome of the fetch.

    Example:
        >>> async def example():
        ...     policy = CacheFallbackPolicy()
        ...     result = await policy.get_by_city("Paris", Units.METRIC)
        ...     return result.stale
    """

    def __init__(
        self,
        aggregator: WeatherAggregator | None = None,
        store_factory: StoreFactory = open_store,
    ):
        self._aggregator = aggregator or WeatherAggregator()
        self._store_factory = store_factory

    async def get_by_city(self, city: str, units: Units) -> FetchResult:
        return await self.fetch_with_fallback(lambda: self._aggregator.get_by_city(city, units))

    async def get_by_coordinates(self, latitude: float, longitude: float, units: Units) -> FetchResult:
        return await self.fetch_with_fallback(
            lambda: self._aggregator.get_by_coordinates(latitude, longitude, units)
        )

    async def fetch_with_fallback(self, operation: Callable[[], Awaitable[WeatherData]]) -> FetchResult:
        """Run an aggregator operation, degrading to the cached snapshot on failure.

        Args:
            operation: Zero-argument coroutine function producing a snapshot

        Returns:
            Fresh result, or the cached snapshot with stale=True and an error message

        Raises:
            WeatherError: The original error when no cached snapshot exists
        """
        try:
            snapshot = await operation()
        except ValidationError:
            # Bad input is reported as-is, never masked by cached data
            raise
        except WeatherError as e:
            cached = await self._read_cached()
            if cached is None:
                raise
            logger.warning("Serving cached snapshot after failed fetch", error=type(e).__name__)
            fallback_counter.add(1, {"error": type(e).__name__})
            return FetchResult(snapshot=cached, stale=True, errorMessage=f"{e.message}{STALE_SUFFIX}")

        await self._persist(snapshot)
        return FetchResult(snapshot=snapshot, stale=False)

    async def _persist(self, snapshot: WeatherData) -> None:
        try:
            async with self._store_factory() as store:
                await store.set(LAST_WEATHER_KEY, snapshot.model_dump_json())
        except Exception as e:
            logger.warning("Could not persist snapshot", error=str(e))

    async def _read_cached(self) -> WeatherData | None:
        try:
            async with self._store_factory() as store:
                raw = await store.get(LAST_WEATHER_KEY)
            if raw is None:
                return None
            return WeatherData.model_validate_json(raw)
        except Exception as e:
            logger.warning("Cached snapshot unavailable", error=str(e))
            return None
