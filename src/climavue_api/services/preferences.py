"""Persisted dashboard preferences and recent city searches."""

import json
from typing import Any

from loguru import logger

from ..core.cache import StoreFactory, open_store
from ..core.config import settings
from ..models.preferences import Preferences
from ..models.weather import Units

MAX_RECENT_SEARCHES = 5

_KEYS = {
    "darkMode": "dark-mode",
    "units": "units",
    "lastCity": "last-city",
    "useGeolocation": "use-geolocation",
}
RECENT_SEARCHES_KEY = "recent-searches"


def merge_recent_search(recent: list[str], city: str) -> list[str]:
    """Put `city` first, drop case-insensitive duplicates, keep at most 5.

    Example:
        >>> merge_recent_search(["Paris", "Oslo"], "paris")
        ['paris', 'Oslo']
    """
    city = city.strip()
    if not city:
        return list(recent)
    kept = [entry for entry in recent if entry.lower() != city.lower()]
    return [city, *kept][:MAX_RECENT_SEARCHES]


class PreferencesRepository:
    """Reads and writes preferences as JSON strings, one key per preference.

    Missing or unreadable values fall back to defaults, so a corrupt entry never
    prevents the dashboard from starting.
    """

    def __init__(self, store_factory: StoreFactory = open_store):
        self._store_factory = store_factory

    def defaults(self) -> Preferences:
        return Preferences(units=Units(settings.DEFAULT_UNITS), lastCity=settings.DEFAULT_CITY)

    async def load(self) -> Preferences:
        values: dict[str, Any] = self.defaults().model_dump()
        async with self._store_factory() as store:
            for field, key in _KEYS.items():
                raw = await store.get(key)
                if raw is None:
                    continue
                try:
                    values[field] = json.loads(raw)
                except ValueError:
                    logger.warning("Ignoring unreadable preference", key=key)

        try:
            return Preferences.model_validate(values)
        except ValueError:
            logger.warning("Stored preferences are invalid, using defaults")
            return self.defaults()

    async def save(self, preferences: Preferences) -> None:
        data = preferences.model_dump(mode="json")
        async with self._store_factory() as store:
            for field, key in _KEYS.items():
                await store.set(key, json.dumps(data[field]))

    async def update(self, **changes: Any) -> Preferences:
        """Apply changes to the stored preferences and persist the result.

        Example:
            >>> async def example(repo):
            ...     prefs = await repo.update(units=Units.IMPERIAL)
            ...     return prefs.units
        """
        current = await self.load()
        updated = Preferences.model_validate({**current.model_dump(), **changes})
        await self.save(updated)
        return updated

    async def recent_searches(self) -> list[str]:
        async with self._store_factory() as store:
            raw = await store.get(RECENT_SEARCHES_KEY)
        if raw is None:
            return []
        try:
            entries = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring unreadable recent searches")
            return []
        if not isinstance(entries, list):
            return []
        return [str(entry) for entry in entries][:MAX_RECENT_SEARCHES]

    async def add_recent_search(self, city: str) -> list[str]:
        updated = merge_recent_search(await self.recent_searches(), city)
        async with self._store_factory() as store:
            await store.set(RECENT_SEARCHES_KEY, json.dumps(updated))
        return updated
