"""Tests for persisted preferences and recent searches."""

import pytest

from climavue_api.core.config import settings
from climavue_api.models.preferences import Preferences
from climavue_api.models.weather import Units
from climavue_api.services.preferences import (
    RECENT_SEARCHES_KEY,
    PreferencesRepository,
    merge_recent_search,
)


class TestMergeRecentSearch:
    """Test the recent-search list rules."""

    def test_new_city_goes_first(self):
        assert merge_recent_search(["Paris", "Oslo"], "Rome") == ["Rome", "Paris", "Oslo"]

    def test_duplicates_are_case_insensitive(self):
        assert merge_recent_search(["Paris", "Oslo", "Rome"], "oslo") == ["oslo", "Paris", "Rome"]

    def test_keeps_five_entries(self):
        recent = ["A", "B", "C", "D", "E"]

        assert merge_recent_search(recent, "F") == ["F", "A", "B", "C", "D"]

    def test_blank_city_is_ignored(self):
        assert merge_recent_search(["Paris"], "   ") == ["Paris"]

    def test_city_is_trimmed(self):
        assert merge_recent_search([], "  Lima ") == ["Lima"]


class TestPreferencesRepository:
    """Test reading and writing preferences."""

    @pytest.mark.asyncio
    async def test_defaults_when_nothing_stored(self, store_factory):
        prefs = await PreferencesRepository(store_factory).load()

        assert prefs == Preferences(units=Units.METRIC, lastCity="London")

    @pytest.mark.asyncio
    async def test_defaults_follow_settings(self, store_factory, monkeypatch):
        monkeypatch.setattr(settings, "DEFAULT_CITY", "Nairobi")
        monkeypatch.setattr(settings, "DEFAULT_UNITS", "imperial")

        prefs = await PreferencesRepository(store_factory).load()

        assert prefs.lastCity == "Nairobi"
        assert prefs.units == Units.IMPERIAL

    @pytest.mark.asyncio
    async def test_save_and_load(self, store_factory, memory_store):
        repository = PreferencesRepository(store_factory)
        prefs = Preferences(darkMode=True, units=Units.IMPERIAL, lastCity="Oslo", useGeolocation=True)

        await repository.save(prefs)

        assert await repository.load() == prefs
        assert memory_store.data["dark-mode"] == "true"
        assert memory_store.data["units"] == '"imperial"'
        assert memory_store.data["last-city"] == '"Oslo"'
        assert memory_store.data["use-geolocation"] == "true"

    @pytest.mark.asyncio
    async def test_update_keeps_other_fields(self, store_factory):
        repository = PreferencesRepository(store_factory)
        await repository.save(Preferences(darkMode=True, lastCity="Oslo"))

        updated = await repository.update(units=Units.IMPERIAL)

        assert updated.units == Units.IMPERIAL
        assert updated.darkMode is True
        assert updated.lastCity == "Oslo"
        assert await repository.load() == updated

    @pytest.mark.asyncio
    async def test_unreadable_value_is_ignored(self, store_factory, memory_store):
        memory_store.data["last-city"] = '"Oslo"'
        memory_store.data["dark-mode"] = "{broken"

        prefs = await PreferencesRepository(store_factory).load()

        assert prefs.lastCity == "Oslo"
        assert prefs.darkMode is False

    @pytest.mark.asyncio
    async def test_invalid_values_fall_back_to_defaults(self, store_factory, memory_store):
        memory_store.data["units"] = '"kelvin"'

        prefs = await PreferencesRepository(store_factory).load()

        assert prefs == PreferencesRepository(store_factory).defaults()


class TestRecentSearches:
    """Test the stored recent-search list."""

    @pytest.mark.asyncio
    async def test_empty_by_default(self, store_factory):
        assert await PreferencesRepository(store_factory).recent_searches() == []

    @pytest.mark.asyncio
    async def test_add_recent_search(self, store_factory):
        repository = PreferencesRepository(store_factory)

        await repository.add_recent_search("Paris")
        await repository.add_recent_search("Oslo")
        await repository.add_recent_search("PARIS")

        assert await repository.recent_searches() == ["PARIS", "Oslo"]

    @pytest.mark.asyncio
    async def test_unreadable_list_is_ignored(self, store_factory, memory_store):
        memory_store.data[RECENT_SEARCHES_KEY] = '{"city": "Paris"}'

        assert await PreferencesRepository(store_factory).recent_searches() == []
