"""Tests for the key-value store adapter."""

import pytest
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend

from climavue_api.core.cache import CacheBackendStore, open_store


class TestCacheBackendStore:
    """Test the fastapi-cache2 backed store."""

    @pytest.mark.asyncio
    async def test_basic_get_set(self):
        store = CacheBackendStore(InMemoryBackend(), prefix="t-")

        await store.set("units", '"imperial"')

        assert await store.get("units") == '"imperial"'

    @pytest.mark.asyncio
    async def test_get_missing_key(self):
        store = CacheBackendStore(InMemoryBackend())

        assert await store.get("nonexistent") is None

    @pytest.mark.asyncio
    async def test_overwrite(self):
        store = CacheBackendStore(InMemoryBackend())

        await store.set("last-city", '"Paris"')
        await store.set("last-city", '"Oslo"')

        assert await store.get("last-city") == '"Oslo"'

    @pytest.mark.asyncio
    async def test_keys_are_prefixed(self):
        """Test that two prefixes never see each other's values."""
        backend = InMemoryBackend()
        first = CacheBackendStore(backend, prefix="a-")
        second = CacheBackendStore(backend, prefix="b-")

        await first.set("units", '"metric"')

        assert await second.get("units") is None
        assert await backend.get("a-units") == b'"metric"'

    @pytest.mark.asyncio
    async def test_unicode_values(self):
        store = CacheBackendStore(InMemoryBackend())

        await store.set("last-city", '"São Paulo"')

        assert await store.get("last-city") == '"São Paulo"'

    @pytest.mark.asyncio
    async def test_closed_store_rejects_access(self):
        store = CacheBackendStore(InMemoryBackend())
        store.close()

        assert store.closed
        with pytest.raises(RuntimeError, match="used after release"):
            await store.get("units")
        with pytest.raises(RuntimeError, match="used after release"):
            await store.set("units", '"metric"')


class TestOpenStore:
    """Test scoped acquisition of the application store."""

    @pytest.mark.asyncio
    async def test_values_survive_between_scopes(self):
        async with open_store() as store:
            await store.set("dark-mode", "true")

        async with open_store() as store:
            assert await store.get("dark-mode") == "true"

    @pytest.mark.asyncio
    async def test_store_released_on_exit(self):
        async with open_store() as store:
            pass

        assert store.closed

    @pytest.mark.asyncio
    async def test_store_released_on_error(self):
        with pytest.raises(ValueError):
            async with open_store() as store:
                raise ValueError("boom")

        assert store.closed

    @pytest.mark.asyncio
    async def test_uses_configured_prefixes(self):
        async with open_store() as store:
            await store.set("units", '"metric"')

        backend = FastAPICache.get_backend()
        assert await backend.get("test-cache:climavue-units") == b'"metric"'
