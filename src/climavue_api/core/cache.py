"""Scoped key-value store on top of a fastapi-cache2 backend."""

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Protocol

from fastapi_cache import FastAPICache
from fastapi_cache.types import Backend
from loguru import logger

from .config import settings


class KeyValueStore(Protocol):
    """String keys to string values, the persistence capability of the dashboard."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...


StoreFactory = Callable[[], AbstractAsyncContextManager[KeyValueStore]]


class CacheBackendStore:
    """Key-value store adapter for any fastapi-cache2 backend.

    Keys are namespaced with a prefix, values are stored as UTF-8 bytes with a long
    expiry. Once closed, the store refuses further reads and writes.

    Example:
        >>> import asyncio
        >>> from fastapi_cache.backends.inmemory import InMemoryBackend
        >>> store = CacheBackendStore(InMemoryBackend(), prefix="test-")
        >>> asyncio.run(store.set("units", '"metric"'))
        >>> asyncio.run(store.get("units"))
        '"metric"'
    """

    def __init__(self, backend: Backend, prefix: str = "", ttl: int | None = None):
        self._backend = backend
        self._prefix = prefix
        self._ttl = ttl or settings.STORE_TTL
        self._closed = False

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Key-value store used after release")

    async def get(self, key: str) -> str | None:
        """Get a value, or None when the key was never set or has expired."""
        self._check_open()
        value = await self._backend.get(self._key(key))
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    async def set(self, key: str, value: str) -> None:
        """Store a value, overwriting any previous one."""
        self._check_open()
        await self._backend.set(self._key(key), value.encode("utf-8"), self._ttl)

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed


@asynccontextmanager
async def open_store() -> AsyncIterator[KeyValueStore]:
    """Acquire the application store for the duration of one operation.

    Uses the backend registered with FastAPICache.init() at startup.

    Raises:
        AssertionError: If FastAPICache has not been initialized
    """
    backend = FastAPICache.get_backend()
    store = CacheBackendStore(
        backend,
        prefix=f"{FastAPICache.get_prefix()}{settings.STORAGE_PREFIX}",
    )
    try:
        yield store
    finally:
        store.close()
        logger.debug("Key-value store released")
