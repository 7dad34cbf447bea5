"""Cache service - fail-open access to the shared cache store."""

import asyncio
import logging
from collections.abc import Coroutine
from datetime import timedelta
from typing import Any

from ledgercache.core.entities.cache_config import CacheConfig
from ledgercache.core.exceptions import (
    CacheUnavailableError,
    CacheWriteError,
    InvalidationError,
)
from ledgercache.core.interfaces.cache_backend import ICacheBackend
from ledgercache.core.interfaces.serializer import ISerializer

logger = logging.getLogger(__name__)


class CacheService:
    """Domain service that orchestrates cache store operations.

    Composes a backend and a serializer and bounds every store call with
    ``config.operation_timeout``. Reads fail open: an unreachable, slow or
    corrupt store reads as a miss. Writes never raise. Detached work
    (cache population, invalidation) is spawned through ``spawn`` so
    failures are logged instead of lost.
    """

    def __init__(
        self,
        backend: ICacheBackend,
        serializer: ISerializer,
        config: CacheConfig | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            backend: The cache backend to use for storage.
            serializer: The serializer for encoding/decoding values.
            config: Optional cache configuration. Uses defaults if not provided.
        """
        self._backend = backend
        self._serializer = serializer
        self._config = config or CacheConfig()
        self._background: set[asyncio.Task[Any]] = set()

        # Statistics
        self._hits = 0
        self._misses = 0
        self._errors = 0

    @property
    def config(self) -> CacheConfig:
        """Get the cache configuration."""
        return self._config

    @property
    def stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, store errors and total lookups.
        """
        return {
            "hits": self._hits,
            "misses": self._misses,
            "errors": self._errors,
            "total": self._hits + self._misses,
        }

    def record_lookup(self, hit: bool) -> None:
        """Count one logical lookup as a hit or a miss."""
        if hit:
            self._hits += 1
        else:
            self._misses += 1

    async def _call(self, operation: str, key: str, coro: Coroutine[Any, Any, Any]) -> Any:
        try:
            return await asyncio.wait_for(coro, timeout=self._config.operation_timeout)
        except asyncio.TimeoutError as e:
            self._errors += 1
            raise CacheUnavailableError(
                f"{operation} {key} timed out after {self._config.operation_timeout}s"
            ) from e
        except CacheUnavailableError:
            self._errors += 1
            raise
        except Exception as e:
            self._errors += 1
            raise CacheUnavailableError(f"{operation} {key} failed: {e}") from e

    async def get(self, key: str) -> Any | None:
        """Get and deserialize a value, or None on miss.

        Store failures and undecodable payloads are logged and read as
        a miss; this method never raises for them.
        """
        if not self._config.enabled:
            return None

        try:
            data = await self._call("get", key, self._backend.get(key))
        except CacheUnavailableError as e:
            logger.warning("Cache unavailable, treating as miss: %s", e)
            return None

        if data is None:
            return None

        try:
            return self._serializer.deserialize(data)
        except Exception as e:
            logger.warning("Discarding undecodable cache entry %s: %s", key, e)
            return None

    async def get_many(self, *keys: str) -> list[Any | None]:
        """Get several keys concurrently; each one fails open on its own."""
        return list(await asyncio.gather(*(self.get(key) for key in keys)))

    async def set(self, key: str, value: Any, ttl: timedelta | None = None) -> bool:
        """Serialize and store a value, overwriting silently.

        Args:
            key: The cache key.
            value: The value to cache.
            ttl: Optional TTL. Uses config default if not provided.

        Returns:
            True if stored, False if caching is disabled or the write failed.
        """
        if not self._config.enabled:
            return False

        try:
            serialized = self._serializer.serialize(value)
            await self._call(
                "set", key, self._backend.set(key, serialized, ttl or self._config.default_ttl)
            )
        except Exception as e:
            error = CacheWriteError(f"Failed to cache {key}: {e}")
            logger.warning("%s", error)
            return False
        return True

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern.

        Returns:
            Number of keys deleted.

        Raises:
            InvalidationError: If the store could not be reached.
        """
        try:
            count = await self._call(
                "delete_pattern", pattern, self._backend.delete_pattern(pattern)
            )
        except CacheUnavailableError as e:
            raise InvalidationError(f"Failed to delete {pattern}: {e}") from e
        logger.debug("Deleted %d cache entries matching %s", count, pattern)
        return int(count)

    async def delete(self, key: str) -> bool:
        """Delete a single key. Returns False if it was absent or unreachable."""
        try:
            return bool(await self._call("delete", key, self._backend.delete(key)))
        except CacheUnavailableError:
            return False

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self._call("exists", key, self._backend.exists(key)))
        except CacheUnavailableError:
            return False

    async def ping(self) -> bool:
        """Check that the store answers within the operation timeout."""
        try:
            return bool(await self._call("ping", "-", self._backend.ping()))
        except CacheUnavailableError:
            return False

    async def clear(self) -> None:
        """Clear all cached entries and reset statistics.

        Raises:
            CacheUnavailableError: If the store could not be reached.
        """
        await self._call("clear", "*", self._backend.clear())
        self._hits = 0
        self._misses = 0
        self._errors = 0

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str) -> asyncio.Task[Any]:
        """Run a coroutine as a detached background task.

        The caller never awaits it. A reference is kept until the task
        finishes, and any exception it raises is logged.
        """
        task = asyncio.create_task(coro, name=name)
        self._background.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    def _on_background_done(self, task: asyncio.Task[Any]) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "Background task %s failed", task.get_name(), exc_info=error
            )

    @property
    def pending(self) -> int:
        """Number of background tasks still running."""
        return len(self._background)

    async def drain(self) -> None:
        """Wait for every background task spawned so far."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
