"""In-memory cache backend implementation."""

import fnmatch
import time
from collections.abc import Callable
from datetime import timedelta

from cachetools import TLRUCache  # type: ignore[import-untyped]


def _expires(key: str, value: tuple[bytes, float], now: float) -> float:
    return now + value[1]


class InMemoryCacheBackend:
    """In-memory cache backend using LRU with per-item TTL.

    Suitable for single-process deployments and tests. Uses cachetools'
    TLRUCache so every entry expires on its own TTL.
    """

    def __init__(
        self,
        maxsize: int = 1000,
        default_ttl: float = 300.0,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory cache backend.

        Args:
            maxsize: Maximum number of items in the cache.
            default_ttl: Default TTL in seconds for items.
            timer: Clock used for expiry, injectable for tests.
        """
        self._maxsize = maxsize
        self._default_ttl = default_ttl
        self._cache: TLRUCache[str, tuple[bytes, float]] = TLRUCache(
            maxsize=maxsize,
            ttu=_expires,
            timer=timer,
        )

    async def get(self, key: str) -> bytes | None:
        """Retrieve cached value by key.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value as bytes, or None if not found or expired.
        """
        item = self._cache.get(key)
        return item[0] if item is not None else None

    async def set(
        self,
        key: str,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> None:
        """Store value with optional TTL.

        Args:
            key: The cache key.
            value: The value to store as bytes.
            ttl: Optional time-to-live. If None, uses default.
        """
        seconds = ttl.total_seconds() if ttl is not None else self._default_ttl
        self._cache[key] = (value, seconds)

    async def delete(self, key: str) -> bool:
        """Delete cached value.

        Returns:
            True if the key existed and was deleted, False otherwise.
        """
        try:
            del self._cache[key]
            return True
        except KeyError:
            return False

    async def exists(self, key: str) -> bool:
        return key in self._cache

    async def clear(self) -> None:
        """Clear all cached values."""
        self._cache.clear()

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern.

        Args:
            pattern: Glob-style pattern to match keys.

        Returns:
            Number of live keys deleted.
        """
        self._cache.expire()
        keys_to_delete = [
            key for key in list(self._cache.keys())
            if fnmatch.fnmatchcase(key, pattern)
        ]

        count = 0
        for key in keys_to_delete:
            try:
                del self._cache[key]
                count += 1
            except KeyError:
                pass

        return count

    async def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        """Return the number of items in the cache."""
        self._cache.expire()
        return len(self._cache)

    @property
    def maxsize(self) -> int:
        """Return the maximum size of the cache."""
        return self._maxsize
