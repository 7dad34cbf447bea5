"""Redis cache backend implementation."""

from datetime import timedelta
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ledgercache.core.exceptions import CacheUnavailableError


class RedisCacheBackend:
    """Redis cache backend for distributed deployments.

    Supports TTL, pattern deletion, and is suitable for multi-process
    and distributed deployments. Driver errors surface as
    ``CacheUnavailableError``.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        key_prefix: str = "ledgercache",
        default_ttl: Optional[int] = 300,
        socket_timeout: float = 1.0,
        connect_timeout: float = 2.0,
        client: Optional[redis.Redis] = None,
    ) -> None:
        """Initialize the Redis cache backend.

        Args:
            redis_url: Redis connection URL.
            key_prefix: Prefix for all cache keys.
            default_ttl: Default TTL in seconds.
            socket_timeout: Per-command socket timeout in seconds.
            connect_timeout: Connection timeout in seconds.
            client: Pre-built client, mainly for tests.
        """
        self._redis: redis.Redis = client or redis.from_url(  # type: ignore
            redis_url,
            socket_timeout=socket_timeout,
            socket_connect_timeout=connect_timeout,
        )
        self._key_prefix = key_prefix
        self._default_ttl = default_ttl

    async def get(self, key: str) -> Optional[bytes]:
        """Retrieve cached value by key.

        Returns:
            The cached value as bytes, or None if not found or expired.
        """
        try:
            return await self._redis.get(self._prefixed_key(key))
        except RedisError as e:
            raise CacheUnavailableError(f"GET {key} failed: {e}") from e

    async def set(
        self,
        key: str,
        value: bytes,
        ttl: Optional[timedelta] = None,
    ) -> None:
        """Store value with optional TTL.

        Args:
            key: The cache key.
            value: The value to store as bytes.
            ttl: Optional time-to-live. If None, uses default.
        """
        prefixed_key = self._prefixed_key(key)

        try:
            if ttl is not None:
                await self._redis.setex(prefixed_key, max(int(ttl.total_seconds()), 1), value)
            elif self._default_ttl is not None:
                await self._redis.setex(prefixed_key, self._default_ttl, value)
            else:
                await self._redis.set(prefixed_key, value)
        except RedisError as e:
            raise CacheUnavailableError(f"SET {key} failed: {e}") from e

    async def delete(self, key: str) -> bool:
        try:
            result = await self._redis.delete(self._prefixed_key(key))
        except RedisError as e:
            raise CacheUnavailableError(f"DEL {key} failed: {e}") from e
        return result > 0

    async def exists(self, key: str) -> bool:
        try:
            result = await self._redis.exists(self._prefixed_key(key))
        except RedisError as e:
            raise CacheUnavailableError(f"EXISTS {key} failed: {e}") from e
        return result > 0

    async def clear(self) -> None:
        """Clear all cached values with our prefix.

        Note: This only clears keys with our prefix, not the entire Redis DB.
        """
        await self.delete_pattern("*")

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern.

        Args:
            pattern: Glob-style pattern, relative to the key prefix.

        Returns:
            Number of keys deleted.
        """
        try:
            return await self._delete_by_pattern(self._prefixed_key(pattern))
        except RedisError as e:
            raise CacheUnavailableError(f"pattern delete {pattern} failed: {e}") from e

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except RedisError:
            return False

    async def _delete_by_pattern(self, pattern: str) -> int:
        """Delete keys matching a pattern using SCAN.

        Uses SCAN instead of KEYS for production safety.

        Args:
            pattern: Redis glob pattern.

        Returns:
            Number of keys deleted.
        """
        count = 0
        cursor = 0

        while True:
            cursor, keys = await self._redis.scan(cursor, match=pattern, count=100)

            if keys:
                deleted = await self._redis.delete(*keys)
                count += deleted

            if cursor == 0:
                break

        return count

    def _prefixed_key(self, key: str) -> str:
        """Add prefix to key if not already present."""
        if key.startswith(f"{self._key_prefix}:"):
            return key
        return f"{self._key_prefix}:{key}"

    async def close(self) -> None:
        """Close the Redis connection."""
        await self._redis.aclose()

    async def __aenter__(self) -> "RedisCacheBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.close()
