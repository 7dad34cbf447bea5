"""Cache entry entity."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """Immutable cache entry value object.

    Represents a cached value with its creation time and TTL. A read
    after ``expires_at`` must behave as a miss.
    """

    key: str
    value: Any
    created_at: datetime
    ttl: timedelta | None = None

    @property
    def expires_at(self) -> datetime | None:
        """Calculate expiration time.

        Returns:
            The datetime when this entry expires, or None if no TTL.
        """
        if self.ttl is None:
            return None
        return self.created_at + self.ttl

    def is_expired_at(self, now: datetime) -> bool:
        """Check if the entry has expired at a given instant."""
        if self.expires_at is None:
            return False
        return now >= self.expires_at

    @property
    def is_expired(self) -> bool:
        """Check if entry has expired.

        Returns:
            True if the entry has expired, False otherwise.
        """
        return self.is_expired_at(datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        key: str,
        value: Any,
        ttl: timedelta | None = None,
        now: datetime | None = None,
    ) -> "CacheEntry":
        """Factory method to create a new cache entry.

        Args:
            key: The cache key.
            value: The value to cache.
            ttl: Optional time-to-live.
            now: Creation instant. Defaults to the current UTC time.

        Returns:
            A new CacheEntry instance.
        """
        return cls(
            key=key,
            value=value,
            created_at=now or datetime.now(timezone.utc),
            ttl=ttl,
        )
