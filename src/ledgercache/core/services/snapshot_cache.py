"""In-process snapshot cache for expensive aggregate reads."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from ledgercache.core.entities.cache_entry import CacheEntry

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SnapshotCache:
    """Holds one computed value for up to ``ttl``.

    Owned by whoever wires the application and injected where it is read
    and invalidated; independent instances never share state.
    """

    def __init__(
        self,
        name: str,
        ttl: timedelta,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._name = name
        self._ttl = ttl
        self._now = now
        self._entry: CacheEntry | None = None
        self._lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self._name

    def peek(self) -> Any | None:
        """Return the current value if it has not expired."""
        entry = self._entry
        if entry is None or entry.is_expired_at(self._now()):
            return None
        return entry.value

    async def get_or_compute(self, compute: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value, computing and storing it when absent or expired.

        Concurrent callers on one instance share a single computation.
        Errors from ``compute`` propagate and nothing is stored.
        """
        value = self.peek()
        if value is not None:
            return value

        async with self._lock:
            value = self.peek()
            if value is not None:
                return value
            value = await compute()
            self._entry = CacheEntry.create(
                key=self._name, value=value, ttl=self._ttl, now=self._now()
            )
            logger.debug("Computed snapshot %s", self._name)
            return value

    def invalidate(self) -> None:
        """Drop the held value so the next read recomputes it."""
        if self._entry is not None:
            logger.debug("Invalidated snapshot %s", self._name)
        self._entry = None
