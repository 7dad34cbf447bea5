"""Mutation-driven cache invalidation."""

import asyncio
import logging
from collections.abc import Iterable, Mapping

from ledgercache.core.exceptions import InvalidationError
from ledgercache.core.services.cache_service import CacheService
from ledgercache.core.services.snapshot_cache import SnapshotCache

logger = logging.getLogger(__name__)


class InvalidationService:
    """Deletes cache entries made stale by a write.

    A mutation on entity ``E`` deletes every cached variant of ``E``
    (``E:*``) and the list pages of every entity whose rows embed ``E``
    (``D:list:*`` for each dependent ``D``), then drops the in-process
    snapshots of ``E`` and its dependents.

    Invalidation is best-effort and not transactional with the write. A
    failed delete leaves stale pages that expire on their own TTL; the
    failure is logged and never reaches the caller.

    Args:
        cache_service: Service wrapping the shared store.
        dependencies: Entity -> entities whose cached rows embed it.
        snapshots: Entity -> its in-process snapshot cache.
    """

    def __init__(
        self,
        cache_service: CacheService,
        dependencies: Mapping[str, Iterable[str]] | None = None,
        snapshots: Mapping[str, SnapshotCache] | None = None,
    ) -> None:
        self._cache = cache_service
        self._dependencies = {
            entity: tuple(dependents)
            for entity, dependents in (dependencies or {}).items()
        }
        self._snapshots = dict(snapshots or {})

    def dependents_of(self, entity_type: str) -> tuple[str, ...]:
        return self._dependencies.get(entity_type, ())

    def patterns_for(self, entity_type: str) -> list[str]:
        """Glob patterns deleted for a mutation on ``entity_type``."""
        patterns = [f"{entity_type}:*"]
        patterns.extend(
            f"{dependent}:list:*"
            for dependent in self.dependents_of(entity_type)
            if dependent != entity_type
        )
        return patterns

    async def invalidate_on_mutation(
        self,
        entity_type: str,
        entity_id: object,
        aggregate_id: object | None = None,
    ) -> int:
        """Invalidate everything a mutation may have made stale.

        Returns:
            Number of shared-store entries deleted. Patterns whose delete
            failed count as zero.
        """
        for name in (entity_type, *self.dependents_of(entity_type)):
            snapshot = self._snapshots.get(name)
            if snapshot is not None:
                snapshot.invalidate()

        deleted = 0
        for pattern in self.patterns_for(entity_type):
            try:
                deleted += await self._cache.delete_pattern(pattern)
            except InvalidationError as e:
                logger.warning(
                    "Invalidation of %s after %s %s (company %s) failed: %s",
                    pattern, entity_type, entity_id, aggregate_id, e,
                )

        logger.info(
            "Invalidated %d cache entries after %s %s mutation (company %s)",
            deleted, entity_type, entity_id, aggregate_id,
        )
        return deleted

    def schedule(
        self,
        entity_type: str,
        entity_id: object,
        aggregate_id: object | None = None,
    ) -> asyncio.Task[int]:
        """Run ``invalidate_on_mutation`` as a detached background task."""
        return self._cache.spawn(
            self.invalidate_on_mutation(entity_type, entity_id, aggregate_id),
            name=f"invalidate:{entity_type}:{entity_id}",
        )
