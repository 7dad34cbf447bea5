"""Cache invalidator interface."""

import asyncio
from typing import Protocol


class IInvalidator(Protocol):
    """Contract for mutation-driven cache invalidation."""

    async def invalidate_on_mutation(
        self,
        entity_type: str,
        entity_id: object,
        aggregate_id: object | None = None,
    ) -> int:
        """Invalidate everything a mutation may have made stale.

        Args:
            entity_type: The mutated entity, e.g. ``"products"``.
            entity_id: Id of the mutated row.
            aggregate_id: Owning aggregate (company) id, if known.

        Returns:
            Number of cache entries deleted.
        """
        ...

    def schedule(
        self,
        entity_type: str,
        entity_id: object,
        aggregate_id: object | None = None,
    ) -> asyncio.Task[int]:
        """Run ``invalidate_on_mutation`` as a detached background task."""
        ...
