"""Key builder interface."""

from typing import Protocol

from ledgercache.core.entities.cache_key import ListCacheKeys
from ledgercache.core.entities.filters import QueryFilterSpec


class IKeyBuilder(Protocol):
    """Contract for building cache keys from list filters.

    Key builders must be deterministic: semantically equal filters map
    to the same keys, different filters to different keys.
    """

    def build(self, entity: str, filters: QueryFilterSpec) -> ListCacheKeys:
        """Build the data and count keys for one list page.

        Args:
            entity: Entity name, used as the key namespace.
            filters: Normalized filters of the request.

        Returns:
            The pair of cache keys.
        """
        ...
