"""Default key builder implementation."""

from ledgercache.core.entities.cache_key import ListCacheKeys
from ledgercache.core.entities.filters import QueryFilterSpec
from ledgercache.utils.hashing import canonical_json, hash_value


class DefaultKeyBuilder:
    """Key builder using the canonical JSON form of the filters.

    Produces ``<entity>:list:<filters>`` and ``<entity>:count:<filters>``
    where ``<filters>`` is the filter dict serialized with sorted keys.
    Filters are normalized before they get here, so ``company=5`` and
    ``company="5"`` already compare equal.
    """

    def __init__(self, hash_filters: bool = False) -> None:
        """Initialize the key builder.

        Args:
            hash_filters: Replace the readable filter JSON with a short
                SHA-256 digest. Keys stay deterministic either way.
        """
        self._hash_filters = hash_filters

    def build(self, entity: str, filters: QueryFilterSpec) -> ListCacheKeys:
        """Build the data and count keys for one list page.

        Args:
            entity: Entity name, used as the key namespace.
            filters: Normalized filters of the request.

        Returns:
            The pair of cache keys.
        """
        canonical = filters.canonical()
        if self._hash_filters:
            repr_ = hash_value(canonical)
        else:
            repr_ = canonical_json(canonical)

        return ListCacheKeys(
            entity=entity,
            data_key=f"{entity}:list:{repr_}",
            count_key=f"{entity}:count:{repr_}",
        )
