"""Per-entity list endpoint policy."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from ledgercache.core.entities.cache_control import FreshnessPolicy
from ledgercache.core.entities.filters import QueryFilterSpec


@dataclass(frozen=True)
class ListEndpointPolicy:
    """Caching and query policy for one entity's list endpoint.

    More volatile entities get shorter TTLs and freshness windows. Fresh
    (miss) responses always get a shorter browser window than hits.

    Attributes:
        entity: Entity name, also the cache key namespace.
        filter_type: Typed filter class for the entity.
        list_ttl: TTL of cached pages in the shared store.
        hit_freshness: Cache-Control for responses served from cache.
        miss_freshness: Cache-Control for freshly queried responses.
        sort_fields: Accepted ``sortField`` values.
        default_take: Page size when ``take`` is absent.
        default_sort_field: Sort field used when absent or unknown.
        stats_ttl: TTL of the in-process statistics snapshot.
    """

    entity: str
    filter_type: type[QueryFilterSpec]
    list_ttl: timedelta
    hit_freshness: FreshnessPolicy
    miss_freshness: FreshnessPolicy
    sort_fields: frozenset[str] = frozenset({"createdAt"})
    default_take: int = 20
    default_sort_field: str = "createdAt"
    stats_ttl: timedelta = timedelta(minutes=15)

    @property
    def error_message(self) -> str:
        return f"Failed to fetch {self.entity.replace('-', ' ')}"

    def parse_filters(self, params: Mapping[str, Any]) -> QueryFilterSpec:
        """Normalize request parameters with this endpoint's defaults."""
        return self.filter_type.from_params(
            params,
            default_take=self.default_take,
            sort_fields=self.sort_fields | {self.default_sort_field},
            default_sort_field=self.default_sort_field,
        )
