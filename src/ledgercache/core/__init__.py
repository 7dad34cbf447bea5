"""Core domain layer for ledgercache."""

from ledgercache.core.entities import (
    CacheConfig,
    CacheEntry,
    CachedListResponse,
    ListCacheKeys,
    ListEndpointPolicy,
    QueryFilterSpec,
)
from ledgercache.core.interfaces import (
    ICacheBackend,
    IInvalidator,
    IKeyBuilder,
    IListSource,
    ISerializer,
)
from ledgercache.core.services import (
    CacheService,
    InvalidationService,
    ListQueryService,
)

__all__ = [
    # Entities
    "CacheConfig",
    "CacheEntry",
    "CachedListResponse",
    "ListCacheKeys",
    "ListEndpointPolicy",
    "QueryFilterSpec",
    # Interfaces
    "ICacheBackend",
    "IKeyBuilder",
    "ISerializer",
    "IInvalidator",
    "IListSource",
    # Services
    "CacheService",
    "ListQueryService",
    "InvalidationService",
]
