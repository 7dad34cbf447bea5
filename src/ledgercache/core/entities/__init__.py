"""Domain entities for ledgercache."""

from ledgercache.core.entities.cache_config import CacheConfig, CompressionConfig
from ledgercache.core.entities.cache_control import CacheScope, FreshnessPolicy
from ledgercache.core.entities.cache_entry import CacheEntry
from ledgercache.core.entities.cache_key import ListCacheKeys
from ledgercache.core.entities.endpoint_policy import ListEndpointPolicy
from ledgercache.core.entities.filters import (
    ClientFilters,
    DigitalWalletFilters,
    ProductFilters,
    QueryFilterSpec,
    SortDirection,
    VendorFilters,
)
from ledgercache.core.entities.list_response import (
    CachedListResponse,
    EncodedResponse,
    Pagination,
)

__all__ = [
    "CacheEntry",
    "ListCacheKeys",
    "CacheConfig",
    "CompressionConfig",
    "CacheScope",
    "FreshnessPolicy",
    "ListEndpointPolicy",
    "QueryFilterSpec",
    "ProductFilters",
    "VendorFilters",
    "ClientFilters",
    "DigitalWalletFilters",
    "SortDirection",
    "Pagination",
    "CachedListResponse",
    "EncodedResponse",
]
