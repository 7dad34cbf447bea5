"""ledgercache - read-through caching for fast list endpoints.

Serves paginated, filtered list endpoints of a multi-tenant accounting
app from a shared cache store, with ETag-based conditional responses,
negotiated compression and mutation-driven invalidation. The cache is
fail-open: with the store down every request is a (slower) miss.

Example with FastAPI:
    from fastapi import FastAPI
    from ledgercache import CacheConfig, CacheService, JsonSerializer
    from ledgercache.adapters.fastapi import mount_list_endpoints
    from ledgercache.infrastructure.backends.redis_backend import RedisCacheBackend
    from ledgercache.infrastructure.sources.sqlite import connect, create_sources

    config = CacheConfig.from_env()
    cache_service = CacheService(
        backend=RedisCacheBackend(config.redis_url, key_prefix=config.key_prefix),
        serializer=JsonSerializer(),
        config=config,
    )

    app = FastAPI()
    db = await connect("app.db")
    mount_list_endpoints(app, cache_service, create_sources(db))

    # GET /api/products?company=7&take=20&sortField=price&sortDirection=asc
"""

from ledgercache.catalog import (
    CLIENTS,
    DIGITAL_WALLETS,
    ENTITY_DEPENDENCIES,
    POLICIES,
    PRODUCTS,
    VENDORS,
)
from ledgercache.core.entities import (
    CacheConfig,
    CachedListResponse,
    CacheEntry,
    CacheScope,
    ClientFilters,
    CompressionConfig,
    DigitalWalletFilters,
    EncodedResponse,
    FreshnessPolicy,
    ListCacheKeys,
    ListEndpointPolicy,
    Pagination,
    ProductFilters,
    QueryFilterSpec,
    SortDirection,
    VendorFilters,
)
from ledgercache.core.exceptions import (
    CacheUnavailableError,
    CacheWriteError,
    InvalidationError,
    InvalidFilterError,
    LedgerCacheError,
    SourceQueryError,
)
from ledgercache.core.interfaces import (
    ICacheBackend,
    IInvalidator,
    IKeyBuilder,
    IListSource,
    IRecordStore,
    ISerializer,
)
from ledgercache.core.services import (
    CacheService,
    InvalidationService,
    ListQueryService,
    ResponseCompressor,
    SnapshotCache,
    etag_matches,
    generate_etag,
)
from ledgercache.decorators import invalidates
from ledgercache.infrastructure import (
    DefaultKeyBuilder,
    InMemoryCacheBackend,
    JsonSerializer,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core entities
    "CacheConfig",
    "CompressionConfig",
    "CacheEntry",
    "ListCacheKeys",
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
    # Errors
    "LedgerCacheError",
    "CacheUnavailableError",
    "CacheWriteError",
    "SourceQueryError",
    "InvalidationError",
    "InvalidFilterError",
    # Core interfaces
    "ICacheBackend",
    "IKeyBuilder",
    "ISerializer",
    "IInvalidator",
    "IListSource",
    "IRecordStore",
    # Core services
    "CacheService",
    "ListQueryService",
    "InvalidationService",
    "ResponseCompressor",
    "SnapshotCache",
    "generate_etag",
    "etag_matches",
    # Catalogue
    "PRODUCTS",
    "VENDORS",
    "CLIENTS",
    "DIGITAL_WALLETS",
    "POLICIES",
    "ENTITY_DEPENDENCIES",
    # Infrastructure implementations
    "InMemoryCacheBackend",
    "DefaultKeyBuilder",
    "JsonSerializer",
    # Decorators
    "invalidates",
]
