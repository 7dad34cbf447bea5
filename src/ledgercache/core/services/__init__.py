"""Domain services for ledgercache."""

from ledgercache.core.services.cache_service import CacheService
from ledgercache.core.services.compressor import ResponseCompressor, negotiate_encoding
from ledgercache.core.services.etag import etag_matches, generate_etag
from ledgercache.core.services.invalidation import InvalidationService
from ledgercache.core.services.list_query import ListQueryService
from ledgercache.core.services.snapshot_cache import SnapshotCache

__all__ = [
    "CacheService",
    # Conditional requests
    "generate_etag",
    "etag_matches",
    # Response encoding
    "ResponseCompressor",
    "negotiate_encoding",
    # Read path / write path
    "ListQueryService",
    "InvalidationService",
    "SnapshotCache",
]
