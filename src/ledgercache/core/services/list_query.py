"""Read-through query orchestrator for list endpoints."""

import asyncio
import logging
import time
from collections.abc import Mapping
from typing import Any

from ledgercache.core.entities.cache_key import ListCacheKeys
from ledgercache.core.entities.endpoint_policy import ListEndpointPolicy
from ledgercache.core.entities.filters import QueryFilterSpec
from ledgercache.core.entities.list_response import (
    CachedListResponse,
    EncodedResponse,
    Pagination,
)
from ledgercache.core.exceptions import (
    InvalidationError,
    InvalidFilterError,
    SourceQueryError,
)
from ledgercache.core.interfaces.key_builder import IKeyBuilder
from ledgercache.core.interfaces.source import IListSource
from ledgercache.core.services.cache_service import CacheService
from ledgercache.core.services.compressor import ResponseCompressor, header_value
from ledgercache.core.services.etag import etag_matches, generate_etag

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class ListQueryService:
    """Serves one entity's list endpoint through the shared cache.

    Per request: normalize filters, derive the data and count keys, look
    both up concurrently, and either answer from cache or query the source
    of record and populate the cache in the background. A page is only a
    hit when both keys are present, so ``total`` and ``data`` always come
    from the same place.

    Example:
        service = ListQueryService(
            policy=PRODUCTS,
            cache_service=cache_service,
            key_builder=DefaultKeyBuilder(),
            source=products_source,
            compressor=ResponseCompressor(JsonSerializer()),
        )
        response = await service.handle(request.query_params, request.headers)
    """

    def __init__(
        self,
        policy: ListEndpointPolicy,
        cache_service: CacheService,
        key_builder: IKeyBuilder,
        source: IListSource,
        compressor: ResponseCompressor,
    ) -> None:
        self._policy = policy
        self._cache = cache_service
        self._key_builder = key_builder
        self._source = source
        self._compressor = compressor

    @property
    def policy(self) -> ListEndpointPolicy:
        return self._policy

    @property
    def entity(self) -> str:
        return self._policy.entity

    def keys_for(self, filters: QueryFilterSpec) -> ListCacheKeys:
        return self._key_builder.build(self._policy.entity, filters)

    async def handle(
        self,
        params: Mapping[str, Any],
        headers: Mapping[str, str],
    ) -> EncodedResponse:
        """Answer a list request.

        Args:
            params: Raw query parameters.
            headers: Request headers (``If-None-Match``, ``Accept-Encoding``).

        Returns:
            A 200, 304, 400 or 500 response. Cache store failures never
            produce an error response.
        """
        started = time.perf_counter()

        try:
            filters = self._policy.parse_filters(params)
        except InvalidFilterError as e:
            return self._compressor.plain(
                400, {"error": str(e), "responseTime": _elapsed_ms(started)}
            )

        try:
            return await self._handle(filters, headers, started)
        except Exception:
            logger.exception("Failed to serve %s list", self.entity)
            return self._compressor.plain(
                500,
                {"error": self._policy.error_message, "responseTime": _elapsed_ms(started)},
            )

    async def _handle(
        self,
        filters: QueryFilterSpec,
        headers: Mapping[str, str],
        started: float,
    ) -> EncodedResponse:
        keys = self.keys_for(filters)
        cached = await self._lookup(keys)
        self._cache.record_lookup(cached is not None)

        db_time = None
        if cached is not None:
            logger.debug("Cache hit for %s", keys.data_key)
            page = cached
            freshness = self._policy.hit_freshness
        else:
            logger.debug("Cache miss for %s", keys.data_key)
            db_started = time.perf_counter()
            page = await self._query(filters)
            db_time = _elapsed_ms(db_started)
            self._populate(keys, page)
            freshness = self._policy.miss_freshness

        etag = generate_etag(page.fingerprint_payload())
        if etag_matches(header_value(headers, "if-none-match"), etag):
            return self._compressor.not_modified(freshness=freshness, etag=etag)

        body = page.to_body(
            cached=cached is not None,
            response_time=_elapsed_ms(started),
            db_time=db_time,
        )
        return await self._compressor.create_response(
            body, headers, freshness=freshness, etag=etag
        )

    async def _lookup(self, keys: ListCacheKeys) -> CachedListResponse | None:
        data, total = await self._cache.get_many(keys.data_key, keys.count_key)
        if data is None or total is None:
            if (data is None) != (total is None):
                logger.debug("Partial hit for %s, treating as miss", keys.data_key)
            return None
        if not isinstance(data, dict) or not isinstance(data.get("data"), list):
            logger.warning("Discarding malformed cache entry %s", keys.data_key)
            return None
        if not isinstance(total, int) or isinstance(total, bool):
            logger.warning("Discarding malformed cache entry %s", keys.count_key)
            return None

        pagination = data.get("pagination") or {}
        try:
            skip, take = int(pagination["skip"]), int(pagination["take"])
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding malformed cache entry %s", keys.data_key)
            return None
        return CachedListResponse(
            data=data["data"], pagination=Pagination(total=total, skip=skip, take=take)
        )

    async def _query(self, filters: QueryFilterSpec) -> CachedListResponse:
        try:
            rows, total = await asyncio.gather(
                self._source.find_many(filters),
                self._source.count(filters),
            )
        except Exception as e:
            raise SourceQueryError(f"{self.entity} query failed: {e}") from e
        return CachedListResponse(
            data=list(rows),
            pagination=Pagination(total=int(total), skip=filters.skip, take=filters.take),
        )

    def _populate(self, keys: ListCacheKeys, page: CachedListResponse) -> None:
        ttl = self._policy.list_ttl
        self._cache.spawn(
            self._cache.set(keys.data_key, page.fingerprint_payload(), ttl),
            name=f"cache-populate:{keys.data_key}",
        )
        self._cache.spawn(
            self._cache.set(keys.count_key, page.pagination.total, ttl),
            name=f"cache-populate:{keys.count_key}",
        )

    async def flush(self, pattern: str | None = None) -> EncodedResponse:
        """Delete cached pages matching ``pattern`` (default: the whole entity).

        Returns:
            200 ``{success, message, pattern}`` or 500 ``{error}``.
        """
        pattern = pattern or f"{self.entity}:*"
        try:
            deleted = await self._cache.delete_pattern(pattern)
        except InvalidationError as e:
            logger.warning("Cache flush failed: %s", e)
            return self._compressor.plain(500, {"error": "Failed to clear cache"})
        return self._compressor.plain(
            200,
            {
                "success": True,
                "message": f"Cleared {deleted} cache entries",
                "pattern": pattern,
            },
        )
