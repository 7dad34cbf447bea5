"""Tests for CacheService."""

import asyncio
import logging
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from ledgercache import (
    CacheConfig,
    CacheService,
    InMemoryCacheBackend,
    JsonSerializer,
)
from ledgercache.core.exceptions import CacheUnavailableError, InvalidationError


class TestCacheService:
    """Tests for CacheService."""

    @pytest.mark.asyncio
    async def test_set_and_get(self, cache_service: CacheService) -> None:
        """Test caching and retrieving a value."""
        page = {"data": [{"id": 1}], "pagination": {"total": 1, "skip": 0, "take": 20}}

        stored = await cache_service.set("products:list:x", page)
        cached = await cache_service.get("products:list:x")

        assert stored is True
        assert cached == page

    @pytest.mark.asyncio
    async def test_cache_miss(self, cache_service: CacheService) -> None:
        """Test cache miss returns None."""
        assert await cache_service.get("products:list:missing") is None

    @pytest.mark.asyncio
    async def test_get_many_preserves_order(self, cache_service: CacheService) -> None:
        await cache_service.set("a", [1])
        await cache_service.set("c", 3)

        assert await cache_service.get_many("a", "b", "c") == [[1], None, 3]

    @pytest.mark.asyncio
    async def test_set_uses_given_ttl(self) -> None:
        backend = AsyncMock()
        service = CacheService(backend, JsonSerializer())

        await service.set("k", {"x": 1}, ttl=timedelta(minutes=15))

        backend.set.assert_awaited_once_with("k", b'{"x":1}', timedelta(minutes=15))

    @pytest.mark.asyncio
    async def test_set_defaults_to_config_ttl(self) -> None:
        backend = AsyncMock()
        service = CacheService(
            backend, JsonSerializer(), CacheConfig(default_ttl=timedelta(seconds=42))
        )

        await service.set("k", 1)

        backend.set.assert_awaited_once_with("k", b"1", timedelta(seconds=42))

    @pytest.mark.asyncio
    async def test_disabled_cache(self, memory_backend: InMemoryCacheBackend) -> None:
        """A disabled cache never stores and always misses."""
        service = CacheService(memory_backend, JsonSerializer(), CacheConfig(enabled=False))

        assert await service.set("k", 1) is False
        assert await service.get("k") is None
        assert len(memory_backend) == 0

    @pytest.mark.asyncio
    async def test_delete_pattern(self, cache_service: CacheService) -> None:
        await cache_service.set("products:list:a", [])
        await cache_service.set("products:count:a", 0)
        await cache_service.set("vendors:list:a", [])

        deleted = await cache_service.delete_pattern("products:*")

        assert deleted == 2
        assert await cache_service.get("vendors:list:a") == []

    @pytest.mark.asyncio
    async def test_stats(self, cache_service: CacheService) -> None:
        cache_service.record_lookup(True)
        cache_service.record_lookup(False)
        cache_service.record_lookup(False)

        assert cache_service.stats == {"hits": 1, "misses": 2, "errors": 0, "total": 3}

    @pytest.mark.asyncio
    async def test_clear(self, cache_service: CacheService) -> None:
        await cache_service.set("k", 1)
        cache_service.record_lookup(True)

        await cache_service.clear()

        assert await cache_service.get("k") is None
        assert cache_service.stats["total"] == 0

    @pytest.mark.asyncio
    async def test_ping(self, cache_service: CacheService) -> None:
        assert await cache_service.ping() is True

    @pytest.mark.asyncio
    async def test_delete_and_exists(self, cache_service: CacheService) -> None:
        await cache_service.set("k", 1)

        assert await cache_service.exists("k") is True
        assert await cache_service.delete("k") is True
        assert await cache_service.exists("k") is False
        assert await cache_service.delete("k") is False


class TestFailOpen:
    """Store failures never escape the read path."""

    @pytest.mark.asyncio
    async def test_get_on_unavailable_store_is_miss(
        self, failing_cache_service: CacheService, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            assert await failing_cache_service.get("products:list:x") is None

        assert "Cache unavailable" in caplog.text
        assert failing_cache_service.stats["errors"] == 1

    @pytest.mark.asyncio
    async def test_set_on_unavailable_store_returns_false(
        self, failing_cache_service: CacheService
    ) -> None:
        assert await failing_cache_service.set("k", 1) is False

    @pytest.mark.asyncio
    async def test_slow_store_times_out_as_miss(self) -> None:
        async def stall(key: str) -> bytes:
            await asyncio.sleep(5)
            return b"1"

        backend = AsyncMock()
        backend.get.side_effect = stall
        service = CacheService(backend, JsonSerializer(), CacheConfig(operation_timeout=0.05))

        assert await service.get("k") is None

    @pytest.mark.asyncio
    async def test_driver_error_is_miss(self) -> None:
        backend = AsyncMock()
        backend.get.side_effect = ConnectionError("reset by peer")
        service = CacheService(backend, JsonSerializer())

        assert await service.get("k") is None

    @pytest.mark.asyncio
    async def test_corrupt_payload_is_miss(self, memory_backend: InMemoryCacheBackend) -> None:
        service = CacheService(memory_backend, JsonSerializer())
        await memory_backend.set("k", b"{not json")

        assert await service.get("k") is None

    @pytest.mark.asyncio
    async def test_delete_pattern_failure_raises_invalidation_error(
        self, failing_cache_service: CacheService
    ) -> None:
        with pytest.raises(InvalidationError):
            await failing_cache_service.delete_pattern("products:*")

    @pytest.mark.asyncio
    async def test_ping_on_unavailable_store(self, failing_cache_service: CacheService) -> None:
        assert await failing_cache_service.ping() is False

    @pytest.mark.asyncio
    async def test_clear_on_unavailable_store_raises(
        self, failing_cache_service: CacheService
    ) -> None:
        with pytest.raises(CacheUnavailableError):
            await failing_cache_service.clear()

    @pytest.mark.asyncio
    async def test_slow_clear_times_out(self) -> None:
        async def stall() -> None:
            await asyncio.sleep(5)

        backend = AsyncMock()
        backend.clear.side_effect = stall
        service = CacheService(backend, JsonSerializer(), CacheConfig(operation_timeout=0.05))

        with pytest.raises(CacheUnavailableError, match="timed out"):
            await service.clear()
        assert service.stats["errors"] == 1


class TestBackgroundTasks:
    @pytest.mark.asyncio
    async def test_drain_waits_for_spawned_work(self, cache_service: CacheService) -> None:
        cache_service.spawn(cache_service.set("k", 1), name="populate")

        assert cache_service.pending == 1
        await cache_service.drain()

        assert cache_service.pending == 0
        assert await cache_service.get("k") == 1

    @pytest.mark.asyncio
    async def test_failed_task_is_logged(
        self, cache_service: CacheService, caplog: pytest.LogCaptureFixture
    ) -> None:
        async def boom() -> None:
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR):
            cache_service.spawn(boom(), name="exploding")
            await cache_service.drain()

        assert "Background task exploding failed" in caplog.text
