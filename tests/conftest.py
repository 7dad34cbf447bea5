"""Pytest configuration for ledgercache tests."""

from datetime import timedelta
from typing import Any

import pytest

from ledgercache import (
    CacheConfig,
    CacheService,
    InMemoryCacheBackend,
    JsonSerializer,
)
from ledgercache.core.exceptions import CacheUnavailableError


class FailingBackend:
    """Cache backend whose every operation fails like an unreachable store."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def _fail(self, operation: str) -> Any:
        self.calls.append(operation)
        raise CacheUnavailableError(f"{operation}: connection refused")

    async def get(self, key: str) -> bytes | None:
        return await self._fail("get")

    async def set(self, key: str, value: bytes, ttl: timedelta | None = None) -> None:
        await self._fail("set")

    async def delete(self, key: str) -> bool:
        return await self._fail("delete")

    async def exists(self, key: str) -> bool:
        return await self._fail("exists")

    async def clear(self) -> None:
        await self._fail("clear")

    async def delete_pattern(self, pattern: str) -> int:
        return await self._fail("delete_pattern")

    async def ping(self) -> bool:
        return False


class ListSourceStub:
    """In-memory list source that records how often it was queried."""

    def __init__(self, rows: list[dict[str, Any]]) -> None:
        self.rows = rows
        self.find_many_calls = 0
        self.count_calls = 0

    async def find_many(self, filters: Any) -> list[dict[str, Any]]:
        self.find_many_calls += 1
        return self.rows[filters.skip : filters.skip + filters.take]

    async def count(self, filters: Any) -> int:
        self.count_calls += 1
        return len(self.rows)


@pytest.fixture
def memory_backend() -> InMemoryCacheBackend:
    return InMemoryCacheBackend(maxsize=100)


@pytest.fixture
def cache_service(memory_backend: InMemoryCacheBackend) -> CacheService:
    """Create a cache service over an in-memory backend."""
    return CacheService(
        backend=memory_backend,
        serializer=JsonSerializer(),
        config=CacheConfig(default_ttl=timedelta(minutes=5)),
    )


@pytest.fixture
def failing_backend() -> FailingBackend:
    return FailingBackend()


@pytest.fixture
def failing_cache_service(failing_backend: FailingBackend) -> CacheService:
    """Create a cache service whose store is always down."""
    return CacheService(
        backend=failing_backend,
        serializer=JsonSerializer(),
        config=CacheConfig(operation_timeout=0.2),
    )


@pytest.fixture
def product_rows() -> list[dict[str, Any]]:
    return [
        {"id": i, "name": f"Product {i}", "price": 10.0 + i, "companyId": 7}
        for i in range(1, 46)
    ]


@pytest.fixture
def product_source(product_rows: list[dict[str, Any]]) -> ListSourceStub:
    return ListSourceStub(product_rows)


@pytest.fixture
def make_source():
    """Factory for list sources over arbitrary rows."""
    return ListSourceStub
