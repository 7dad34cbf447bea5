"""Tests for core entities."""

from datetime import datetime, timedelta, timezone

import pytest

from ledgercache.core.entities import (
    CacheConfig,
    CacheEntry,
    CachedListResponse,
    CacheScope,
    CompressionConfig,
    EncodedResponse,
    FreshnessPolicy,
    ListCacheKeys,
    Pagination,
)
from ledgercache.catalog import DIGITAL_WALLETS, PRODUCTS


class TestCacheEntry:
    """Tests for CacheEntry entity."""

    def test_create_cache_entry(self) -> None:
        """Test creating a cache entry with factory method."""
        entry = CacheEntry.create(
            key="products:statistics",
            value={"total": 3},
            ttl=timedelta(minutes=5),
        )

        assert entry.key == "products:statistics"
        assert entry.value == {"total": 3}
        assert entry.ttl == timedelta(minutes=5)
        assert entry.created_at is not None

    def test_cache_entry_expires_at(self) -> None:
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        entry = CacheEntry.create("k", "v", ttl=timedelta(minutes=5), now=now)

        assert entry.expires_at == now + timedelta(minutes=5)

    def test_cache_entry_no_ttl(self) -> None:
        """Test cache entry without TTL."""
        entry = CacheEntry.create(key="test:key", value="value")

        assert entry.ttl is None
        assert entry.expires_at is None
        assert not entry.is_expired

    def test_read_at_expiry_is_expired(self) -> None:
        """A read exactly at expires_at already behaves as a miss."""
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        entry = CacheEntry.create("k", "v", ttl=timedelta(seconds=10), now=now)

        assert not entry.is_expired_at(now + timedelta(seconds=9))
        assert entry.is_expired_at(now + timedelta(seconds=10))

    def test_cache_entry_is_expired(self) -> None:
        """Test is_expired property."""
        past_time = datetime.now(timezone.utc) - timedelta(hours=1)
        entry = CacheEntry(
            key="test:key",
            value="value",
            created_at=past_time,
            ttl=timedelta(minutes=5),
        )

        assert entry.is_expired

    def test_cache_entry_immutable(self) -> None:
        """Test that CacheEntry is immutable."""
        entry = CacheEntry.create(key="test", value="value")

        with pytest.raises(AttributeError):
            entry.key = "new_key"  # type: ignore


class TestListCacheKeys:
    def test_entity_pattern(self) -> None:
        keys = ListCacheKeys("products", "products:list:{}", "products:count:{}")

        assert keys.entity_pattern == "products:*"

    def test_unpacks_to_data_and_count(self) -> None:
        keys = ListCacheKeys("products", "products:list:x", "products:count:x")

        data_key, count_key = keys

        assert data_key == "products:list:x"
        assert count_key == "products:count:x"


class TestPagination:
    """hasMore is always skip + take < total."""

    @pytest.mark.parametrize(
        "total,skip,take,has_more",
        [
            (45, 0, 20, True),
            (45, 20, 20, True),
            (45, 40, 20, False),
            (40, 20, 20, False),
            (0, 0, 20, False),
            (21, 0, 20, True),
        ],
    )
    def test_has_more(self, total: int, skip: int, take: int, has_more: bool) -> None:
        pagination = Pagination(total=total, skip=skip, take=take)

        assert pagination.has_more is has_more
        assert pagination.to_dict()["hasMore"] is has_more

    def test_to_dict(self) -> None:
        assert Pagination(total=5, skip=0, take=20).to_dict() == {
            "total": 5,
            "skip": 0,
            "take": 20,
            "hasMore": False,
        }


class TestCachedListResponse:
    def test_body_adds_diagnostics_around_payload(self) -> None:
        page = CachedListResponse(data=[{"id": 1}], pagination=Pagination(1, 0, 20))

        body = page.to_body(cached=True, response_time=3)

        assert body["data"] == [{"id": 1}]
        assert body["cached"] is True
        assert body["cacheHit"] is True
        assert body["responseTime"] == 3
        assert "dbTime" not in body

    def test_fingerprint_excludes_diagnostics(self) -> None:
        page = CachedListResponse(data=[], pagination=Pagination(0, 0, 20))

        assert set(page.fingerprint_payload()) == {"data", "pagination"}

    def test_db_time_included_on_miss(self) -> None:
        page = CachedListResponse(data=[], pagination=Pagination(0, 0, 20))

        body = page.to_body(cached=False, response_time=12, db_time=9)

        assert body["cacheHit"] is False
        assert body["dbTime"] == 9


class TestEncodedResponse:
    def test_not_modified(self) -> None:
        assert EncodedResponse(status=304).not_modified
        assert not EncodedResponse(status=200).not_modified


class TestFreshnessPolicy:
    def test_public_header(self) -> None:
        policy = FreshnessPolicy(300, 600, 300)

        assert policy.to_http_header() == (
            "public, max-age=300, s-maxage=600, stale-while-revalidate=300"
        )

    def test_private_header_omits_s_maxage(self) -> None:
        policy = FreshnessPolicy(60, 600, scope=CacheScope.PRIVATE)

        assert policy.to_http_header() == "private, max-age=60"

    def test_no_store(self) -> None:
        assert FreshnessPolicy.no_store().to_http_header() == "no-store"

    def test_miss_window_shorter_than_hit_window(self) -> None:
        for policy in (PRODUCTS, DIGITAL_WALLETS):
            assert policy.miss_freshness.browser_max_age < policy.hit_freshness.browser_max_age
            assert policy.hit_freshness.browser_max_age < policy.hit_freshness.cdn_max_age


class TestCacheConfig:
    """Tests for CacheConfig entity."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = CacheConfig()

        assert config.enabled is True
        assert config.operation_timeout == 1.0
        assert config.key_prefix == "ledgercache"
        assert config.default_ttl == timedelta(minutes=5)
        assert config.compression == CompressionConfig(threshold=512, level=6)

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValueError):
            CacheConfig(operation_timeout=0)

    def test_compression_level_range(self) -> None:
        with pytest.raises(ValueError):
            CompressionConfig(level=10)

    def test_from_env(self) -> None:
        config = CacheConfig.from_env(
            {
                "LEDGERCACHE_ENABLED": "false",
                "LEDGERCACHE_OPERATION_TIMEOUT": "0.25",
                "LEDGERCACHE_KEY_PREFIX": "acct",
                "LEDGERCACHE_COMPRESSION_THRESHOLD": "1024",
                "LEDGERCACHE_COMPRESSION_LEVEL": "9",
                "REDIS_URL": "redis://cache:6379/1",
            }
        )

        assert config.enabled is False
        assert config.operation_timeout == 0.25
        assert config.key_prefix == "acct"
        assert config.redis_url == "redis://cache:6379/1"
        assert config.compression == CompressionConfig(threshold=1024, level=9)

    def test_from_env_defaults(self) -> None:
        config = CacheConfig.from_env({})

        assert config.enabled is True
        assert config.redis_url is None
        assert config.compression.threshold == 512

    def test_from_env_invalid_number(self) -> None:
        with pytest.raises(ValueError):
            CacheConfig.from_env({"LEDGERCACHE_OPERATION_TIMEOUT": "soon"})
