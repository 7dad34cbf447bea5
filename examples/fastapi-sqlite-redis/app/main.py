"""FastAPI + SQLite + Redis ledgercache example."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import database
from ledgercache import CacheConfig, CacheService, JsonSerializer
from ledgercache.adapters.fastapi import mount_list_endpoints
from ledgercache.infrastructure.backends.redis_backend import RedisCacheBackend
from ledgercache.infrastructure.sources.sqlite import create_sources

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("app")

cache_config = CacheConfig.from_env()

cache_backend = RedisCacheBackend(
    redis_url=cache_config.redis_url or "redis://localhost:6379",
    key_prefix=cache_config.key_prefix,
    socket_timeout=cache_config.operation_timeout,
)

cache_service = CacheService(
    backend=cache_backend,
    serializer=JsonSerializer(),
    config=cache_config,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Opening SQLite database at %s", database.DB_PATH)
    db = await database.get_db()
    await database.seed(db)
    mount_list_endpoints(app, cache_service, create_sources(db))
    logger.info("Cache store at %s (enabled=%s)", cache_config.redis_url, cache_config.enabled)
    yield
    logger.info("Draining background cache tasks")
    await cache_service.drain()
    await cache_backend.close()
    await db.close()


app = FastAPI(
    title="ledgercache example",
    description="Cached list endpoints backed by SQLite and Redis",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["ETag", "X-Compression-Ratio"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    redis_ok = await cache_service.ping()
    return {
        "status": "healthy",
        "redis": "healthy" if redis_ok else "unavailable",
        "cache_enabled": cache_config.enabled,
    }


@app.get("/cache/stats")
async def cache_stats():
    """Get cache statistics."""
    return {
        "stats": cache_service.stats,
        "pending": cache_service.pending,
        "config": {
            "enabled": cache_config.enabled,
            "operation_timeout": cache_config.operation_timeout,
            "key_prefix": cache_config.key_prefix,
            "compression_threshold": cache_config.compression.threshold,
            "compression_level": cache_config.compression.level,
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
