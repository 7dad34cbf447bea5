"""Wiring of every cached list endpoint onto a FastAPI app."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from fastapi import APIRouter, FastAPI

from ledgercache.adapters.fastapi.router import create_list_router
from ledgercache.catalog import ENTITY_DEPENDENCIES, POLICIES
from ledgercache.core.entities.endpoint_policy import ListEndpointPolicy
from ledgercache.core.interfaces.key_builder import IKeyBuilder
from ledgercache.core.interfaces.serializer import ISerializer
from ledgercache.core.interfaces.source import IRecordStore
from ledgercache.core.services.cache_service import CacheService
from ledgercache.core.services.compressor import ResponseCompressor
from ledgercache.core.services.invalidation import InvalidationService
from ledgercache.core.services.list_query import ListQueryService
from ledgercache.core.services.snapshot_cache import SnapshotCache
from ledgercache.infrastructure.key_builders.default import DefaultKeyBuilder
from ledgercache.infrastructure.serializers.json import JsonSerializer


@dataclass
class ListEndpoints:
    """Services created for the mounted endpoints, keyed by entity."""

    services: dict[str, ListQueryService] = field(default_factory=dict)
    snapshots: dict[str, SnapshotCache] = field(default_factory=dict)
    invalidation: InvalidationService | None = None


def mount_list_endpoints(
    app: FastAPI | APIRouter,
    cache_service: CacheService,
    stores: Mapping[str, IRecordStore],
    *,
    prefix: str = "/api",
    policies: Iterable[ListEndpointPolicy] | None = None,
    dependencies: Mapping[str, Iterable[str]] | None = None,
    key_builder: IKeyBuilder | None = None,
    serializer: ISerializer | None = None,
) -> ListEndpoints:
    """Mount ``<prefix>/<entity>`` routes for every policy with a store.

    All endpoints share one compressor, one key builder and one
    invalidation service, so a write on one entity also clears the cached
    pages of entities that embed it.

    Example::

        db = await connect("app.db")
        endpoints = mount_list_endpoints(app, cache_service, create_sources(db))
    """
    policies = list(POLICIES.values() if policies is None else policies)
    key_builder = key_builder or DefaultKeyBuilder()
    compressor = ResponseCompressor(
        serializer or JsonSerializer(), cache_service.config.compression
    )

    mounted = ListEndpoints()
    for policy in policies:
        if policy.entity in stores:
            mounted.snapshots[policy.entity] = SnapshotCache(
                f"{policy.entity}:statistics", policy.stats_ttl
            )

    invalidation = InvalidationService(
        cache_service,
        dependencies=ENTITY_DEPENDENCIES if dependencies is None else dependencies,
        snapshots=mounted.snapshots,
    )
    mounted.invalidation = invalidation

    for policy in policies:
        store = stores.get(policy.entity)
        if store is None:
            continue
        service = ListQueryService(
            policy=policy,
            cache_service=cache_service,
            key_builder=key_builder,
            source=store,
            compressor=compressor,
        )
        mounted.services[policy.entity] = service
        app.include_router(
            create_list_router(
                service, store, invalidation, mounted.snapshots[policy.entity]
            ),
            prefix=f"{prefix}/{policy.entity}",
            tags=[policy.entity],
        )

    return mounted
