"""FastAPI router for one cached list endpoint."""

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Request
from starlette.responses import Response

from ledgercache.core.entities.list_response import EncodedResponse
from ledgercache.core.interfaces.invalidator import IInvalidator
from ledgercache.core.interfaces.source import IRecordStore
from ledgercache.core.services.list_query import ListQueryService
from ledgercache.core.services.snapshot_cache import SnapshotCache
from ledgercache.decorators import invalidates

logger = logging.getLogger(__name__)


def to_starlette(response: EncodedResponse) -> Response:
    """Convert a framework-neutral response into a Starlette response."""
    return Response(
        content=response.body,
        status_code=response.status,
        headers=response.headers,
    )


def create_list_router(
    service: ListQueryService,
    store: IRecordStore,
    invalidation: IInvalidator,
    snapshot: SnapshotCache | None = None,
    **router_kwargs: Any,
) -> APIRouter:
    """Build the routes of one entity endpoint.

    Routes:
        ``GET ""``: cached list read.
        ``DELETE ""``: flush cached pages (``?pattern=<glob>``).
        ``GET "/statistics"``: ``{total, byCompany}`` from the snapshot cache.
        ``POST ""``, ``PATCH "/{id}"``, ``DELETE "/{id}"``: writes that
        schedule invalidation once they succeed.

    Args:
        service: Read-path service for the entity.
        store: Source of record, also used for writes.
        invalidation: Invalidator scheduled after each write.
        snapshot: Statistics snapshot; statistics are computed on every
            request when omitted.
        **router_kwargs: Passed to ``APIRouter`` (e.g. ``prefix``, ``tags``).

    Example:
        app.include_router(
            create_list_router(products, products_store, invalidation, stats),
            prefix="/api/products",
        )
    """
    router = APIRouter(**router_kwargs)
    entity = service.entity

    @invalidates(invalidation, entity)
    async def create_record(values: dict[str, Any]) -> dict[str, Any]:
        return await store.create(values)

    @invalidates(invalidation, entity)
    async def update_record(record_id: int, values: dict[str, Any]) -> dict[str, Any] | None:
        return await store.update(record_id, values)

    @invalidates(invalidation, entity)
    async def delete_record(record_id: int) -> dict[str, Any] | None:
        return await store.delete(record_id)

    @router.get("")
    async def list_records(request: Request) -> Response:
        response = await service.handle(request.query_params, request.headers)
        return to_starlette(response)

    @router.delete("")
    async def flush_cache(pattern: str | None = None) -> Response:
        return to_starlette(await service.flush(pattern))

    @router.get("/statistics")
    async def statistics() -> dict[str, Any]:
        if snapshot is None:
            return await store.statistics()
        return await snapshot.get_or_compute(store.statistics)

    @router.post("", status_code=201)
    async def create(values: dict[str, Any] = Body(...)) -> dict[str, Any]:
        try:
            return await create_record(values)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    @router.patch("/{record_id}")
    async def update(record_id: int, values: dict[str, Any] = Body(...)) -> dict[str, Any]:
        try:
            record = await update_record(record_id, values)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        if record is None:
            raise HTTPException(status_code=404, detail=f"{entity} {record_id} not found")
        return record

    @router.delete("/{record_id}")
    async def delete(record_id: int) -> dict[str, Any]:
        record = await delete_record(record_id)
        if record is None:
            raise HTTPException(status_code=404, detail=f"{entity} {record_id} not found")
        return {"success": True, "deleted": record}

    return router
