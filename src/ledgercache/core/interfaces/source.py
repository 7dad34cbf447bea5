"""Source-of-record interface."""

from collections.abc import Mapping
from typing import Any, Protocol

from ledgercache.core.entities.filters import QueryFilterSpec


class IListSource(Protocol):
    """Contract for the authoritative store behind a list endpoint.

    Only consulted on a cache miss. Both methods receive the same
    normalized filters; ``count`` ignores pagination.
    """

    async def find_many(self, filters: QueryFilterSpec) -> list[dict[str, Any]]:
        """Return one page of rows matching the filters."""
        ...

    async def count(self, filters: QueryFilterSpec) -> int:
        """Return the total number of rows matching the filters."""
        ...


class IRecordStore(IListSource, Protocol):
    """A list source that also accepts writes.

    Write methods return the affected row (after the write for create and
    update, before it for delete) or None when the id does not exist.
    """

    async def create(self, values: Mapping[str, Any]) -> dict[str, Any]:
        ...

    async def update(
        self, record_id: int, values: Mapping[str, Any]
    ) -> dict[str, Any] | None:
        ...

    async def delete(self, record_id: int) -> dict[str, Any] | None:
        ...

    async def statistics(self) -> dict[str, Any]:
        """Return ``{total, byCompany}`` for the whole table."""
        ...
