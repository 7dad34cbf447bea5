"""List response entities."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Pagination:
    """Pagination metadata of one list page.

    ``has_more`` is always derived from the other three values.
    """

    total: int
    skip: int
    take: int

    @property
    def has_more(self) -> bool:
        return self.skip + self.take < self.total

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "skip": self.skip,
            "take": self.take,
            "hasMore": self.has_more,
        }


@dataclass(frozen=True)
class CachedListResponse:
    """The cacheable part of a list response: rows plus pagination.

    This is what the ETag fingerprints. Per-request diagnostics
    (``cached``, ``responseTime``) are added around it by ``to_body``.
    """

    data: list[Any]
    pagination: Pagination

    def fingerprint_payload(self) -> dict[str, Any]:
        """Return the payload an ETag is computed from."""
        return {"data": self.data, "pagination": self.pagination.to_dict()}

    def to_body(
        self,
        *,
        cached: bool,
        response_time: int,
        db_time: int | None = None,
    ) -> dict[str, Any]:
        """Build the JSON body of a 200 response."""
        body = self.fingerprint_payload()
        body["cached"] = cached
        body["cacheHit"] = cached
        body["responseTime"] = response_time
        if db_time is not None:
            body["dbTime"] = db_time
        return body


@dataclass
class EncodedResponse:
    """A framework-neutral HTTP response ready to be sent.

    Adapters translate it into their own response type.
    """

    status: int
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def not_modified(self) -> bool:
        return self.status == 304
