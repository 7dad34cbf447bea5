"""Typed list filters.

A ``QueryFilterSpec`` is the normalized form of a list request's query
parameters. The same object drives the source-of-record query and the
cache key, so normalization (defaults, type coercion, clamping) happens
exactly once, here.

Entity-specific filters are explicit optional fields on subclasses. Each
field carries its query-parameter name and parser in its metadata.
"""

from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

from ledgercache.core.exceptions import InvalidFilterError

MAX_TAKE = 100


class SortDirection(str, Enum):
    """Sort direction for list queries."""

    ASC = "asc"
    DESC = "desc"


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_int(param: str, value: Any) -> int | None:
    """Parse an integer parameter; empty means not given."""
    text = _text(value)
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        raise InvalidFilterError(param, value) from None


def parse_company(param: str, value: Any) -> int | None:
    """Parse the owning-company filter. ``"all"`` means no filter."""
    if _text(value).lower() in ("", "all"):
        return None
    return parse_int(param, value)


def parse_bool(param: str, value: Any) -> bool | None:
    """Parse a ``true``/``false`` flag; empty means not given."""
    if isinstance(value, bool):
        return value
    text = _text(value).lower()
    if not text:
        return None
    if text in ("true", "1"):
        return True
    if text in ("false", "0"):
        return False
    raise InvalidFilterError(param, value)


def parse_str(param: str, value: Any) -> str | None:
    return _text(value) or None


def parse_upper(param: str, value: Any) -> str | None:
    text = _text(value)
    return text.upper() if text else None


def choice(*allowed: str, all_value: str | None = "all") -> Callable[[str, Any], str | None]:
    """Build a parser accepting one of ``allowed`` (case-insensitive).

    ``all_value`` and the empty string both mean "no filter".
    """
    lowered = {a.lower(): a for a in allowed}

    def parse(param: str, value: Any) -> str | None:
        text = _text(value).lower()
        if not text or text == all_value:
            return None
        if text not in lowered:
            raise InvalidFilterError(param, value)
        return lowered[text]

    return parse


def filter_field(param: str, parse: Callable[[str, Any], Any]) -> Any:
    """Declare an optional entity filter bound to a query parameter."""
    return field(default=None, metadata={"param": param, "parse": parse})


@dataclass(frozen=True)
class QueryFilterSpec:
    """Filters shared by every list endpoint.

    Attributes:
        skip: Rows to skip (>= 0).
        take: Page size (1..MAX_TAKE).
        search: Free-text search, empty for none.
        company: Owning company id, None for all companies.
        sort_field: Public name of the sort column.
        sort_direction: ASC or DESC.
    """

    skip: int = 0
    take: int = 20
    search: str = ""
    company: int | None = None
    sort_field: str = "createdAt"
    sort_direction: SortDirection = SortDirection.DESC

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        *,
        default_take: int = 20,
        sort_fields: Collection[str] = ("createdAt",),
        default_sort_field: str = "createdAt",
    ) -> "QueryFilterSpec":
        """Normalize raw query parameters.

        Missing values take their documented defaults, numbers given as
        strings are coerced, ``take`` is clamped to 1..MAX_TAKE and an
        unknown sort field falls back to ``default_sort_field``.

        Args:
            params: Raw query parameters (strings or already-typed values).
            default_take: Page size when ``take`` is absent.
            sort_fields: Sort fields the endpoint accepts.
            default_sort_field: Sort field used when absent or unknown.

        Returns:
            A normalized filter spec of this class.

        Raises:
            InvalidFilterError: If a parameter cannot be parsed.
        """
        skip = parse_int("skip", params.get("skip"))
        take = parse_int("take", params.get("take"))
        sort_field = _text(params.get("sortField"))
        direction = _text(params.get("sortDirection")).lower()

        values: dict[str, Any] = {
            "skip": max(skip or 0, 0),
            "take": min(max(default_take if take is None else take, 1), MAX_TAKE),
            "search": _text(params.get("search")),
            "company": parse_company("company", params.get("company")),
            "sort_field": sort_field if sort_field in sort_fields else default_sort_field,
            "sort_direction": (
                SortDirection.ASC if direction == "asc" else SortDirection.DESC
            ),
        }

        for f in fields(cls):
            param = f.metadata.get("param")
            if param is not None:
                values[f.name] = f.metadata["parse"](param, params.get(param))

        return cls(**values)

    def canonical(self) -> dict[str, Any]:
        """Return the filters as a plain dict keyed by parameter name.

        Used for cache-key derivation; equal filters produce equal dicts.
        """
        result: dict[str, Any] = {
            "skip": self.skip,
            "take": self.take,
            "search": self.search,
            "company": "all" if self.company is None else self.company,
            "sortField": self.sort_field,
            "sortDirection": self.sort_direction.value,
        }
        for f in fields(self):
            param = f.metadata.get("param")
            if param is not None:
                value = getattr(self, f.name)
                result[param] = "" if value is None else value
        return result


@dataclass(frozen=True)
class ProductFilters(QueryFilterSpec):
    is_active: bool | None = filter_field("isActive", parse_bool)
    currency: str | None = filter_field("currency", parse_upper)


@dataclass(frozen=True)
class VendorFilters(QueryFilterSpec):
    status: str | None = filter_field("status", choice("active", "inactive"))


@dataclass(frozen=True)
class ClientFilters(QueryFilterSpec):
    status: str | None = filter_field(
        "status", choice("ACTIVE", "INACTIVE", "LEAD", "ARCHIVED")
    )
    industry: str | None = filter_field("industry", parse_str)


@dataclass(frozen=True)
class DigitalWalletFilters(QueryFilterSpec):
    wallet_type: str | None = filter_field("walletType", parse_upper)
    currency: str | None = filter_field("currency", parse_upper)
