"""Cache key value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ListCacheKeys:
    """The pair of keys caching one page of a list endpoint.

    ``data_key`` holds the page rows and ``count_key`` the total row
    count. Both derive from the same canonical filter representation.
    """

    entity: str
    data_key: str
    count_key: str

    @property
    def entity_pattern(self) -> str:
        """Glob pattern covering every cached variant of the entity."""
        return f"{self.entity}:*"

    def __iter__(self):
        return iter((self.data_key, self.count_key))
