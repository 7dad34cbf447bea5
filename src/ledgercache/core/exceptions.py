"""Exception taxonomy for the read-path cache."""


class LedgerCacheError(Exception):
    """Base class for ledgercache errors."""

    pass


class CacheUnavailableError(LedgerCacheError):
    """The cache store could not be reached or timed out.

    Always recovered locally by treating the lookup as a miss.
    """

    pass


class CacheWriteError(LedgerCacheError):
    """Populating the cache after a miss failed. Logged, never retried."""

    pass


class SourceQueryError(LedgerCacheError):
    """The source of record failed while serving a cache miss."""

    pass


class InvalidationError(LedgerCacheError):
    """Deleting cache entries after a mutation failed.

    Stale entries left behind expire on their own TTL.
    """

    pass


class InvalidFilterError(LedgerCacheError, ValueError):
    """A list request carried a parameter that cannot be normalized."""

    def __init__(self, param: str, value: object) -> None:
        self.param = param
        self.value = value
        super().__init__(f"Invalid value for '{param}': {value!r}")
