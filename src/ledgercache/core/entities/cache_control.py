"""HTTP freshness entities.

A list response is cached twice outside the application: by the browser
(``max-age``) and by shared caches such as a CDN (``s-maxage``). Each
entity declares one window for cache hits and a shorter one for freshly
queried data.
"""

from dataclasses import dataclass
from enum import Enum


class CacheScope(Enum):
    """Cache scope for cache control.

    PUBLIC: Response can be cached globally (CDN, shared cache).
    PRIVATE: Response contains user-specific data, only cache per-user.
    """

    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


@dataclass(frozen=True)
class FreshnessPolicy:
    """Cache-Control directives for one kind of response.

    Attributes:
        browser_max_age: ``max-age`` in seconds.
        cdn_max_age: ``s-maxage`` in seconds (ignored for PRIVATE scope).
        stale_while_revalidate: ``stale-while-revalidate`` in seconds.
        scope: PUBLIC or PRIVATE.
    """

    browser_max_age: int
    cdn_max_age: int
    stale_while_revalidate: int = 0
    scope: CacheScope = CacheScope.PUBLIC

    @property
    def is_cacheable(self) -> bool:
        """Check if the response may be stored by any cache."""
        return self.browser_max_age > 0 or (
            self.scope == CacheScope.PUBLIC and self.cdn_max_age > 0
        )

    def to_http_header(self) -> str:
        """Generate HTTP Cache-Control header value."""
        if not self.is_cacheable:
            return "no-store"

        if self.scope == CacheScope.PRIVATE:
            directives = ["private", f"max-age={self.browser_max_age}"]
        else:
            directives = [
                "public",
                f"max-age={self.browser_max_age}",
                f"s-maxage={self.cdn_max_age}",
            ]

        if self.stale_while_revalidate > 0:
            directives.append(f"stale-while-revalidate={self.stale_while_revalidate}")

        return ", ".join(directives)

    @classmethod
    def no_store(cls) -> "FreshnessPolicy":
        """Create a policy that disables caching."""
        return cls(browser_max_age=0, cdn_max_age=0)
