"""Cache configuration entity."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta


@dataclass(frozen=True)
class CompressionConfig:
    """Response compression settings.

    Bodies smaller than ``threshold`` bytes are sent as-is; larger bodies
    are compressed at ``level`` (1-9) with the best encoding the client
    accepts.
    """

    threshold: int = 512
    level: int = 6

    def __post_init__(self) -> None:
        if self.threshold < 0:
            raise ValueError("compression threshold must be >= 0")
        if not 1 <= self.level <= 9:
            raise ValueError("compression level must be between 1 and 9")


@dataclass
class CacheConfig:
    """Cache configuration.

    Provides configuration options for the read-path cache, including
    the store timeout, key namespace and compression defaults.

    Fail-open:
        Every cache store call is bounded by ``operation_timeout``. A call
        that times out or errors is treated as a miss (reads) or skipped
        (writes), so the application stays correct with the store down.
    """

    enabled: bool = True
    operation_timeout: float = 1.0
    key_prefix: str = "ledgercache"
    redis_url: str | None = None
    default_ttl: timedelta | None = None
    compression: CompressionConfig = field(default_factory=CompressionConfig)

    def __post_init__(self) -> None:
        """Set default TTL if not provided."""
        if self.default_ttl is None:
            self.default_ttl = timedelta(minutes=5)
        if self.operation_timeout <= 0:
            raise ValueError("operation_timeout must be positive")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CacheConfig":
        """Build a configuration from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            A new CacheConfig.

        Raises:
            ValueError: If a numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        defaults = CompressionConfig()

        return cls(
            enabled=env.get("LEDGERCACHE_ENABLED", "true").lower() in ("1", "true", "yes"),
            operation_timeout=float(env.get("LEDGERCACHE_OPERATION_TIMEOUT", "1.0")),
            key_prefix=env.get("LEDGERCACHE_KEY_PREFIX", "ledgercache"),
            redis_url=env.get("REDIS_URL") or None,
            compression=CompressionConfig(
                threshold=int(
                    env.get("LEDGERCACHE_COMPRESSION_THRESHOLD", defaults.threshold)
                ),
                level=int(env.get("LEDGERCACHE_COMPRESSION_LEVEL", defaults.level)),
            ),
        )
