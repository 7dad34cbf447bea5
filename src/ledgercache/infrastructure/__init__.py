"""Infrastructure layer implementations for ledgercache."""

from ledgercache.infrastructure.backends import InMemoryCacheBackend
from ledgercache.infrastructure.key_builders import DefaultKeyBuilder
from ledgercache.infrastructure.serializers import JsonSerializer

__all__ = [
    "InMemoryCacheBackend",
    "DefaultKeyBuilder",
    "JsonSerializer",
]
