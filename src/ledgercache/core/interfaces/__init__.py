"""Core interfaces (Protocol classes) for ledgercache."""

from ledgercache.core.interfaces.cache_backend import ICacheBackend
from ledgercache.core.interfaces.invalidator import IInvalidator
from ledgercache.core.interfaces.key_builder import IKeyBuilder
from ledgercache.core.interfaces.serializer import ISerializer
from ledgercache.core.interfaces.source import IListSource, IRecordStore

__all__ = [
    "ICacheBackend",
    "IKeyBuilder",
    "ISerializer",
    "IInvalidator",
    "IListSource",
    "IRecordStore",
]
