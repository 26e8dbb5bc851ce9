"""Error handling — exception hierarchy for cache failures."""

from dxcache.errors.exceptions import (
    CacheIOError,
    CorruptEntryError,
    DxCacheError,
    HashUnavailableError,
)

__all__ = [
    "DxCacheError",
    "CacheIOError",
    "CorruptEntryError",
    "HashUnavailableError",
]
