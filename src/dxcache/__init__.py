"""dxcache — content-addressed translation and merge-reuse build cache."""

from dxcache.cache.manager import CacheManager
from dxcache.cache.merge import MergeCache
from dxcache.cache.translation import TranslationCache
from dxcache.types import LibraryBlobInfo, LookupResult, LookupStatus, MergeEntry

__version__ = "0.1.0"

__all__ = [
    "CacheManager",
    "LibraryBlobInfo",
    "LookupResult",
    "LookupStatus",
    "MergeCache",
    "MergeEntry",
    "TranslationCache",
]
