"""Cache subsystem — translation cache and merge-reuse cache over one directory."""

from dxcache.cache.index import MergeIndex
from dxcache.cache.keys import Hasher, hash_blob, join_merge_key, split_merge_key
from dxcache.cache.manager import CacheManager
from dxcache.cache.matcher import MergeMatcher
from dxcache.cache.merge import MergeCache
from dxcache.cache.stats import CacheStats
from dxcache.cache.store import BlobStore, ensure_cache_dir
from dxcache.cache.translation import TranslationCache

__all__ = [
    "BlobStore",
    "CacheManager",
    "CacheStats",
    "Hasher",
    "MergeCache",
    "MergeIndex",
    "MergeMatcher",
    "TranslationCache",
    "ensure_cache_dir",
    "hash_blob",
    "join_merge_key",
    "split_merge_key",
]
