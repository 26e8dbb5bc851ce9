"""Cache manager — owns the translation and merge caches for one cache dir."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from dxcache.cache.keys import Hasher
from dxcache.cache.merge import MergeCache
from dxcache.cache.stats import CacheStats
from dxcache.cache.store import BlobStore
from dxcache.cache.translation import TranslationCache
from dxcache.config.defaults import (
    DEFAULT_CACHE_DIR,
    DEFAULT_MAX_MERGE_ENTRIES,
    DEFAULT_MAX_TRANSLATION_ENTRIES,
    DEFAULT_TRANSLATION_PREFIX,
    LOCK_FILE_NAME,
    MERGE_FILE_PREFIX,
)
from dxcache.config.schema import CacheSettings

logger = logging.getLogger(__name__)


class CacheManager:
    """Both cache layers over one directory.

    Build one per process and pass it to whatever needs caching. ``close``
    persists the merge index and trims the translation cache.
    """

    def __init__(
        self,
        cache_dir: Path | None = None,
        max_translation_entries: int = DEFAULT_MAX_TRANSLATION_ENTRIES,
        max_merge_entries: int = DEFAULT_MAX_MERGE_ENTRIES,
        translation_prefix: str = DEFAULT_TRANSLATION_PREFIX,
        enabled: bool = True,
    ) -> None:
        self._enabled = enabled
        self._hasher = Hasher()
        self._store = BlobStore(Path(cache_dir) if cache_dir else DEFAULT_CACHE_DIR)
        if enabled:
            self._store.ensure()
        self._translation = TranslationCache(
            self._store,
            self._hasher,
            prefix=translation_prefix,
            max_entries=max_translation_entries,
            enabled=enabled,
        )
        self._merge = MergeCache(
            self._store, self._hasher, max_entries=max_merge_entries, enabled=enabled
        )

    @classmethod
    def from_settings(cls, settings: CacheSettings) -> CacheManager:
        return cls(
            cache_dir=settings.cache_dir,
            max_translation_entries=settings.max_translation_entries,
            max_merge_entries=settings.max_merge_entries,
            translation_prefix=settings.translation_prefix,
            enabled=not settings.cache_disabled,
        )

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> CacheManager:
        return cls.from_settings(CacheSettings.from_config(config))

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def cache_dir(self) -> Path:
        return self._store.root

    @property
    def lock_path(self) -> Path:
        """Reserved for cross-process coordination; never acquired."""
        return self._store.path_for(LOCK_FILE_NAME)

    @property
    def translation(self) -> TranslationCache:
        return self._translation

    @property
    def merge(self) -> MergeCache:
        return self._merge

    def stats(self) -> CacheStats:
        """Translation stats plus merge stats, including on-disk blob size."""
        merge_stats = self._merge.stats()
        merge_size = 0
        for path in self._store.list_files(MERGE_FILE_PREFIX):
            try:
                merge_size += path.stat().st_size
            except OSError:
                continue
        merge_stats = merge_stats.model_copy(update={"size_mb": merge_size / (1024 * 1024)})
        return self._translation.stats() + merge_stats

    def trim(self) -> int:
        """Apply both capacities now. Returns the number of entries evicted."""
        if not self._enabled:
            return 0
        evicted = len(self._merge.index.trim())
        self._merge.save()
        return evicted + self._translation.trim()

    def clear(self) -> int:
        """Delete every cached file. Returns the number of entries removed."""
        removed = self._translation.clear() + self._merge.clear()
        # Orphaned blobs left behind by a lost index write
        for path in self._store.list_files(MERGE_FILE_PREFIX):
            self._store.delete(path.name)
        logger.info("Cache cleared, %d entries removed", removed)
        return removed

    def close(self) -> None:
        if not self._enabled:
            return
        self._merge.save()
        self._translation.trim()
