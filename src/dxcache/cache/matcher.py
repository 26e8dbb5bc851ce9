"""Merge matcher — finds a reusable prior merge and orders chunks to merge."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from dxcache.cache.index import MergeIndex
from dxcache.cache.keys import Hasher
from dxcache.cache.stats import CacheStats
from dxcache.cache.store import BlobStore
from dxcache.errors.exceptions import CacheIOError
from dxcache.types import LibraryBlobInfo, MergeEntry

logger = logging.getLogger(__name__)

# Synthetic ordering hints. Real candidate timestamps are expected to be
# larger than both, so a reused composite sorts first and a freshly
# produced output sorts right after it.
REUSED_TIMESTAMP = 0
FRESH_OUTPUT_TIMESTAMP = 1


class MergeMatcher:
    """Reorders merge candidates against the merge index.

    At most one cached composite is reused per call: the first index entry,
    in recency order, whose merge key components are all among the
    candidates and whose backing file still hashes to the recorded value.
    """

    def __init__(self, index: MergeIndex, store: BlobStore, hasher: Hasher | None = None) -> None:
        self._index = index
        self._store = store
        self._hasher = hasher or Hasher()
        self._stats = CacheStats()

    def reorder(
        self,
        candidates: Iterable[LibraryBlobInfo],
        fresh_output: bytes | None = None,
    ) -> list[LibraryBlobInfo]:
        """Return the chunks to merge, in merge order, each with ``hash`` set."""
        by_hash: dict[str, LibraryBlobInfo] = {}
        for info in candidates:
            digest = self._hasher.digest(info.data)
            # A colliding hash replaces the earlier candidate
            by_hash[digest] = info.model_copy(update={"hash": digest})

        if fresh_output is not None:
            digest = self._hasher.digest(fresh_output)
            by_hash[digest] = LibraryBlobInfo(
                data=fresh_output, timestamp=FRESH_OUTPUT_TIMESTAMP, hash=digest
            )

        ordered: list[LibraryBlobInfo] = []
        reused = self._take_reusable(by_hash)
        if reused is not None:
            ordered.append(reused)
        ordered.extend(by_hash.values())

        # Stable: equal timestamps keep insertion order
        ordered.sort(key=lambda info: (not info.reused, info.timestamp))
        return ordered

    def _take_reusable(self, by_hash: dict[str, LibraryBlobInfo]) -> LibraryBlobInfo | None:
        """Consume the candidates covered by the first valid matching entry."""
        for entry in self._index.entries():
            components = entry.components
            if not all(h in by_hash for h in components):
                continue

            logger.info("Found a matching merge cache entry, mergeKey=%s", entry.merge_key)
            data = self._read_verified(entry)
            if data is None:
                continue

            for h in components:
                by_hash.pop(h, None)
            self._index.promote(entry.merge_key)
            self._stats.hits += 1
            return LibraryBlobInfo(
                data=data, timestamp=REUSED_TIMESTAMP, hash=entry.merge_key, reused=True
            )

        self._stats.misses += 1
        return None

    def _read_verified(self, entry: MergeEntry) -> bytes | None:
        try:
            data = self._store.read(entry.file_name)
        except CacheIOError as e:
            logger.warning("Cannot read merge cache file, ignoring: %s", e)
            self._stats.degraded += 1
            return None

        if self._hasher.digest(data) != entry.output_hash:
            logger.warning("Merge cache file hash does not match, ignoring %s", entry.file_name)
            self._stats.degraded += 1
            return None
        return data

    def stats(self) -> CacheStats:
        return self._stats.model_copy()
