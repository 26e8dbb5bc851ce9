"""Merge-reuse cache — facade over the merge index and matcher."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from dxcache.cache.index import MergeIndex
from dxcache.cache.keys import Hasher, join_merge_key
from dxcache.cache.matcher import MergeMatcher
from dxcache.cache.stats import CacheStats
from dxcache.cache.store import BlobStore
from dxcache.config.defaults import DEFAULT_MAX_MERGE_ENTRIES
from dxcache.types import LibraryBlobInfo, MergeEntry


class MergeCache:
    """Remembers merged outputs and reuses them for overlapping input sets.

    Typical use within one build step::

        chunks = cache.reorder(candidates)
        output = merger([c.data for c in chunks])
        cache.add(cache.merge_key(chunks), output)
        ...
        cache.save()

    The index is loaded once on construction and only persisted by ``save``.
    """

    def __init__(
        self,
        store: BlobStore,
        hasher: Hasher | None = None,
        max_entries: int = DEFAULT_MAX_MERGE_ENTRIES,
        enabled: bool = True,
    ) -> None:
        self._hasher = hasher or Hasher()
        self._enabled = enabled
        self._index = MergeIndex(store, self._hasher, max_entries=max_entries)
        self._matcher = MergeMatcher(self._index, store, self._hasher)
        if enabled:
            self._index.load()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def index(self) -> MergeIndex:
        return self._index

    def entries(self) -> list[MergeEntry]:
        return self._index.entries()

    def reorder(
        self,
        candidates: Iterable[LibraryBlobInfo],
        fresh_output: bytes | None = None,
    ) -> list[LibraryBlobInfo]:
        """Order candidates for merging, splicing in at most one reused composite."""
        return self._matcher.reorder(candidates, fresh_output)

    @staticmethod
    def merge_key(chunks: Sequence[LibraryBlobInfo]) -> str:
        """Merge key of the output produced by merging ``chunks`` in order."""
        return join_merge_key(chunk.hash for chunk in chunks)

    def add(self, merge_key: str, data: bytes) -> MergeEntry | None:
        if not self._enabled:
            return None
        return self._index.add(merge_key, data)

    def save(self) -> bool:
        if not self._enabled:
            return False
        return self._index.save()

    def clear(self) -> int:
        """Delete every entry and its backing file, then persist the empty index."""
        entries = self._index.entries()
        self._index.trim(0)
        if self._enabled:
            self._index.save()
        return len(entries)

    def stats(self) -> CacheStats:
        return self._index.stats() + self._matcher.stats()
