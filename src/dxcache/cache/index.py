"""Merge index — persisted, recency-ordered list of merge cache entries.

On disk the index is a text file, one record per line::

    <mergeKey> <outputHash> <fileName>

The first line is the most recently used entry. Loading skips any record
that is malformed or whose backing file is gone; saving first evicts the
entries beyond capacity (deleting their files) and then rewrites the file.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Iterator

from dxcache.cache.keys import Hasher, is_valid_merge_key
from dxcache.cache.stats import CacheStats
from dxcache.cache.store import BlobStore
from dxcache.config.defaults import DEFAULT_MAX_MERGE_ENTRIES, INDEX_FILE_NAME, MERGE_FILE_PREFIX
from dxcache.errors.exceptions import CacheIOError, CorruptEntryError
from dxcache.types import MergeEntry

logger = logging.getLogger(__name__)


class MergeIndex:
    """Merge entries keyed by merge key; iteration order is recency (newest first)."""

    def __init__(
        self,
        store: BlobStore,
        hasher: Hasher | None = None,
        max_entries: int = DEFAULT_MAX_MERGE_ENTRIES,
        index_name: str = INDEX_FILE_NAME,
    ) -> None:
        self._store = store
        self._hasher = hasher or Hasher()
        self._max_entries = max_entries
        self._index_name = index_name
        self._entries: OrderedDict[str, MergeEntry] = OrderedDict()
        self._stats = CacheStats()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[MergeEntry]:
        return iter(self._entries.values())

    def __contains__(self, merge_key: object) -> bool:
        return merge_key in self._entries

    def entries(self) -> list[MergeEntry]:
        return list(self._entries.values())

    def get(self, merge_key: str) -> MergeEntry | None:
        return self._entries.get(merge_key)

    def clear(self) -> None:
        self._entries.clear()

    # ── Recency ──

    def promote(self, merge_key: str) -> None:
        """Move an entry to the front."""
        self._entries.move_to_end(merge_key, last=False)

    def _insert_front(self, entry: MergeEntry) -> None:
        self._entries[entry.merge_key] = entry
        self._entries.move_to_end(entry.merge_key, last=False)

    # ── Persistence ──

    def load(self) -> int:
        """Replace the in-memory index with the persisted one.

        Returns the number of entries loaded. Never raises on bad content.
        """
        self._entries.clear()
        if not self._store.exists(self._index_name):
            logger.info("No merge index at %s", self._store.path_for(self._index_name))
            return 0

        try:
            raw = self._store.read(self._index_name)
        except CacheIOError as e:
            logger.warning("Merge index load failed: %s", e)
            self._stats.degraded += 1
            return 0

        for line in raw.decode("utf-8", errors="replace").splitlines():
            if not line:
                continue
            try:
                entry = self._parse_line(line)
            except CorruptEntryError as e:
                logger.warning("Skipping merge index line (%s): %r", e.message, line)
                self._stats.degraded += 1
                continue
            self._entries[entry.merge_key] = entry

        logger.debug("Loaded %d merge index entries", len(self._entries))
        return len(self._entries)

    def _parse_line(self, line: str) -> MergeEntry:
        entry = MergeEntry.from_line(line)
        if not self._store.exists(entry.file_name):
            raise CorruptEntryError("backing file does not exist", line=line)
        if entry.merge_key in self._entries:
            raise CorruptEntryError("duplicate merge key", line=line)
        return entry

    def trim(self, max_entries: int | None = None) -> list[MergeEntry]:
        """Evict entries beyond capacity and delete their backing files."""
        limit = self._max_entries if max_entries is None else max_entries
        evicted = list(self._entries.values())[limit:]
        for entry in evicted:
            del self._entries[entry.merge_key]
            self._store.delete(entry.file_name)
            logger.info("Merge cache entry evicted, file=%s", entry.file_name)
        self._stats.evictions += len(evicted)
        return evicted

    def save(self, max_entries: int | None = None) -> bool:
        """Trim to capacity, then overwrite the index file.

        On a write failure the in-memory index stays authoritative.
        """
        self.trim(max_entries)
        content = "".join(f"{entry.to_line()}\n" for entry in self._entries.values())
        try:
            self._store.write(self._index_name, content.encode("utf-8"))
        except CacheIOError as e:
            logger.warning("Cannot write merge index: %s", e)
            self._stats.degraded += 1
            return False
        return True

    # ── Insertion ──

    def add(self, merge_key: str, data: bytes) -> MergeEntry | None:
        """Record ``data`` as the merge output of ``merge_key``.

        A known key is only moved to the front; its file is not rewritten and
        ``data`` is discarded. Returns None if the backing file cannot be
        written.
        """
        if not is_valid_merge_key(merge_key):
            raise ValueError(f"Invalid merge key of length {len(merge_key)}")

        existing = self._entries.get(merge_key)
        if existing is not None:
            logger.info("Moving merge cache entry to head, mergeKey=%s", merge_key)
            self.promote(merge_key)
            return existing

        try:
            file_name = self._store.create(MERGE_FILE_PREFIX, data)
        except CacheIOError as e:
            logger.warning("Cannot create merge cache file: %s", e)
            self._stats.degraded += 1
            return None

        entry = MergeEntry(
            merge_key=merge_key,
            output_hash=self._hasher.digest(data),
            file_name=file_name,
        )
        self._insert_front(entry)
        logger.info("Merge cache entry added, mergeKey=%s", merge_key)
        return entry

    def stats(self) -> CacheStats:
        return self._stats.model_copy(update={"entries": len(self._entries)})
