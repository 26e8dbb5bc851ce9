"""Translation cache — one input blob to one output blob, keyed by input hash."""

from __future__ import annotations

import logging
from pathlib import Path

from dxcache.cache.keys import Hasher
from dxcache.cache.stats import CacheStats
from dxcache.cache.store import BlobStore
from dxcache.config.defaults import (
    DEFAULT_MAX_TRANSLATION_ENTRIES,
    DEFAULT_TRANSLATION_PREFIX,
    validate_translation_prefix,
)
from dxcache.errors.exceptions import CacheIOError
from dxcache.types import LookupResult

logger = logging.getLogger(__name__)


class TranslationCache:
    """Files named ``<prefix>-<hash(input)>`` holding the translated output.

    There is no index: the file's mtime is the only recency signal, and
    ``trim`` keeps the newest ``max_entries`` files.
    """

    def __init__(
        self,
        store: BlobStore,
        hasher: Hasher | None = None,
        prefix: str = DEFAULT_TRANSLATION_PREFIX,
        max_entries: int = DEFAULT_MAX_TRANSLATION_ENTRIES,
        enabled: bool = True,
    ) -> None:
        self._store = store
        self._hasher = hasher or Hasher()
        self._prefix = validate_translation_prefix(prefix)
        self._max_entries = max_entries
        self._enabled = enabled
        self._stats = CacheStats()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def entry_name(self, input_blob: bytes) -> str:
        return f"{self._prefix}-{self._hasher.digest(input_blob)}"

    def lookup(self, input_blob: bytes) -> LookupResult:
        """Look up the cached output for ``input_blob``."""
        if not self._enabled:
            self._stats.misses += 1
            return LookupResult.missing()

        name = self.entry_name(input_blob)
        if not self._store.exists(name):
            self._stats.misses += 1
            return LookupResult.missing()

        try:
            data = self._store.read(name)
        except CacheIOError as e:
            logger.warning("Cannot read translation cache file, ignoring: %s", e)
            self._stats.degraded += 1
            self._stats.misses += 1
            return LookupResult.degraded(str(e))

        self._stats.hits += 1
        return LookupResult.found(data)

    def get(self, input_blob: bytes) -> bytes | None:
        return self.lookup(input_blob).data

    def put(self, input_blob: bytes, output_blob: bytes) -> bool:
        """Store ``output_blob`` for ``input_blob``, overwriting. Best effort."""
        if not self._enabled:
            return False
        name = self.entry_name(input_blob)
        try:
            self._store.write(name, output_blob)
        except CacheIOError as e:
            logger.warning("Translation cache write failed: %s", e)
            self._stats.degraded += 1
            return False
        return True

    def trim(self, max_entries: int | None = None) -> int:
        """Delete all but the ``max_entries`` most recently modified files.

        Returns the number of files deleted.
        """
        limit = self._max_entries if max_entries is None else max_entries
        if not self._store.root.is_dir():
            logger.warning("Cache dir %s does not exist or is not a directory", self._store.root)
            return 0

        files = self._entry_files()
        if len(files) <= limit:
            return 0

        # Newest first
        files.sort(key=lambda item: item[1], reverse=True)
        deleted = 0
        for path, mtime in files[limit:]:
            logger.info("Deleting translation cache file %s (mtime=%s)", path.name, mtime)
            if self._store.delete(path.name):
                deleted += 1
        self._stats.evictions += deleted
        return deleted

    def clear(self) -> int:
        files = self._entry_files()
        return sum(1 for path, _ in files if self._store.delete(path.name))

    def stats(self) -> CacheStats:
        files = self._entry_files()
        return self._stats.model_copy(
            update={
                "entries": len(files),
                "size_mb": _total_size(p for p, _ in files) / (1024 * 1024),
            }
        )

    def _entry_files(self) -> list[tuple[Path, float]]:
        result: list[tuple[Path, float]] = []
        for path in self._store.list_files(f"{self._prefix}-"):
            try:
                result.append((path, path.stat().st_mtime))
            except OSError:
                # Vanished between listing and stat
                continue
        return result


def _total_size(paths) -> int:
    total = 0
    for path in paths:
        try:
            total += path.stat().st_size
        except OSError:
            continue
    return total
