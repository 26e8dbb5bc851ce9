"""Custom exception hierarchy for dxcache."""

from __future__ import annotations

from pathlib import Path
from typing import Any


class DxCacheError(Exception):
    """Base exception for all dxcache errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class CacheIOError(DxCacheError):
    """A filesystem operation on the cache directory failed.

    Always recovered by the cache layer: a read becomes a miss, a write
    becomes a no-op.
    """

    def __init__(
        self,
        message: str = "",
        path: Path | None = None,
        operation: str = "read",
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.operation = operation
        self.original = original


class CorruptEntryError(DxCacheError):
    """A cache entry or index record is malformed or stale.

    Examples: wrong hash length, missing backing file, hash mismatch.
    """

    def __init__(self, message: str = "", line: str | None = None) -> None:
        super().__init__(message)
        self.line = line


class HashUnavailableError(DxCacheError):
    """The digest algorithm cannot be created. Fatal: nothing can be cached."""

    def __init__(self, message: str = "", algorithm: str = "sha1") -> None:
        super().__init__(message)
        self.algorithm = algorithm
