"""Package-level default configuration values."""

from __future__ import annotations

from pathlib import Path
from typing import Any

# Cache location
DEFAULT_CACHE_DIR = Path.home() / ".dxcache"
INDEX_FILE_NAME = "index"
LOCK_FILE_NAME = "lock"  # reserved, never acquired

# Translation cache
DEFAULT_TRANSLATION_PREFIX = "c2d"
DEFAULT_MAX_TRANSLATION_ENTRIES = 3000

# Merge cache
MERGE_FILE_PREFIX = "mergecache-"
DEFAULT_MAX_MERGE_ENTRIES = 100

DEFAULT_CACHE_DISABLED = False

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "cache_dir": str(DEFAULT_CACHE_DIR),
        "cache_disabled": DEFAULT_CACHE_DISABLED,
        "translation_prefix": DEFAULT_TRANSLATION_PREFIX,
        "max_translation_entries": DEFAULT_MAX_TRANSLATION_ENTRIES,
        "max_merge_entries": DEFAULT_MAX_MERGE_ENTRIES,
        "log_level": DEFAULT_LOG_LEVEL,
    }


def validate_translation_prefix(prefix: str) -> str:
    """Reject a prefix whose files could be mistaken for other cache files.

    Translation files are ``<prefix>-<hash>``; trimming deletes everything
    that starts with ``<prefix>-``, so that must never cover merge blobs or
    the reserved index and lock files.
    """
    if not prefix or "/" in prefix or " " in prefix:
        raise ValueError(f"Invalid translation prefix: {prefix!r}")
    if prefix in (INDEX_FILE_NAME, LOCK_FILE_NAME):
        raise ValueError(f"Translation prefix {prefix!r} is a reserved file name")
    if f"{prefix}-".startswith(MERGE_FILE_PREFIX):
        raise ValueError(f"Translation prefix {prefix!r} overlaps merge cache files")
    return prefix
