"""Blob store — raw files in the cache directory."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from dxcache.errors.exceptions import CacheIOError
from dxcache.types import is_bare_name

logger = logging.getLogger(__name__)


def ensure_cache_dir(path: Path) -> bool:
    """Create the cache directory tree if absent.

    Never raises; later reads and writes fail individually instead.
    """
    if path.is_dir():
        return True
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning("Cannot create cache dir %s: %s", path, e)
        return False
    logger.info("Cache dir %s did not exist, created", path)
    return True


class BlobStore:
    """Reads, writes and deletes files directly under one directory."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def ensure(self) -> bool:
        return ensure_cache_dir(self._root)

    def path_for(self, name: str) -> Path:
        """Path of ``name`` in the cache dir. Names with a directory part are refused."""
        if not is_bare_name(name):
            raise CacheIOError(
                f"Refusing path outside cache dir: {name!r}", path=Path(name), operation="resolve"
            )
        return self._root / name

    def exists(self, name: str) -> bool:
        try:
            return self.path_for(name).is_file()
        except CacheIOError:
            return False

    def read(self, name: str) -> bytes:
        path = self.path_for(name)
        try:
            return path.read_bytes()
        except OSError as e:
            raise CacheIOError(
                f"Cannot read {path}: {e}", path=path, operation="read", original=e
            ) from e

    def write(self, name: str, data: bytes) -> Path:
        """Overwrite ``name`` with ``data``. A partial file is removed on failure."""
        path = self.path_for(name)
        try:
            path.write_bytes(data)
        except OSError as e:
            self._discard(path)
            raise CacheIOError(
                f"Cannot write {path}: {e}", path=path, operation="write", original=e
            ) from e
        return path

    def create(self, prefix: str, data: bytes) -> str:
        """Write ``data`` to a new uniquely named file; return its name."""
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=prefix, dir=self._root)
        except OSError as e:
            raise CacheIOError(
                f"Cannot create cache file in {self._root}: {e}",
                path=self._root,
                operation="create",
                original=e,
            ) from e
        path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        except OSError as e:
            self._discard(path)
            raise CacheIOError(
                f"Cannot write {path}: {e}", path=path, operation="create", original=e
            ) from e
        return path.name

    def delete(self, name: str) -> bool:
        try:
            path = self.path_for(name)
            path.unlink(missing_ok=True)
        except (OSError, CacheIOError) as e:
            logger.warning("Cannot delete cache file %s: %s", name, e)
            return False
        return True

    def list_files(self, prefix: str) -> list[Path]:
        """Regular files whose name starts with ``prefix``."""
        try:
            return [
                p for p in self._root.iterdir() if p.name.startswith(prefix) and p.is_file()
            ]
        except OSError as e:
            logger.warning("Cannot list cache dir %s: %s", self._root, e)
            return []

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.debug("Cannot remove partial file %s: %s", path, e)
