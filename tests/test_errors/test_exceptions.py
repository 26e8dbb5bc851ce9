"""Tests for custom exception hierarchy."""

from pathlib import Path

from dxcache.errors.exceptions import (
    CacheIOError,
    CorruptEntryError,
    DxCacheError,
    HashUnavailableError,
)


class TestExceptionHierarchy:
    def test_all_inherit_from_base(self):
        assert issubclass(CacheIOError, DxCacheError)
        assert issubclass(CorruptEntryError, DxCacheError)
        assert issubclass(HashUnavailableError, DxCacheError)

    def test_all_inherit_from_exception(self):
        assert issubclass(DxCacheError, Exception)


class TestCacheIOError:
    def test_attributes(self):
        original = PermissionError("denied")
        err = CacheIOError(
            "Cannot read", path=Path("/c/c2d-x"), operation="read", original=original
        )
        assert err.path == Path("/c/c2d-x")
        assert err.operation == "read"
        assert err.original is original
        assert "Cannot read" in str(err)

    def test_defaults(self):
        err = CacheIOError("test")
        assert err.path is None
        assert err.operation == "read"


class TestCorruptEntryError:
    def test_line_kept(self):
        err = CorruptEntryError("bad hash", line="abc def ghi")
        assert err.line == "abc def ghi"
        assert err.message == "bad hash"


class TestHashUnavailableError:
    def test_default_algorithm(self):
        assert HashUnavailableError("missing").algorithm == "sha1"
