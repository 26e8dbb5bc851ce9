"""Tests for the blob store and cache dir bootstrap."""

from pathlib import Path

import pytest

from dxcache.cache.store import BlobStore, ensure_cache_dir
from dxcache.errors.exceptions import CacheIOError


class TestEnsureCacheDir:
    def test_creates_nested(self, tmp_path):
        path = tmp_path / "a" / "b" / "cache"
        assert ensure_cache_dir(path) is True
        assert path.is_dir()

    def test_existing_dir(self, tmp_path):
        assert ensure_cache_dir(tmp_path) is True

    def test_failure_does_not_raise(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a dir")
        assert ensure_cache_dir(blocker / "cache") is False


class TestBlobStore:
    def test_write_read(self, store):
        store.write("c2d-x", b"payload")
        assert store.read("c2d-x") == b"payload"
        assert store.exists("c2d-x")

    def test_write_overwrites(self, store):
        store.write("f", b"first")
        store.write("f", b"second")
        assert store.read("f") == b"second"

    def test_read_missing_raises(self, store):
        with pytest.raises(CacheIOError) as exc_info:
            store.read("missing")
        assert exc_info.value.operation == "read"
        assert exc_info.value.path == store.path_for("missing")

    def test_exists_false_for_directory(self, store, cache_dir):
        (cache_dir / "sub").mkdir()
        assert not store.exists("sub")

    def test_create_unique_names(self, store):
        n1 = store.create("mergecache-", b"one")
        n2 = store.create("mergecache-", b"two")
        assert n1 != n2
        assert n1.startswith("mergecache-")
        assert store.read(n1) == b"one"
        assert store.read(n2) == b"two"

    def test_create_in_missing_dir_raises(self, tmp_path):
        store = BlobStore(tmp_path / "absent")
        with pytest.raises(CacheIOError) as exc_info:
            store.create("mergecache-", b"data")
        assert exc_info.value.operation == "create"

    def test_write_failure_removes_partial(self, store, monkeypatch):
        def broken_write(self, data):
            Path.write_text(self, "partial")
            raise OSError("disk full")

        monkeypatch.setattr(Path, "write_bytes", broken_write)
        with pytest.raises(CacheIOError):
            store.write("c2d-x", b"payload")
        assert not store.path_for("c2d-x").exists()

    def test_delete(self, store):
        store.write("f", b"x")
        assert store.delete("f") is True
        assert not store.exists("f")

    def test_delete_missing_is_ok(self, store):
        assert store.delete("never-written") is True

    def test_list_files_by_prefix(self, store, cache_dir):
        store.write("c2d-1", b"1")
        store.write("c2d-2", b"2")
        store.write("index", b"")
        (cache_dir / "c2d-dir").mkdir()
        names = sorted(p.name for p in store.list_files("c2d-"))
        assert names == ["c2d-1", "c2d-2"]

    def test_list_files_missing_dir(self, tmp_path):
        assert BlobStore(tmp_path / "absent").list_files("c2d-") == []


class TestBlobStoreConfinement:
    def test_path_for_refuses_absolute(self, store, tmp_path):
        with pytest.raises(CacheIOError) as exc_info:
            store.path_for(str(tmp_path / "elsewhere"))
        assert exc_info.value.operation == "resolve"

    def test_path_for_refuses_parent(self, store):
        with pytest.raises(CacheIOError):
            store.path_for("../escape")

    def test_delete_leaves_outside_file(self, store, tmp_path):
        outside = tmp_path / "keep.txt"
        outside.write_bytes(b"keep")
        assert store.delete(str(outside)) is False
        assert outside.exists()

    def test_exists_false_outside(self, store, tmp_path):
        outside = tmp_path / "keep.txt"
        outside.write_bytes(b"keep")
        assert store.exists(str(outside)) is False
        assert store.exists("../keep.txt") is False
