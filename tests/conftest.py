import pytest

from dxcache.cache.keys import hash_blob
from dxcache.cache.store import BlobStore
from dxcache.types import LibraryBlobInfo, MergeEntry


@pytest.fixture
def cache_dir(tmp_path):
    path = tmp_path / "dxcache"
    path.mkdir()
    return path


@pytest.fixture
def store(cache_dir):
    return BlobStore(cache_dir)


@pytest.fixture
def blob_a():
    return LibraryBlobInfo(data=b"dex-a", timestamp=5)


@pytest.fixture
def blob_b():
    return LibraryBlobInfo(data=b"dex-b", timestamp=3)


@pytest.fixture
def write_index(cache_dir):
    """Write index lines as-is and return the index path."""

    def _write(*lines: str):
        path = cache_dir / "index"
        path.write_text("".join(f"{line}\n" for line in lines))
        return path

    return _write


@pytest.fixture
def cached_merge(cache_dir):
    """Create a backing file for the merge of ``blobs`` and return its entry."""

    def _make(*blobs: bytes, output: bytes = b"merged", file_name: str = "mergecache-x",
              output_hash: str | None = None) -> MergeEntry:
        (cache_dir / file_name).write_bytes(output)
        return MergeEntry(
            merge_key="".join(hash_blob(b) for b in blobs),
            output_hash=output_hash or hash_blob(output),
            file_name=file_name,
        )

    return _make
