"""Content hashing and merge key helpers."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable

from dxcache.errors.exceptions import HashUnavailableError
from dxcache.types import HASH_HEX_LENGTH

HASH_ALGORITHM = "sha1"


class Hasher:
    """Unsalted content digest rendered as lowercase hex."""

    def __init__(self, algorithm: str = HASH_ALGORITHM) -> None:
        try:
            hashlib.new(algorithm, usedforsecurity=False)
        except (ValueError, TypeError) as e:
            raise HashUnavailableError(
                f"Digest algorithm '{algorithm}' is not available", algorithm=algorithm
            ) from e
        self._algorithm = algorithm

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def digest(self, data: bytes) -> str:
        return hashlib.new(self._algorithm, data, usedforsecurity=False).hexdigest()


def hash_blob(data: bytes) -> str:
    """SHA-1 of a blob as 40 hex chars."""
    return hashlib.sha1(data, usedforsecurity=False).hexdigest()


def is_valid_merge_key(merge_key: str) -> bool:
    return bool(merge_key) and len(merge_key) % HASH_HEX_LENGTH == 0


def split_merge_key(merge_key: str) -> list[str]:
    """Split a merge key into its component hashes.

    Raises ValueError if the key is empty or not a multiple of the hash length.
    """
    if not is_valid_merge_key(merge_key):
        raise ValueError(f"Invalid merge key of length {len(merge_key)}")
    return [
        merge_key[i : i + HASH_HEX_LENGTH] for i in range(0, len(merge_key), HASH_HEX_LENGTH)
    ]


def join_merge_key(hashes: Iterable[str]) -> str:
    """Concatenate hashes (or merge keys) in merge order."""
    merge_key = "".join(hashes)
    if not is_valid_merge_key(merge_key):
        raise ValueError(f"Invalid merge key of length {len(merge_key)}")
    return merge_key
