"""Shared Pydantic models for dxcache."""

from __future__ import annotations

from enum import StrEnum
from pathlib import PurePath

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from dxcache.errors.exceptions import CorruptEntryError

# Hex length of a SHA-1 digest; every MergeKey component has this length.
HASH_HEX_LENGTH = 40


def is_bare_name(name: str) -> bool:
    """True for a plain file name with no directory part."""
    return name not in ("", ".", "..") and PurePath(name).name == name and "/" not in name


# ── Enums ──


class LookupStatus(StrEnum):
    HIT = "hit"
    MISS = "miss"
    DEGRADED = "degraded"


# ── Results ──


class LookupResult(BaseModel):
    """Outcome of a cache read.

    DEGRADED means the entry existed but could not be used (unreadable file,
    hash mismatch). Callers treat it exactly like a miss.
    """

    status: LookupStatus
    data: bytes | None = None
    reason: str | None = None

    @property
    def hit(self) -> bool:
        return self.status == LookupStatus.HIT

    @classmethod
    def found(cls, data: bytes) -> LookupResult:
        return cls(status=LookupStatus.HIT, data=data)

    @classmethod
    def missing(cls) -> LookupResult:
        return cls(status=LookupStatus.MISS)

    @classmethod
    def degraded(cls, reason: str) -> LookupResult:
        return cls(status=LookupStatus.DEGRADED, reason=reason)


# ── Blobs and entries ──


class LibraryBlobInfo(BaseModel):
    """A blob taking part in a merge.

    ``timestamp`` is the caller's ordering hint (e.g. the source file mtime).
    ``hash`` is filled in by the matcher; for a reused chunk it carries the
    full merge key of the cached composite.
    """

    model_config = ConfigDict(frozen=True)

    data: bytes
    timestamp: int
    hash: str = ""
    reused: bool = False


class MergeEntry(BaseModel):
    """One record of the merge index."""

    model_config = ConfigDict(frozen=True)

    merge_key: str
    output_hash: str
    file_name: str

    @field_validator("merge_key")
    @classmethod
    def check_merge_key(cls, v: str) -> str:
        if not v or len(v) % HASH_HEX_LENGTH != 0:
            raise ValueError(
                f"merge key length must be a non-zero multiple of {HASH_HEX_LENGTH}, got {len(v)}"
            )
        return v

    @field_validator("output_hash")
    @classmethod
    def check_output_hash(cls, v: str) -> str:
        if len(v) != HASH_HEX_LENGTH:
            raise ValueError(f"output hash must be {HASH_HEX_LENGTH} chars, got {len(v)}")
        return v

    @field_validator("file_name")
    @classmethod
    def check_file_name(cls, v: str) -> str:
        if not v:
            raise ValueError("file name is empty")
        if not is_bare_name(v):
            raise ValueError(f"file name must be a bare name inside the cache dir: {v!r}")
        return v

    @property
    def components(self) -> list[str]:
        """Component hashes of the merge key, in merge order."""
        return [
            self.merge_key[i : i + HASH_HEX_LENGTH]
            for i in range(0, len(self.merge_key), HASH_HEX_LENGTH)
        ]

    def to_line(self) -> str:
        return f"{self.merge_key} {self.output_hash} {self.file_name}"

    @classmethod
    def from_line(cls, line: str) -> MergeEntry:
        """Parse ``<mergeKey> <outputHash> <fileName>``.

        The file name is everything after the second space.
        """
        parts = line.split(" ", 2)
        if len(parts) < 3:
            raise CorruptEntryError("expected three space-separated fields", line=line)
        merge_key, output_hash, file_name = parts
        try:
            return cls(merge_key=merge_key, output_hash=output_hash, file_name=file_name)
        except ValidationError as e:
            raise CorruptEntryError(e.errors()[0]["msg"], line=line) from e
