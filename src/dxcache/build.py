"""Cached build steps around the external translator and merger."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from dxcache.cache.merge import MergeCache
from dxcache.cache.translation import TranslationCache
from dxcache.types import LibraryBlobInfo

logger = logging.getLogger(__name__)

Translator = Callable[[bytes], bytes]
Merger = Callable[[list[bytes]], bytes]


def translate_cached(cache: TranslationCache, data: bytes, translator: Translator) -> bytes:
    """Translate one blob, reusing a cached output when there is one."""
    cached = cache.get(data)
    if cached is not None:
        return cached
    output = translator(data)
    cache.put(data, output)
    return output


def merge_cached(
    cache: MergeCache,
    candidates: Iterable[LibraryBlobInfo],
    merger: Merger,
    fresh_output: bytes | None = None,
) -> bytes:
    """Merge candidates, reusing at most one previously merged composite.

    The new output is recorded under the merge key of the chunks it was
    built from, so a later build over the same inputs can reuse it whole.
    """
    chunks = cache.reorder(candidates, fresh_output)
    if not chunks:
        raise ValueError("Nothing to merge")

    if len(chunks) == 1:
        logger.debug("Single chunk, nothing to merge (reused=%s)", chunks[0].reused)
        return chunks[0].data

    output = merger([chunk.data for chunk in chunks])
    cache.add(cache.merge_key(chunks), output)
    return output
