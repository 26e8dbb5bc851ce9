"""Cache statistics model."""

from __future__ import annotations

from pydantic import BaseModel


class CacheStats(BaseModel):
    """Counters for one cache layer, or the sum of both."""

    entries: int = 0
    size_mb: float = 0.0
    hits: int = 0
    misses: int = 0
    degraded: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def __add__(self, other: CacheStats) -> CacheStats:
        return CacheStats(
            entries=self.entries + other.entries,
            size_mb=self.size_mb + other.size_mb,
            hits=self.hits + other.hits,
            misses=self.misses + other.misses,
            degraded=self.degraded + other.degraded,
            evictions=self.evictions + other.evictions,
        )
