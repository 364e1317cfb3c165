"""APICache Metrics Collector - Hit/Miss Telemetry.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from apicache_core.cache.entry import CacheEntry

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Point-in-time cache statistics. Derived on demand, never stored.

    Attributes:
        total_entries: Current entry count
        hit_rate: Hits as a percentage of all reads (0-100)
        miss_rate: Misses as a percentage of all reads (0-100)
        total_hits: Hits since process start
        total_misses: Misses since process start
        cache_size: Sum of serialized data sizes in bytes
        oldest_entry: Oldest write timestamp, None when empty
        newest_entry: Newest write timestamp, None when empty
    """

    total_entries: int = 0
    hit_rate: float = 0.0
    miss_rate: float = 0.0
    total_hits: int = 0
    total_misses: int = 0
    cache_size: int = 0
    oldest_entry: Optional[float] = None
    newest_entry: Optional[float] = None

    @property
    def total_requests(self) -> int:
        """Get total reads."""
        return self.total_hits + self.total_misses

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_entries": self.total_entries,
            "hit_rate": self.hit_rate,
            "miss_rate": self.miss_rate,
            "total_hits": self.total_hits,
            "total_misses": self.total_misses,
            "cache_size": self.cache_size,
            "oldest_entry": self.oldest_entry,
            "newest_entry": self.newest_entry,
        }


class StatsCollector:
    """Collects hit/miss counters for one cache instance.

    Counters are monotonic for the lifetime of the collector; clearing the
    cache does not reset them.

    Example:
        collector = StatsCollector()
        collector.record_hit()
        stats = collector.snapshot(entries.values(), serializer.size_of)
        print(f"Hit rate: {stats.hit_rate:.1f}%")
    """

    def __init__(self):
        self._hits = 0
        self._misses = 0
        self._expirations = 0
        self._evictions = 0

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    @property
    def expirations(self) -> int:
        return self._expirations

    @property
    def evictions(self) -> int:
        return self._evictions

    def record_hit(self) -> None:
        """Record a cache hit."""
        self._hits += 1

    def record_miss(self) -> None:
        """Record a cache miss."""
        self._misses += 1

    def record_expiration(self) -> None:
        """Record an entry dropped on read because it was stale."""
        self._expirations += 1

    def record_eviction(self) -> None:
        """Record an entry dropped to stay within the size bound."""
        self._evictions += 1

    def snapshot(
        self,
        entries: Iterable[CacheEntry],
        size_of: Callable[[Any], int],
    ) -> CacheStats:
        """Build statistics from the live entries.

        Args:
            entries: Current entries
            size_of: Returns the serialized size of an entry's data

        Returns:
            CacheStats instance
        """
        total = self._hits + self._misses
        hit_rate = (self._hits / total) * 100 if total > 0 else 0.0
        miss_rate = (self._misses / total) * 100 if total > 0 else 0.0

        count = 0
        cache_size = 0
        oldest: Optional[float] = None
        newest: Optional[float] = None
        for entry in entries:
            count += 1
            try:
                cache_size += size_of(entry.data)
            except (TypeError, ValueError) as e:
                logger.warning(f"Cannot size entry {entry.key}: {e}")
            oldest = entry.timestamp if oldest is None else min(oldest, entry.timestamp)
            newest = entry.timestamp if newest is None else max(newest, entry.timestamp)

        return CacheStats(
            total_entries=count,
            hit_rate=hit_rate,
            miss_rate=miss_rate,
            total_hits=self._hits,
            total_misses=self._misses,
            cache_size=cache_size,
            oldest_entry=oldest,
            newest_entry=newest,
        )

    def __repr__(self) -> str:
        return f"StatsCollector(hits={self._hits}, misses={self._misses})"


__all__ = ["StatsCollector", "CacheStats"]
