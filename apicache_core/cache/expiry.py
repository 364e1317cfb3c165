"""APICache Expiry - TTL Staleness Checks.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Staleness is only ever observed lazily, when an entry is read or loaded.
There are no timers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from apicache_core.cache.entry import CacheEntry


def is_expired(entry: "CacheEntry", now: float) -> bool:
    """Check whether an entry is stale at ``now``.

    Args:
        entry: Cache entry
        now: Current timestamp in seconds

    Returns:
        True once more than ``entry.ttl`` seconds have passed since the write
    """
    return (now - entry.timestamp) > entry.ttl


def remaining_ttl(entry: "CacheEntry", now: float) -> float:
    """Seconds until the entry goes stale, never negative."""
    return max(0.0, entry.timestamp + entry.ttl - now)


__all__ = ["is_expired", "remaining_ttl"]
