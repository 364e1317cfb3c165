"""APICache Cache - API Response Cache.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from apicache_core.cache.entry import CacheEntry
from apicache_core.cache.keys import generate_key
from apicache_core.eviction.oldest import OldestEntryPolicy
from apicache_core.eviction.policy import EvictionPolicy
from apicache_core.exceptions import (
    CacheIOError,
    CacheNotStartedError,
    InvalidPatternError,
)
from apicache_core.metrics.collector import CacheStats, StatsCollector
from apicache_core.network.monitor import ConnectivitySource, NetworkMonitor
from apicache_core.protocol.serializer import Serializer, get_serializer
from apicache_core.store.backend import SlotStore
from apicache_core.store.memory import MemorySlotStore
from apicache_core.store.persistence import PersistenceAdapter, PersistenceConfig

logger = logging.getLogger(__name__)

_CONFIG_ALIASES = {
    "defaultTtl": "default_ttl",
    "maxSize": "max_size",
    "enableOfflineMode": "enable_offline_mode",
    "enableCompression": "enable_compression",
}


@dataclass
class CacheConfig:
    """Cache configuration.

    Attributes:
        default_ttl: TTL in seconds for entries set without one
        max_size: Maximum entries before the oldest write is evicted
        enable_offline_mode: Track connectivity for callers
        enable_compression: Reserved, currently has no effect
    """

    default_ttl: float = 300.0
    max_size: int = 1000
    enable_offline_mode: bool = True
    enable_compression: bool = False

    def __post_init__(self):
        if self.default_ttl < 0:
            raise ValueError("default_ttl must be >= 0")
        if self.max_size < 1:
            raise ValueError("max_size must be >= 1")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CacheConfig":
        """Create from a plain mapping.

        Unknown keys are ignored; camelCase names are accepted.

        Args:
            data: Configuration mapping

        Returns:
            CacheConfig instance
        """
        fields = {f.name for f in dataclasses.fields(cls)}
        values = {}
        for name, value in data.items():
            name = _CONFIG_ALIASES.get(name, name)
            if name in fields:
                values[name] = value
        return cls(**values)


class ApiCache:
    """Persisted, size-bounded, TTL cache for API responses.

    Features:
    - Lazy TTL expiration on read
    - Oldest-write eviction past ``max_size``
    - Whole-store persistence to one durable slot
    - Regex key invalidation
    - Hit/miss statistics
    - Connectivity awareness for offline-first callers

    Build it with ``await ApiCache.open(...)`` or ``async with ApiCache(...)``
    so the persisted slot is loaded before use. Every async call also loads
    it on first use, but the sync readers (``get_stats``, ``keys``,
    ``get_entry``, ``len``, ``in``, iteration) raise
    :class:`CacheNotStartedError` until it has been loaded.

    Map changes inside one call never interleave with another call; the
    persistence write that follows may (see ``WriteMode``).

    Example:
        cache = await ApiCache.open(CacheConfig(max_size=500), FileSlotStore(path))

        key = cache.generate_key("user", "profile", {"userId": 42})
        profile = await cache.get(key)
        if profile is None:
            profile = await fetch_profile(42)
            await cache.set(key, profile, ttl=600)

        await cache.invalidate_pattern(r"^user:")
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        store: Optional[SlotStore] = None,
        *,
        serializer: Optional[Union[str, Serializer]] = None,
        persistence: Optional[PersistenceConfig] = None,
        eviction: Optional[EvictionPolicy] = None,
        connectivity: Optional[ConnectivitySource] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize cache.

        Args:
            config: Cache configuration
            store: Durable slot store, in-memory if omitted
            serializer: Serializer or format name ("json", "msgpack")
            persistence: Slot name and write mode
            eviction: Eviction policy
            connectivity: Push-based connectivity source
            clock: Returns the current time in seconds
        """
        self.config = config or CacheConfig()
        self._serializer = get_serializer(serializer)
        self._persistence = PersistenceAdapter(
            store if store is not None else MemorySlotStore(),
            self._serializer,
            persistence,
        )
        self._eviction = eviction or OldestEntryPolicy()
        self._stats = StatsCollector()
        self._clock = clock

        self._entries: Dict[str, CacheEntry] = {}
        self._loaded = False
        self._load_lock = asyncio.Lock()

        self._network: Optional[NetworkMonitor] = None
        if connectivity is not None and self.config.enable_offline_mode:
            self._network = NetworkMonitor(connectivity)

    @classmethod
    async def open(cls, *args: Any, **kwargs: Any) -> "ApiCache":
        """Construct a cache and load its persisted state.

        Accepts the same arguments as the constructor.
        """
        cache = cls(*args, **kwargs)
        await cache.start()
        return cache

    @property
    def persistence(self) -> PersistenceAdapter:
        return self._persistence

    @property
    def network(self) -> Optional[NetworkMonitor]:
        return self._network

    async def start(self) -> None:
        """Load persisted entries. Only the first call has any effect."""
        if self._loaded:
            return

        async with self._load_lock:
            if self._loaded:
                return
            self._entries = await self._persistence.load(self._clock())
            self._loaded = True

    async def stop(self) -> None:
        """Flush pending writes and stop listening for connectivity."""
        await self._persistence.close()
        if self._network is not None:
            self._network.close()
        logger.info(f"Cache stopped with {len(self._entries)} entries")

    async def get(self, key: str) -> Optional[Any]:
        """Get cached data.

        Args:
            key: Cache key

        Returns:
            Cached data, or None on a miss or if the entry has expired
        """
        await self.start()

        entry = self._entries.get(key)
        if entry is None:
            self._stats.record_miss()
            logger.debug(f"Cache MISS: {key}")
            return None

        now = self._clock()
        if entry.is_expired(now):
            del self._entries[key]
            self._stats.record_miss()
            self._stats.record_expiration()
            logger.debug(f"Cache EXPIRED: {key}")
            return None

        self._stats.record_hit()
        logger.debug(f"Cache HIT: {key} (age={entry.age(now):.1f}s, ttl={entry.ttl}s)")
        return entry.data

    async def set(
        self,
        key: str,
        data: Any,
        ttl: Optional[float] = None,
        etag: Optional[str] = None,
        last_modified: Optional[str] = None,
    ) -> None:
        """Set cached data.

        Args:
            key: Cache key
            data: Data to cache
            ttl: TTL in seconds, ``config.default_ttl`` if None
            etag: Response ETag
            last_modified: Response Last-Modified

        Raises:
            CacheIOError: If the entry (data or headers) cannot be serialized
        """
        await self.start()

        entry = CacheEntry(
            key=key,
            data=data,
            timestamp=self._clock(),
            ttl=self.config.default_ttl if ttl is None else ttl,
            etag=etag,
            last_modified=last_modified,
        )

        # Every entry in the map must stay encodable.
        try:
            size = self._serializer.size_of(entry.to_dict())
        except Exception as e:
            raise CacheIOError(f"Cannot serialize entry for {key!r}", key=key, original_error=e) from e

        # Reinsert so iteration order follows write order.
        self._entries.pop(key, None)
        self._entries[key] = entry

        if len(self._entries) > self.config.max_size:
            self._evict_one()

        logger.debug(f"Cache SET: {key} (ttl={entry.ttl}s, size={size}B)")
        await self._persistence.save(self._entries)

    async def delete(self, key: str) -> bool:
        """Delete cached data.

        Args:
            key: Cache key

        Returns:
            True if the key was present
        """
        await self.start()

        existed = self._entries.pop(key, None) is not None
        logger.debug(f"Cache DELETE: {key}")
        await self._persistence.save(self._entries)
        return existed

    async def clear(self) -> int:
        """Remove every entry and the persisted slot.

        Hit/miss counters are kept.

        Returns:
            Number of entries removed
        """
        await self.start()

        count = len(self._entries)
        self._entries.clear()
        await self._persistence.remove()
        logger.debug(f"Cache CLEARED ({count} entries)")
        return count

    async def invalidate_pattern(self, pattern: str) -> int:
        """Delete every key matching a regular expression.

        The pattern is searched anywhere in the key; anchor it (``^user:``)
        to match prefixes. Nothing is deleted if the pattern is invalid.

        Args:
            pattern: Regular expression source

        Returns:
            Number of entries deleted

        Raises:
            InvalidPatternError: If the pattern does not compile
        """
        try:
            regex = re.compile(pattern)
        except re.error as e:
            raise InvalidPatternError(pattern, e) from e

        await self.start()

        matched = [key for key in self._entries if regex.search(key)]
        for key in matched:
            del self._entries[key]

        await self._persistence.save(self._entries)
        logger.debug(f"Cache INVALIDATED: {pattern} ({len(matched)} entries)")
        return len(matched)

    async def flush(self) -> None:
        """Write any pending write-behind snapshot now."""
        await self._persistence.flush()

    def get_stats(self) -> CacheStats:
        """Get cache statistics.

        Returns:
            CacheStats computed from the live entries

        Raises:
            CacheNotStartedError: If the persisted slot has not been loaded
        """
        self._require_loaded("get_stats")
        return self._stats.snapshot(self._entries.values(), self._serializer.size_of)

    def is_online_mode(self) -> bool:
        """Check if the device is online.

        Always True when offline mode is disabled or no connectivity source
        was given.
        """
        if self._network is None:
            return True
        return self._network.is_online

    def generate_key(
        self,
        namespace: str,
        operation: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Build a cache key. See :func:`apicache_core.cache.keys.generate_key`."""
        return generate_key(namespace, operation, params)

    def update_config(self, **changes: Any) -> CacheConfig:
        """Replace configuration fields.

        Lowering ``max_size`` does not trim existing entries; the store
        shrinks by one entry per later ``set``.

        Returns:
            The new configuration
        """
        self.config = dataclasses.replace(self.config, **changes)
        return self.config

    def namespace(self, name: str) -> Any:  # Namespace
        """Get a key-prefixed view of this cache.

        Args:
            name: Namespace name

        Returns:
            Namespace instance
        """
        from apicache_core.cache.namespace import Namespace

        return Namespace(self, name)

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        """Get the raw entry, expired or not, without touching statistics."""
        self._require_loaded("get_entry")
        return self._entries.get(key)

    def keys(self) -> List[str]:
        """Get all stored keys, including not yet collected expired ones."""
        self._require_loaded("keys")
        return list(self._entries.keys())

    def _require_loaded(self, operation: str) -> None:
        if not self._loaded:
            raise CacheNotStartedError(operation)

    def _evict_one(self) -> None:
        key = self._eviction.choose_eviction(self._entries)
        if key is None:
            return
        del self._entries[key]
        self._stats.record_eviction()
        logger.debug(f"Cache EVICTED: {key}")

    def __contains__(self, key: str) -> bool:
        self._require_loaded("__contains__")
        return key in self._entries

    def __len__(self) -> int:
        self._require_loaded("__len__")
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    async def __aenter__(self) -> "ApiCache":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()

    def __repr__(self) -> str:
        return f"ApiCache(entries={len(self._entries)}, max_size={self.config.max_size})"


__all__ = ["ApiCache", "CacheConfig", "CacheStats"]
