"""APICache - Offline-Aware API Response Cache.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

A client-side cache for API responses with:
- TTL-based lazy expiration
- Size bound with oldest-write eviction
- Whole-store persistence to one durable slot (memory, file, Redis)
- Write-through or write-behind flushing
- Regex key invalidation and key namespaces
- Hit/miss statistics
- Push-based connectivity awareness for offline-first callers

Architecture:
    ┌─────────────────────────────────────────────────────────────────┐
    │                         APICache System                         │
    ├─────────────────────────────────────────────────────────────────┤
    │  ┌─────────────┐  ┌─────────────┐  ┌─────────────┐             │
    │  │  ApiCache   │  │    Keys     │  │   Entry     │   CACHE     │
    │  │  get/set    │  │  ns:op:hash │  │  TTL/expiry │   LAYER     │
    │  └──────┬──────┘  └─────────────┘  └─────────────┘             │
    │         │                                                       │
    │  ┌──────┴───────────┐  ┌──────────────┐  ┌──────────────┐      │
    │  │ Eviction (oldest)│  │ StatsCollector│  │NetworkMonitor│      │
    │  └──────┬───────────┘  └──────────────┘  └──────────────┘      │
    │         │                                                       │
    │  ┌──────┴────────────────────────────────────────┐             │
    │  │         PersistenceAdapter (one slot)          │   STORAGE   │
    │  │   ┌────────┐  ┌────────┐  ┌────────┐          │   LAYER     │
    │  │   │ Memory │  │  File  │  │ Redis  │          │             │
    │  │   └────────┘  └────────┘  └────────┘          │             │
    │  └───────────────────────────────────────────────┘             │
    └─────────────────────────────────────────────────────────────────┘

Example Usage:
    from apicache_core import ApiCache, CacheConfig, FileSlotStore

    cache = await ApiCache.open(CacheConfig(max_size=500), FileSlotStore(path))

    key = cache.generate_key("user", "profile", {"userId": 42})
    await cache.set(key, {"name": "Alice"}, ttl=600)
    profile = await cache.get(key)

    # Drop everything about users
    await cache.invalidate_pattern(r"^user:")
"""

__version__ = "1.0.0"
__author__ = "BlackRoad OS"

from apicache_core.cache.entry import CacheEntry
from apicache_core.cache.keys import generate_key, hash_string
from apicache_core.cache.cache import (
    ApiCache,
    CacheConfig,
    CacheStats,
)
from apicache_core.cache.namespace import Namespace
from apicache_core.cache.decorator import cached, load_offline_first
from apicache_core.exceptions import (
    CacheError,
    CacheIOError,
    CacheNotStartedError,
    InvalidPatternError,
    OfflineError,
)
from apicache_core.eviction.policy import (
    EvictionPolicy,
    EvictionStats,
)
from apicache_core.eviction.oldest import OldestEntryPolicy
from apicache_core.metrics.collector import StatsCollector
from apicache_core.network.monitor import (
    ConnectivityState,
    ConnectivitySource,
    ManualConnectivitySource,
    NetworkMonitor,
)
from apicache_core.protocol.serializer import (
    Serializer,
    JSONSerializer,
    MsgPackSerializer,
)
from apicache_core.store.backend import (
    SlotStore,
    StorageStats,
)
from apicache_core.store.memory import MemorySlotStore
from apicache_core.store.file import FileSlotStore
from apicache_core.store.redis import RedisSlotStore, RedisConfig
from apicache_core.store.persistence import (
    PersistenceAdapter,
    PersistenceConfig,
    WriteMode,
)

__all__ = [
    # Cache
    "ApiCache",
    "CacheConfig",
    "CacheStats",
    "CacheEntry",
    "Namespace",
    "generate_key",
    "hash_string",
    "cached",
    "load_offline_first",
    # Errors
    "CacheError",
    "CacheIOError",
    "CacheNotStartedError",
    "InvalidPatternError",
    "OfflineError",
    # Eviction
    "EvictionPolicy",
    "EvictionStats",
    "OldestEntryPolicy",
    # Metrics
    "StatsCollector",
    # Network
    "ConnectivityState",
    "ConnectivitySource",
    "ManualConnectivitySource",
    "NetworkMonitor",
    # Protocol
    "Serializer",
    "JSONSerializer",
    "MsgPackSerializer",
    # Storage
    "SlotStore",
    "StorageStats",
    "MemorySlotStore",
    "FileSlotStore",
    "RedisSlotStore",
    "RedisConfig",
    "PersistenceAdapter",
    "PersistenceConfig",
    "WriteMode",
]
