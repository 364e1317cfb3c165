"""Store module - Durable slot storage and whole-store persistence."""

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
