"""APICache Redis Store - Redis Slot Storage.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from redis.asyncio import ConnectionPool, Redis

from apicache_core.store.backend import SlotStore

logger = logging.getLogger(__name__)


@dataclass
class RedisConfig:
    """Redis connection configuration.

    Attributes:
        host: Redis host
        port: Redis port
        db: Redis database number
        password: Redis password
        socket_timeout: Socket timeout
        socket_connect_timeout: Connection timeout
        max_connections: Connection pool size
        prefix: Key prefix
    """

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    max_connections: int = 10
    prefix: str = "apicache:"


class RedisSlotStore(SlotStore):
    """Redis slot store.

    Each slot is a single Redis string key. The connection is opened lazily
    on first use; an already-configured ``redis.asyncio.Redis`` client can be
    passed in instead. The store never closes a client it was given.

    Example:
        store = RedisSlotStore(RedisConfig(host="redis.local"))
        cache = await ApiCache.open(store=store)
    """

    def __init__(
        self,
        config: Optional[RedisConfig] = None,
        client: Optional[Redis] = None,
    ):
        """Initialize Redis store.

        Args:
            config: Redis configuration
            client: Pre-built client, skips pool creation
        """
        super().__init__()
        self.config = config or RedisConfig()
        self._client: Optional[Redis] = client
        self._owns_client = client is None
        self._pool: Optional[ConnectionPool] = None

    async def _ensure_connected(self) -> Redis:
        """Ensure Redis connection exists.

        Returns:
            Redis client
        """
        if self._client is not None:
            return self._client

        self._pool = ConnectionPool(
            host=self.config.host,
            port=self.config.port,
            db=self.config.db,
            password=self.config.password,
            socket_timeout=self.config.socket_timeout,
            socket_connect_timeout=self.config.socket_connect_timeout,
            max_connections=self.config.max_connections,
            decode_responses=False,
        )
        self._client = Redis(connection_pool=self._pool)
        logger.info(f"Connected to Redis at {self.config.host}:{self.config.port}")
        return self._client

    def _make_key(self, key: str) -> str:
        return f"{self.config.prefix}{key}"

    async def read(self, key: str) -> Optional[bytes]:
        client = await self._ensure_connected()
        self._stats.reads += 1
        return await client.get(self._make_key(key))

    async def write(self, key: str, payload: bytes) -> None:
        client = await self._ensure_connected()
        await client.set(self._make_key(key), payload)
        self._stats.writes += 1

    async def remove(self, key: str) -> bool:
        client = await self._ensure_connected()
        result = await client.delete(self._make_key(key))
        if result > 0:
            self._stats.deletes += 1
        return result > 0

    async def close(self) -> None:
        """Close the Redis connection if this store opened it.

        An injected client is left open for its owner.
        """
        if not self._owns_client:
            return
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None

    def __repr__(self) -> str:
        return f"RedisSlotStore(host={self.config.host}, port={self.config.port})"


__all__ = ["RedisSlotStore", "RedisConfig"]
