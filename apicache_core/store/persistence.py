"""APICache Persistence - Whole-Store Load and Save.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

The entire cache map lives in one slot as a serialized list of
``[key, entry]`` pairs. Persistence is best-effort: storage failures are
logged and counted, never raised, and the in-memory map stays
authoritative.

Write modes:

- WRITE_THROUGH: every mutating call awaits its own slot write. Writes from
  overlapping calls are not ordered against each other, so the slot ends up
  holding whichever write finished last, which is not necessarily the
  snapshot of the last mutation.
- WRITE_BEHIND: mutations only replace a pending snapshot; a single flusher
  task writes the newest snapshot after ``flush_delay`` seconds. Writes are
  sequential, so they cannot reorder.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, List, Mapping, Optional

from apicache_core.cache.entry import CacheEntry
from apicache_core.exceptions import CacheIOError
from apicache_core.protocol.serializer import Serializer
from apicache_core.store.backend import SlotStore

logger = logging.getLogger(__name__)


class WriteMode(Enum):
    """Persistence flush modes."""

    WRITE_THROUGH = auto()    # Write the slot on every mutation
    WRITE_BEHIND = auto()     # Coalesce mutations, write after a delay


@dataclass
class PersistenceConfig:
    """Persistence configuration.

    Attributes:
        slot_key: Name of the durable slot
        write_mode: Flush mode
        flush_delay: Seconds to wait before a write-behind flush
    """

    slot_key: str = "api_cache"
    write_mode: WriteMode = WriteMode.WRITE_THROUGH
    flush_delay: float = 0.5

    def __post_init__(self):
        if self.flush_delay < 0:
            raise ValueError("flush_delay must be >= 0")


class PersistenceAdapter:
    """Loads and saves a cache map to one durable slot.

    Example:
        adapter = PersistenceAdapter(FileSlotStore(path), JSONSerializer())
        entries = await adapter.load(now=time.time())
        await adapter.save(entries)
    """

    def __init__(
        self,
        store: SlotStore,
        serializer: Serializer,
        config: Optional[PersistenceConfig] = None,
    ):
        """Initialize adapter.

        Args:
            store: Durable slot store
            serializer: Payload serializer
            config: Persistence configuration
        """
        self.store = store
        self.serializer = serializer
        self.config = config or PersistenceConfig()

        self._pending: Optional[bytes] = None
        self._flush_task: Optional[asyncio.Task] = None
        self._wake = asyncio.Event()

    @property
    def has_pending(self) -> bool:
        """Whether a write-behind snapshot is waiting to be written."""
        return self._pending is not None

    async def load(self, now: float) -> Dict[str, CacheEntry]:
        """Rehydrate the map from the slot.

        Entries already expired at ``now`` are dropped.

        Args:
            now: Current timestamp

        Returns:
            Key to entry map, empty if the slot is missing or malformed
        """
        try:
            payload = await self.store.read(self.config.slot_key)
        except Exception as e:
            logger.error(f"Failed to load cache from storage: {e}")
            self.store.get_stats().record_error(str(e))
            return {}

        if payload is None:
            return {}

        try:
            entries = self.decode(payload)
        except (ValueError, TypeError, KeyError) as e:
            logger.warning(f"Ignoring malformed cache payload in {self.config.slot_key!r}: {e}")
            return {}

        total = len(entries)
        for key in [k for k, entry in entries.items() if entry.is_expired(now)]:
            del entries[key]

        logger.info(
            f"Cache loaded from storage: {len(entries)} entries "
            f"({total - len(entries)} expired)"
        )
        return entries

    def decode(self, payload: bytes) -> Dict[str, CacheEntry]:
        """Decode a slot payload.

        Raises:
            ValueError: If the payload is not a list of ``[key, entry]`` pairs
        """
        try:
            pairs = self.serializer.deserialize(payload)
        except Exception as e:
            raise ValueError(f"undecodable payload: {e}") from e

        if not isinstance(pairs, list):
            raise ValueError("payload is not a list")

        entries: Dict[str, CacheEntry] = {}
        for pair in pairs:
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise ValueError("payload item is not a [key, entry] pair")
            key, raw = pair
            entry = CacheEntry.from_dict(raw)
            if entry.key != key:
                raise ValueError(f"entry key {entry.key!r} stored under {key!r}")
            entries[key] = entry
        return entries

    def encode(self, entries: Mapping[str, CacheEntry]) -> bytes:
        """Serialize the complete map.

        Raises:
            CacheIOError: If the map cannot be serialized
        """
        pairs: List[list] = [[key, entry.to_dict()] for key, entry in entries.items()]
        try:
            return self.serializer.serialize(pairs)
        except Exception as e:
            raise CacheIOError("Failed to serialize cache snapshot", original_error=e) from e

    async def save(self, entries: Mapping[str, CacheEntry]) -> None:
        """Persist a snapshot of the map.

        The snapshot is taken before any I/O, so later mutations do not leak
        into this write.

        Args:
            entries: Current map
        """
        payload = self.encode(entries)

        if self.config.write_mode is WriteMode.WRITE_BEHIND:
            self._pending = payload
            if self._flush_task is None or self._flush_task.done():
                self._flush_task = asyncio.create_task(self._flush_later())
            return

        await self._write(payload)

    async def remove(self) -> None:
        """Delete the slot, discarding any pending snapshot."""
        self._pending = None
        await self._drain()

        try:
            await self.store.remove(self.config.slot_key)
        except Exception as e:
            logger.error(f"Failed to remove cache from storage: {e}")
            self.store.get_stats().record_error(str(e))

    async def flush(self) -> None:
        """Write any pending snapshot now."""
        await self._drain()
        if self._pending is not None:
            payload, self._pending = self._pending, None
            await self._write(payload)

    async def close(self) -> None:
        """Flush pending writes and close the store."""
        await self.flush()
        await self.store.close()

    async def _drain(self) -> None:
        """Wake the flusher and wait for it to finish."""
        task = self._flush_task
        if task is not None and not task.done():
            self._wake.set()
            await task
        self._wake.clear()

    async def _flush_later(self) -> None:
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(self._wake.wait(), timeout=self.config.flush_delay)
        self._wake.clear()

        while self._pending is not None:
            payload, self._pending = self._pending, None
            await self._write(payload)

    async def _write(self, payload: bytes) -> None:
        try:
            await self.store.write(self.config.slot_key, payload)
        except Exception as e:
            logger.error(f"Failed to persist cache to storage: {e}")
            self.store.get_stats().record_error(str(e))


__all__ = ["PersistenceAdapter", "PersistenceConfig", "WriteMode"]
