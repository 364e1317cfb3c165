"""APICache Slot Store - Abstract Durable Storage Interface.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class StorageStats:
    """Slot store statistics.

    Attributes:
        reads: Number of read operations
        writes: Number of write operations
        deletes: Number of delete operations
        errors: Number of failed operations
        last_error: Message of the most recent failure
        last_error_at: When the most recent failure happened
    """

    reads: int = 0
    writes: int = 0
    deletes: int = 0
    errors: int = 0
    last_error: Optional[str] = None
    last_error_at: Optional[datetime] = None

    def record_error(self, error: str) -> None:
        """Record an error."""
        self.errors += 1
        self.last_error = error
        self.last_error_at = datetime.now()


class SlotStore(ABC):
    """Durable string-keyed slot storage.

    The cache keeps its whole store in one opaque slot, so a backend only
    needs to read, replace and remove a blob by name. Implementations:

    - MemorySlotStore: In-process dictionary
    - FileSlotStore: One file per slot
    - RedisSlotStore: One Redis key per slot

    Backends raise on I/O failure; the persistence adapter decides how
    failures are handled.
    """

    def __init__(self):
        self._stats = StorageStats()

    @abstractmethod
    async def read(self, key: str) -> Optional[bytes]:
        """Read a slot.

        Args:
            key: Slot name

        Returns:
            Stored payload or None if the slot does not exist
        """
        pass

    @abstractmethod
    async def write(self, key: str, payload: bytes) -> None:
        """Replace a slot's payload.

        Args:
            key: Slot name
            payload: Bytes to store
        """
        pass

    @abstractmethod
    async def remove(self, key: str) -> bool:
        """Remove a slot.

        Args:
            key: Slot name

        Returns:
            True if the slot existed
        """
        pass

    async def close(self) -> None:
        """Release backend resources."""
        pass

    def get_stats(self) -> StorageStats:
        """Get storage statistics."""
        return self._stats

    def reset_stats(self) -> None:
        """Reset statistics."""
        self._stats = StorageStats()


__all__ = ["SlotStore", "StorageStats"]
