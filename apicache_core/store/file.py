"""APICache File Store - File-Based Slot Storage.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import asyncio
import hashlib
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from apicache_core.store.backend import SlotStore


class FileSlotStore(SlotStore):
    """File-based slot store.

    Each slot is one file under ``base_path``, named by the SHA-256 of the
    slot name so arbitrary names are safe on any filesystem. Writes go to a
    temporary file that is then renamed over the target, so a crash never
    leaves a half-written slot. Blocking file I/O runs in a worker thread.

    Example:
        store = FileSlotStore("/var/cache/myapp")
        await store.write("api_cache", b"[]")
        payload = await store.read("api_cache")
    """

    SUFFIX = ".slot"

    def __init__(self, base_path: Union[str, Path]):
        """Initialize file store.

        Args:
            base_path: Directory holding slot files
        """
        super().__init__()
        self.base_path = Path(base_path)

    def _get_path(self, key: str) -> Path:
        filename = hashlib.sha256(key.encode()).hexdigest()
        return self.base_path / f"{filename}{self.SUFFIX}"

    def _read_sync(self, path: Path) -> Optional[bytes]:
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def _write_sync(self, path: Path, payload: bytes) -> None:
        self.base_path.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(dir=self.base_path, suffix=".tmp")
        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, path)
        except BaseException:
            if temp_path.exists():
                temp_path.unlink()
            raise

    def _remove_sync(self, path: Path) -> bool:
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False

    async def read(self, key: str) -> Optional[bytes]:
        self._stats.reads += 1
        return await asyncio.to_thread(self._read_sync, self._get_path(key))

    async def write(self, key: str, payload: bytes) -> None:
        await asyncio.to_thread(self._write_sync, self._get_path(key), payload)
        self._stats.writes += 1

    async def remove(self, key: str) -> bool:
        removed = await asyncio.to_thread(self._remove_sync, self._get_path(key))
        if removed:
            self._stats.deletes += 1
        return removed

    def __repr__(self) -> str:
        return f"FileSlotStore(path={self.base_path})"


__all__ = ["FileSlotStore"]
