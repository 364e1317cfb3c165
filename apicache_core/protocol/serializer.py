"""APICache Serializer - Payload Serialization.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

import msgpack


class Serializer(ABC):
    """Abstract serializer for cached values and the persisted slot."""

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Get format name."""
        pass

    @abstractmethod
    def serialize(self, value: Any) -> bytes:
        """Serialize value to bytes.

        Args:
            value: Value to serialize

        Returns:
            Serialized bytes
        """
        pass

    @abstractmethod
    def deserialize(self, data: bytes) -> Any:
        """Deserialize bytes to value.

        Args:
            data: Serialized bytes

        Returns:
            Deserialized value
        """
        pass

    def size_of(self, value: Any) -> int:
        """Get serialized size of a value in bytes."""
        return len(self.serialize(value))


class JSONSerializer(Serializer):
    """JSON serializer.

    Human-readable and the default for persisted slots. Values JSON cannot
    represent natively are stringified.
    """

    @property
    def format_name(self) -> str:
        return "json"

    def serialize(self, value: Any) -> bytes:
        return json.dumps(value, default=str, ensure_ascii=False).encode("utf-8")

    def deserialize(self, data: bytes) -> Any:
        return json.loads(data.decode("utf-8"))


class MsgPackSerializer(Serializer):
    """MessagePack serializer.

    Compact binary format. Strict: values msgpack cannot represent raise
    ``TypeError`` instead of being stringified.
    """

    @property
    def format_name(self) -> str:
        return "msgpack"

    def serialize(self, value: Any) -> bytes:
        return msgpack.packb(value, use_bin_type=True)

    def deserialize(self, data: bytes) -> Any:
        # Tuples come back as lists, matching JSON.
        return msgpack.unpackb(data, raw=False, strict_map_key=False)


class SerializerRegistry:
    """Registry of serializers."""

    def __init__(self):
        self._serializers: Dict[str, Serializer] = {}
        self._default: str = "json"

        self.register(JSONSerializer())
        self.register(MsgPackSerializer())

    def register(self, serializer: Serializer) -> None:
        """Register a serializer.

        Args:
            serializer: Serializer to register
        """
        self._serializers[serializer.format_name] = serializer

    def get(self, format_name: str) -> Serializer:
        """Get serializer by format.

        Args:
            format_name: Format name

        Returns:
            Serializer instance

        Raises:
            KeyError: If format not found
        """
        if format_name not in self._serializers:
            raise KeyError(f"Unknown serializer format: {format_name}")
        return self._serializers[format_name]

    def get_default(self) -> Serializer:
        """Get default serializer."""
        return self._serializers[self._default]

    def list_formats(self) -> List[str]:
        """List available formats."""
        return list(self._serializers.keys())


# Global registry
_registry = SerializerRegistry()


def get_serializer(format_name: Optional[Union[str, Serializer]] = None) -> Serializer:
    """Resolve a serializer.

    Args:
        format_name: Format name, serializer instance, or None for default

    Returns:
        Serializer instance
    """
    if isinstance(format_name, Serializer):
        return format_name
    if format_name is None:
        return _registry.get_default()
    return _registry.get(format_name)


__all__ = [
    "Serializer",
    "JSONSerializer",
    "MsgPackSerializer",
    "SerializerRegistry",
    "get_serializer",
]
