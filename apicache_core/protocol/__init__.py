"""Protocol module - Serialization of cached values and persisted slots."""

from apicache_core.protocol.serializer import (
    Serializer,
    JSONSerializer,
    MsgPackSerializer,
    get_serializer,
)

__all__ = [
    "Serializer",
    "JSONSerializer",
    "MsgPackSerializer",
    "get_serializer",
]
