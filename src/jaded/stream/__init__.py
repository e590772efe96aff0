"""Low-level stream access.

Exports the ``ByteReader`` and the protocol vocabulary: record markers,
class flags, primitive kinds and the header/handle constants.
"""
from __future__ import annotations

from jaded.stream.markers import (
    INITIAL_HANDLE,
    MAGIC,
    NULL_HANDLE,
    VERSION,
    ClassFlag,
    Marker,
    PrimitiveKind,
)
from jaded.stream.reader import ByteReader, ByteSource

__all__ = [
    "ByteReader",
    "ByteSource",
    "ClassFlag",
    "Marker",
    "PrimitiveKind",
    "INITIAL_HANDLE",
    "MAGIC",
    "NULL_HANDLE",
    "VERSION",
]
