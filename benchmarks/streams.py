"""Sample serialization streams shared by the jaded benchmarks.

The streams are assembled byte by byte in the layout ``ObjectOutputStream``
produces, so the benchmarks need no Java toolchain.
"""
from __future__ import annotations

import struct

_HEADER = b"\xac\xed\x00\x05"
_INITIAL_HANDLE = 0x7E0000


def _utf(text: str) -> bytes:
    data = text.encode("utf-8")
    return struct.pack(">H", len(data)) + data


def _class_desc(name: str, fields: bytes = b"", field_count: int = 0) -> bytes:
    """Serializable class descriptor with no superclass."""
    return (
        b"\x72" + _utf(name) + struct.pack(">QBH", 0, 0x02, field_count) + fields + b"\x78\x70"
    )


def node_chain(length: int) -> bytes:
    """A singly linked list of ``length`` ``Node`` objects."""
    node_desc = _class_desc("Node", b"L" + _utf("next") + b"\x74" + _utf("LNode;"), 1)
    body = b"\x73" + node_desc
    for _ in range(length - 1):
        body += b"\x73\x71" + struct.pack(">I", _INITIAL_HANDLE)
    return _HEADER + body + b"\x70"


def int_array(length: int) -> bytes:
    """An ``int[]`` holding ``0 .. length-1``."""
    values = struct.pack(f">{length}i", *range(length))
    return _HEADER + b"\x75" + _class_desc("[I") + struct.pack(">I", length) + values


def string_array(count: int) -> bytes:
    """A ``String[]`` of ``count`` distinct strings."""
    items = b"".join(b"\x74" + _utf(f"item-{i}") for i in range(count))
    return (
        _HEADER + b"\x75" + _class_desc("[Ljava.lang.String;") + struct.pack(">I", count) + items
    )


SAMPLES: dict[str, bytes] = {
    "node_chain_50": node_chain(50),
    "int_array_1000": int_array(1000),
    "string_array_200": string_array(200),
}
