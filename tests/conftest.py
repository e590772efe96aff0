"""Shared test fixtures for jaded.

Fixtures defined here are available to all tests in the suite without
needing an explicit import.  ``StreamBuilder`` writes serialization
streams byte by byte so tests can describe the exact records they feed to
the parser; keep domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import struct
from typing import Sequence

import pytest

from jaded.stream.markers import INITIAL_HANDLE, Marker


class StreamBuilder:
    """Fluent writer of Java serialization stream bytes (tests only).

    Every method appends to the stream and returns the builder.  Class
    descriptors are written without their superclass record, which the
    caller appends next (usually ``.null()``).
    """

    def __init__(self, header: bool = True) -> None:
        self._buffer = bytearray()
        if header:
            self.u16(0xACED).u16(5)

    # -- primitives --------------------------------------------------------

    def raw(self, data: bytes | Sequence[int]) -> "StreamBuilder":
        self._buffer += bytes(data)
        return self

    def u8(self, value: int) -> "StreamBuilder":
        return self.raw(struct.pack(">B", value))

    def u16(self, value: int) -> "StreamBuilder":
        return self.raw(struct.pack(">H", value))

    def u32(self, value: int) -> "StreamBuilder":
        return self.raw(struct.pack(">I", value))

    def u64(self, value: int) -> "StreamBuilder":
        return self.raw(struct.pack(">Q", value))

    def i16(self, value: int) -> "StreamBuilder":
        return self.raw(struct.pack(">h", value))

    def i32(self, value: int) -> "StreamBuilder":
        return self.raw(struct.pack(">i", value))

    def i64(self, value: int) -> "StreamBuilder":
        return self.raw(struct.pack(">q", value))

    def f32(self, value: float) -> "StreamBuilder":
        return self.raw(struct.pack(">f", value))

    def f64(self, value: float) -> "StreamBuilder":
        return self.raw(struct.pack(">d", value))

    def utf(self, text: str) -> "StreamBuilder":
        data = text.encode("utf-8")
        return self.u16(len(data)).raw(data)

    # -- records -----------------------------------------------------------

    def marker(self, marker: Marker) -> "StreamBuilder":
        return self.u8(marker)

    def null(self) -> "StreamBuilder":
        return self.marker(Marker.NULL)

    def reference(self, offset: int) -> "StreamBuilder":
        """Back reference to ``INITIAL_HANDLE + offset``."""
        return self.marker(Marker.REFERENCE).u32(INITIAL_HANDLE + offset)

    def string(self, text: str) -> "StreamBuilder":
        return self.marker(Marker.STRING).utf(text)

    def long_string(self, text: str) -> "StreamBuilder":
        data = text.encode("utf-8")
        return self.marker(Marker.LONG_STRING).u64(len(data)).raw(data)

    def block(self, data: bytes) -> "StreamBuilder":
        if len(data) > 0xFF:
            return self.marker(Marker.BLOCK_DATA_LONG).u32(len(data)).raw(data)
        return self.marker(Marker.BLOCK_DATA).u8(len(data)).raw(data)

    def end_block(self) -> "StreamBuilder":
        return self.marker(Marker.END_BLOCK_DATA)

    def reset(self) -> "StreamBuilder":
        return self.marker(Marker.RESET)

    def class_desc(
        self,
        name: str,
        fields: Sequence[tuple[str, str] | tuple[str, str, str]] = (),
        flags: int = 0x02,
        uid: int = 0,
    ) -> "StreamBuilder":
        """Write a class descriptor up to (not including) its superclass.

        ``fields`` holds ``(type_code, name)`` pairs, plus the type
        signature for ``L`` and ``[`` fields, which is written as a new
        string and so takes a handle of its own.
        """
        self.marker(Marker.CLASS_DESC).utf(name).u64(uid).u8(flags).u16(len(fields))
        for spec in fields:
            self.u8(ord(spec[0])).utf(spec[1])
            if len(spec) == 3:
                self.string(spec[2])  # type: ignore[misc]
        return self.end_block()

    def new_object(self) -> "StreamBuilder":
        return self.marker(Marker.OBJECT)

    def build(self) -> bytes:
        return bytes(self._buffer)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def stream_builder() -> type[StreamBuilder]:
    """Return the ``StreamBuilder`` class, for tests that need several streams."""
    return StreamBuilder


@pytest.fixture()
def stream() -> StreamBuilder:
    """Return a builder primed with a valid stream header."""
    return StreamBuilder()


@pytest.fixture()
def hello_world_stream() -> bytes:
    """A stream holding the short string ``"helloWorld"``."""
    return StreamBuilder().string("helloWorld").build()


@pytest.fixture()
def boxed_integer_stream() -> bytes:
    """A ``java.lang.Integer`` holding 42, as ``ObjectOutputStream`` writes it."""
    return (
        StreamBuilder()
        .new_object()
        .class_desc("java.lang.Integer", [("I", "value")], uid=0x12E2A0A4F7818738)
        .class_desc("java.lang.Number", uid=0x86AC951D0B94E08B)
        .null()
        .i32(42)
        .build()
    )


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "jaded"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"
