"""Big-endian primitive reader over a sequential byte source.

``ByteReader`` is the only component that touches the raw input.  It
accepts an in-memory buffer or any binary file-like object and offers
fixed-width unsigned reads plus the two length-prefixed string forms used
by the serialization protocol.  A short read is always an error; nothing is
silently truncated.
"""
from __future__ import annotations

import io
import struct
from typing import BinaryIO, Final, Union

from jaded.errors import EndOfStreamError, InvalidUtf8Error
from jaded.stream.markers import Marker

_U16: Final[struct.Struct] = struct.Struct(">H")
_U32: Final[struct.Struct] = struct.Struct(">I")
_U64: Final[struct.Struct] = struct.Struct(">Q")
_I16: Final[struct.Struct] = struct.Struct(">h")
_I32: Final[struct.Struct] = struct.Struct(">i")
_I64: Final[struct.Struct] = struct.Struct(">q")
_F32: Final[struct.Struct] = struct.Struct(">f")
_F64: Final[struct.Struct] = struct.Struct(">d")

# Upper bound on a single read from the source so that a corrupt length
# prefix cannot request an enormous allocation up front.
_CHUNK_SIZE: Final[int] = 1 << 16

ByteSource = Union[bytes, bytearray, memoryview, BinaryIO]


class ByteReader:
    """Sequential reader of big-endian protocol primitives.

    Parameters
    ----------
    source:
        The bytes to read, or a binary stream positioned at the first byte
        to read.
    """

    __slots__ = ("_stream", "_position", "_lookahead")

    def __init__(self, source: ByteSource) -> None:
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._stream: BinaryIO = io.BytesIO(bytes(source))
        else:
            self._stream = source
        self._position: int = 0
        self._lookahead: bytes = b""

    @property
    def position(self) -> int:
        """Number of bytes consumed so far."""
        return self._position

    # ------------------------------------------------------------------
    # Raw reads
    # ------------------------------------------------------------------

    def read_bytes(self, count: int) -> bytes:
        """Read exactly ``count`` bytes.

        Raises
        ------
        EndOfStreamError
            If fewer than ``count`` bytes remain.
        """
        if count == 0:
            return b""
        chunks: list[bytes] = [self._lookahead]
        remaining = count - len(self._lookahead)
        self._lookahead = b""
        while remaining > 0:
            chunk = self._stream.read(min(remaining, _CHUNK_SIZE))
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        data = b"".join(chunks)
        self._position += len(data)
        if len(data) != count:
            raise EndOfStreamError(count, len(data))
        return data

    def at_eof(self) -> bool:
        """Return True if no bytes remain, without consuming any."""
        if not self._lookahead:
            self._lookahead = self._stream.read(1)
        return not self._lookahead

    # ------------------------------------------------------------------
    # Fixed-width integers
    # ------------------------------------------------------------------

    def read_u8(self) -> int:
        return self.read_bytes(1)[0]

    def read_u16(self) -> int:
        return _U16.unpack(self.read_bytes(2))[0]

    def read_u32(self) -> int:
        return _U32.unpack(self.read_bytes(4))[0]

    def read_u64(self) -> int:
        return _U64.unpack(self.read_bytes(8))[0]

    def read_i16(self) -> int:
        return _I16.unpack(self.read_bytes(2))[0]

    def read_i32(self) -> int:
        return _I32.unpack(self.read_bytes(4))[0]

    def read_i64(self) -> int:
        return _I64.unpack(self.read_bytes(8))[0]

    def read_f32(self) -> float:
        return _F32.unpack(self.read_bytes(4))[0]

    def read_f64(self) -> float:
        return _F64.unpack(self.read_bytes(8))[0]

    # ------------------------------------------------------------------
    # Strings and markers
    # ------------------------------------------------------------------

    def read_string(self) -> str:
        """Read a UTF-8 string prefixed by a 16-bit length."""
        return self._decode(self.read_bytes(self.read_u16()))

    def read_long_string(self) -> str:
        """Read a UTF-8 string prefixed by a 64-bit length."""
        return self._decode(self.read_bytes(self.read_u64()))

    def read_marker(self) -> Marker:
        """Read one tag byte and map it to a ``Marker``."""
        return Marker.from_byte(self.read_u8())

    @staticmethod
    def _decode(data: bytes) -> str:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            raise InvalidUtf8Error(data) from None
