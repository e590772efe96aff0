"""Sequential reader for annotation data.

Classes with custom ``writeObject`` or ``writeExternal`` methods write a
free-form mix of primitives and objects after (or instead of) their field
data.  ``AnnotationIter`` reads that mix back in the same order it was
written, much like ``java.io.ObjectInputStream`` would inside the class's
``readObject`` method::

    annotation = obj.get_annotation(0)
    size = annotation.read_i32()
    entries = [annotation.read_object_as(STRING) for _ in range(size)]

Consecutive primitives are coalesced into block data in the stream, so a
numeric read may consume part of a block; an object is always a whole
content item.
"""
from __future__ import annotations

import struct
from typing import TYPE_CHECKING, Sequence

from jaded.errors import InvalidTypeError, NullPointerError, UnexpectedBlockDataError
from jaded.model.values import Content, ObjectContent, Value

if TYPE_CHECKING:
    from jaded.convert.converters import FromJava, T

_I16 = struct.Struct(">h")
_U16 = struct.Struct(">H")
_I32 = struct.Struct(">i")
_I64 = struct.Struct(">q")
_F32 = struct.Struct(">f")
_F64 = struct.Struct(">d")


class AnnotationIter:
    """Cursor over the content items of one annotation.

    The cursor is in one of three states: positioned on a block (with some
    of its bytes possibly consumed already), positioned on an object, or
    complete.

    Parameters
    ----------
    contents:
        The content items of the annotation, in stream order.
    """

    def __init__(self, contents: Sequence[Content]) -> None:
        self._queue: list[Content] = list(contents)
        self._block: bytes | None = None
        self._value: Value | None = None
        self._consumed: bool = False
        self._switch()

    def _switch(self) -> None:
        self._block = None
        self._value = None
        self._consumed = False
        if not self._queue:
            return
        item = self._queue.pop(0)
        if isinstance(item, ObjectContent):
            self._value = item.value
        else:
            self._block = item.as_block()

    @property
    def complete(self) -> bool:
        """True once every item has been read."""
        self._advance()
        return self._block is None and self._value is None

    def _advance(self) -> None:
        # Move on only when the current item is used up; a partially read
        # block stays current.
        while (self._block is not None and not self._block) or (
            self._value is not None and self._consumed
        ):
            self._switch()

    def _take(self, count: int) -> bytes:
        self._advance()
        if self._block is not None:
            if len(self._block) < count:
                raise InvalidTypeError("Not enough data")
            data, self._block = self._block[:count], self._block[count:]
            return data
        if self._value is not None:
            raise InvalidTypeError("Expected block data")
        raise InvalidTypeError("End of Annotations")

    # ------------------------------------------------------------------
    # Primitive reads
    # ------------------------------------------------------------------

    def read_u8(self) -> int:
        """Read one unsigned byte, like ``ObjectInputStream.readUnsignedByte``.

        Raises
        ------
        InvalidTypeError
            If there is no data left, the current item is an object, or
            the current block is exhausted mid-value.
        """
        return self._take(1)[0]

    def read_boolean(self) -> bool:
        return self.read_u8() == 1

    def read_i16(self) -> int:
        return _I16.unpack(self._take(2))[0]

    def read_i32(self) -> int:
        return _I32.unpack(self._take(4))[0]

    def read_i64(self) -> int:
        return _I64.unpack(self._take(8))[0]

    def read_f32(self) -> float:
        return _F32.unpack(self._take(4))[0]

    def read_f64(self) -> float:
        return _F64.unpack(self._take(8))[0]

    def read_char(self) -> str:
        """Read a UTF-16 code unit as a one-character string.

        Lone surrogates raise ``InvalidTypeError``.
        """
        code = _U16.unpack(self._take(2))[0]
        if 0xD800 <= code <= 0xDFFF:
            raise InvalidTypeError("valid character")
        return chr(code)

    # ------------------------------------------------------------------
    # Object reads
    # ------------------------------------------------------------------

    def read_object(self) -> Value:
        """Read the next whole object.

        Raises
        ------
        UnexpectedBlockDataError
            If the next item is block data.
        NullPointerError
            If the annotation has no items left.
        """
        self._advance()
        if self._value is not None:
            self._consumed = True
            return self._value
        if self._block is not None:
            raise UnexpectedBlockDataError(self._block)
        raise NullPointerError()

    def read_object_as(self, converter: "FromJava[T]") -> "T":
        """Read the next object and convert it with ``converter``."""
        return converter.from_value(self.read_object())

    def remaining_block(self) -> bytes:
        """Consume and return whatever is left of the current block."""
        self._advance()
        if self._block is None:
            raise InvalidTypeError("Expected block data")
        data, self._block = self._block, b""
        return data

