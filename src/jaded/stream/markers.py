"""Protocol vocabulary for the Java Object Serialization Stream Protocol.

Defines the stream header constants, the record markers that prefix every
entry in a stream, the legal class-descriptor flag combinations and the
primitive type codes used in field descriptors and array class names.

Reference: *Java Object Serialization Specification*, chapter 6
("Object Serialization Stream Protocol").
"""
from __future__ import annotations

from enum import Enum, IntEnum
from typing import Final

from jaded.errors import InvalidStreamError, UnknownMarkerError, UnrecognisedTypeError

# ---------------------------------------------------------------------------
# Header and handle constants
# ---------------------------------------------------------------------------

MAGIC: Final[int] = 0xACED
VERSION: Final[int] = 0x0005

#: Handle given to ``null``. The protocol assigns no handle to null
#: references; using a reserved value lets every record be treated alike.
NULL_HANDLE: Final[int] = 0

#: Handle assigned to the first registered entry (``baseWireHandle``).
INITIAL_HANDLE: Final[int] = 0x7E0000

# Class descriptor flag bits (``SC_*`` in ``java.io.ObjectStreamConstants``)
SC_WRITE_METHOD: Final[int] = 0x01
SC_SERIALIZABLE: Final[int] = 0x02
SC_EXTERNALIZABLE: Final[int] = 0x04
SC_BLOCK_DATA: Final[int] = 0x08


class Marker(IntEnum):
    """Tag byte that introduces each record in a stream."""

    NULL = 0x70
    REFERENCE = 0x71
    CLASS_DESC = 0x72
    OBJECT = 0x73
    STRING = 0x74
    ARRAY = 0x75
    CLASS = 0x76
    BLOCK_DATA = 0x77
    END_BLOCK_DATA = 0x78
    RESET = 0x79
    BLOCK_DATA_LONG = 0x7A
    EXCEPTION = 0x7B
    LONG_STRING = 0x7C
    PROXY_CLASS_DESC = 0x7D
    ENUM = 0x7E

    @classmethod
    def from_byte(cls, mark: int) -> "Marker":
        """Map a tag byte to its marker.

        Raises
        ------
        jaded.errors.UnknownMarkerError
            If ``mark`` is outside ``0x70``-``0x7E``.
        """
        try:
            return cls(mark)
        except ValueError:
            raise UnknownMarkerError(mark) from None


class ClassFlag(Enum):
    """The four legal combinations of class descriptor flags.

    NO_WRITE
        Serializable class using default field serialization only.
    WRITE
        Serializable class with a ``writeObject`` method; its field data is
        followed by an annotation block.
    EXT
        Externalizable class written with protocol version 1 (no block
        data framing).
    EXT_BLOCK
        Externalizable class written in block data mode; the object's
        content is only annotation data.
    """

    NO_WRITE = "no_write"
    WRITE = "write"
    EXT = "ext"
    EXT_BLOCK = "ext_block"

    @classmethod
    def from_byte(cls, byte: int) -> "ClassFlag":
        """Decode the flag byte of a class descriptor.

        Bits other than the four recognised ones (for example ``SC_ENUM``)
        are ignored; a byte with neither the serializable nor the
        externalizable bit set is invalid.

        Raises
        ------
        jaded.errors.InvalidStreamError
            If no legal combination matches.
        """
        if byte & SC_SERIALIZABLE:
            return cls.WRITE if byte & SC_WRITE_METHOD else cls.NO_WRITE
        if byte & SC_EXTERNALIZABLE:
            return cls.EXT_BLOCK if byte & SC_BLOCK_DATA else cls.EXT
        raise InvalidStreamError("Unexpected class flag")


class PrimitiveKind(Enum):
    """Java primitive types keyed by their field type code."""

    BYTE = "B"
    CHAR = "C"
    DOUBLE = "D"
    FLOAT = "F"
    INT = "I"
    LONG = "J"
    SHORT = "S"
    BOOLEAN = "Z"

    @property
    def type_code(self) -> str:
        return self.value

    @property
    def boxed_class(self) -> str:
        """Fully qualified name of the boxed ``java.lang`` wrapper class."""
        return _BOXED_CLASSES[self]

    @property
    def width(self) -> int:
        """Number of bytes one value occupies on the wire."""
        return _WIDTHS[self]

    @classmethod
    def from_code(cls, type_code: str) -> "PrimitiveKind":
        """Return the kind for a type code.

        Raises
        ------
        jaded.errors.UnrecognisedTypeError
            If ``type_code`` is not one of ``B C D F I J S Z``.
        """
        try:
            return cls(type_code)
        except ValueError:
            raise UnrecognisedTypeError(type_code) from None


#: Type codes whose field values are nested stream records.
REFERENCE_TYPE_CODES: Final[frozenset[str]] = frozenset({"L", "["})

_BOXED_CLASSES: Final[dict[PrimitiveKind, str]] = {
    PrimitiveKind.BYTE: "java.lang.Byte",
    PrimitiveKind.CHAR: "java.lang.Character",
    PrimitiveKind.DOUBLE: "java.lang.Double",
    PrimitiveKind.FLOAT: "java.lang.Float",
    PrimitiveKind.INT: "java.lang.Integer",
    PrimitiveKind.LONG: "java.lang.Long",
    PrimitiveKind.SHORT: "java.lang.Short",
    PrimitiveKind.BOOLEAN: "java.lang.Boolean",
}

_WIDTHS: Final[dict[PrimitiveKind, int]] = {
    PrimitiveKind.BYTE: 1,
    PrimitiveKind.CHAR: 2,
    PrimitiveKind.DOUBLE: 8,
    PrimitiveKind.FLOAT: 4,
    PrimitiveKind.INT: 4,
    PrimitiveKind.LONG: 8,
    PrimitiveKind.SHORT: 2,
    PrimitiveKind.BOOLEAN: 1,
}
