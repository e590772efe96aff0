"""Public value tree produced by the parser.

Every value handed to callers is a frozen dataclass that owns all of its
children, so trees are detached from the parser that built them and can
never contain reference cycles.  A reference back to an enclosing object
that was still being decoded is represented by a ``Loop`` marker instead.

The variants are:

``Null``           a Java ``null`` reference (use the ``NULL`` singleton)
``ObjectData``     an ordinary object: class name, fields, annotations
``JavaString``     a ``java.lang.String``
``JavaEnum``       an enum constant: class name and constant name
``Primitive``      an ``int``, ``long``, ``double`` ... field value
``Array``          an array of objects (or of nested arrays)
``PrimitiveArray`` an array of primitives
``JavaClass``      a serialized ``Class`` object, e.g. ``String.class``
``Loop``           a back reference to an enclosing value

Variants share the ``Value`` base class, whose checked accessors raise
``InvalidTypeError`` when called on the wrong variant.
"""
from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from jaded.errors import (
    FieldNotFoundError,
    InvalidTypeError,
    MissingAnnotationError,
    UnexpectedBlockDataError,
)
from jaded.stream.markers import PrimitiveKind

if TYPE_CHECKING:
    from jaded.convert.annotations import AnnotationIter
    from jaded.convert.converters import FromJava, T


class Value:
    """Base class of all decoded values."""

    __slots__ = ()

    def is_null(self) -> bool:
        """Return True if this value is a null reference."""
        return False

    def object_data(self) -> "ObjectData":
        """Return this value as an object, or raise ``InvalidTypeError``."""
        raise InvalidTypeError("object")

    def string(self) -> str:
        """Return the text of a ``JavaString``.

        Other values are never converted to text; they raise
        ``InvalidTypeError``.
        """
        raise InvalidTypeError("string")

    def primitive(self) -> "Primitive":
        raise InvalidTypeError("primitive")

    def array(self) -> tuple["Value", ...]:
        """Return the elements of an object array.

        A primitive array is not an object array; see ``primitive_array``.
        """
        raise InvalidTypeError("array")

    def primitive_array(self) -> tuple["Primitive", ...]:
        raise InvalidTypeError("primitive array")

    def enum_data(self) -> tuple[str, str]:
        """Return ``(class_name, constant_name)`` of an enum constant."""
        raise InvalidTypeError("enum")


# ---------------------------------------------------------------------------
# Scalar-like variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Null(Value):
    """A Java ``null`` reference."""

    def is_null(self) -> bool:
        return True


NULL = Null()


@dataclass(frozen=True, slots=True)
class Primitive(Value):
    """A Java primitive value.

    ``value`` holds the natural Python equivalent: ``int`` for byte, short,
    int and long (bytes are unsigned, 0-255), ``float`` for float and
    double, ``bool`` for boolean and a one-character ``str`` for char.

    Boxed primitives (``java.lang.Integer`` and friends) are decoded as
    ordinary objects, not as ``Primitive``.
    """

    kind: PrimitiveKind
    value: int | float | bool | str

    def primitive(self) -> "Primitive":
        return self

    def __str__(self) -> str:
        if self.kind is PrimitiveKind.BYTE:
            return f"{self.value:X}"
        if self.kind is PrimitiveKind.BOOLEAN:
            return "true" if self.value else "false"
        if self.kind is PrimitiveKind.FLOAT:
            return _format_float(float(self.value), single=True)
        if self.kind is PrimitiveKind.DOUBLE:
            return _format_float(float(self.value), single=False)
        return str(self.value)


def _format_float(number: float, single: bool) -> str:
    """Format like Java: integral values without a fraction, and floats
    with the shortest text that reads back to the same 32-bit value."""
    if not math.isfinite(number):
        return "NaN" if math.isnan(number) else ("inf" if number > 0 else "-inf")
    if number.is_integer() and abs(number) < 1e16:
        return str(int(number))
    if single:
        packed = struct.pack(">f", number)
        for precision in range(1, 10):
            text = f"{number:.{precision}g}"
            if struct.pack(">f", float(text)) == packed:
                return text
    return repr(number)


@dataclass(frozen=True, slots=True)
class JavaString(Value):
    """A ``java.lang.String``."""

    value: str

    def string(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class JavaEnum(Value):
    """An enum constant. Only the class and constant names are available."""

    class_name: str
    constant: str

    def enum_data(self) -> tuple[str, str]:
        return (self.class_name, self.constant)


@dataclass(frozen=True, slots=True)
class JavaClass(Value):
    """A serialized class object, e.g. ``java.lang.String.class``."""

    name: str


@dataclass(frozen=True, slots=True)
class Loop(Value):
    """A reference to a value that encloses this one.

    ``steps`` is zero or negative; its magnitude is the position of the
    target in the chain of objects that were under construction when the
    reference was read, counted from the outermost one.
    """

    steps: int


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Array(Value):
    """An array of objects, strings, enums or nested arrays."""

    items: tuple[Value, ...] = ()

    def array(self) -> tuple[Value, ...]:
        return self.items

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class PrimitiveArray(Value):
    """An array of one primitive kind, e.g. ``int[]``."""

    items: tuple[Primitive, ...] = ()

    def primitive_array(self) -> tuple[Primitive, ...]:
        return self.items

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class ObjectData(Value):
    """A deserialized Java object.

    Parameters
    ----------
    class_name:
        Fully qualified name of the object's class.
    fields:
        Field values by name, for every class in the hierarchy.
    annotations:
        Data written by custom ``writeObject``/``writeExternal`` methods;
        one entry per class in the hierarchy that wrote any, ordered from
        the root superclass down.
    """

    class_name: str
    fields: dict[str, Value] = field(default_factory=dict, hash=False)
    annotations: tuple[tuple["Content", ...], ...] = ()

    def object_data(self) -> "ObjectData":
        return self

    def get_field(self, name: str) -> Value | None:
        """Return the value of field ``name``.

        ``None`` means the field does not exist; a ``null`` field value is
        returned as ``NULL``.
        """
        return self.fields.get(name)

    def get_field_as(self, name: str, converter: "FromJava[T]") -> "T":
        """Return field ``name`` converted with ``converter``.

        Raises
        ------
        FieldNotFoundError
            If the object has no such field.
        ConversionError
            If the converter rejects the value.
        """
        value = self.fields.get(name)
        if value is None:
            raise FieldNotFoundError(name)
        return converter.from_value(value)

    def get_annotation(self, index: int) -> "AnnotationIter | None":
        """Return a reader over the annotation written by hierarchy level
        ``index``, or ``None`` if there is no such level.

        If ``Child`` extends ``Parent`` and both write annotations, index 0
        is ``Parent``'s data and index 1 is ``Child``'s.
        """
        from jaded.convert.annotations import AnnotationIter

        if not 0 <= index < len(self.annotations):
            return None
        return AnnotationIter(self.annotations[index])

    def require_annotation(self, index: int) -> "AnnotationIter":
        """Like ``get_annotation`` but raise ``MissingAnnotationError`` when
        hierarchy level ``index`` wrote no annotation."""
        annotation = self.get_annotation(index)
        if annotation is None:
            raise MissingAnnotationError(index)
        return annotation

    @property
    def annotation_count(self) -> int:
        """Number of hierarchy levels that wrote a non-empty annotation."""
        return sum(1 for anno in self.annotations if anno)

    @property
    def field_count(self) -> int:
        return len(self.fields)


# ---------------------------------------------------------------------------
# Stream content
# ---------------------------------------------------------------------------


class Content:
    """One top-level item read from a stream, or one annotation entry.

    Java code writing to an ``ObjectOutputStream`` can write objects, which
    are read back as ``ObjectContent``, or primitives, which arrive as raw
    ``BlockData``.  Primitives are not tagged in the stream (two shorts and
    one int produce identical bytes), so decoding block data is left to
    callers that know what to expect, typically via ``AnnotationIter``.
    """

    __slots__ = ()

    def as_value(self) -> Value:
        """Return the decoded value, or raise ``UnexpectedBlockDataError``."""
        raise NotImplementedError

    def as_block(self) -> bytes:
        """Return the raw bytes, or raise ``InvalidTypeError``."""
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class ObjectContent(Content):
    """A decoded object (or null, string, array ...)."""

    value: Value

    def as_value(self) -> Value:
        return self.value

    def as_block(self) -> bytes:
        raise InvalidTypeError("block data")


@dataclass(frozen=True, slots=True)
class BlockData(Content):
    """Raw primitive data."""

    data: bytes

    def as_value(self) -> Value:
        raise UnexpectedBlockDataError(self.data)

    def as_block(self) -> bytes:
        return self.data


AnyValue = Union[
    Null,
    ObjectData,
    JavaString,
    JavaEnum,
    Primitive,
    Array,
    PrimitiveArray,
    JavaClass,
    Loop,
]
