"""Typed conversion of decoded values into plain Python values.

A converter is anything with a ``from_value(value)`` method, which includes
classes defining a ``from_value`` classmethod.  Converters compose, so the
shape of a Java field can be described directly::

    from jaded.convert import INT, STRING, list_of, optional

    names = person.get_field_as("nicknames", optional(list_of(STRING)))
    age = person.get_field_as("age", INT)

Primitive converters accept both the raw primitive and its boxed
``java.lang`` object, so an ``int`` field and an ``Integer`` field convert
the same way.
"""
from __future__ import annotations

from typing import Generic, Mapping, Protocol, TypeVar

from jaded.errors import (
    FieldNotFoundError,
    IncorrectClassError,
    InvalidTypeError,
    NullPointerError,
    UnexpectedClassError,
)
from jaded.model.values import (
    Array,
    JavaString,
    Null,
    ObjectData,
    Primitive,
    PrimitiveArray,
    Value,
)
from jaded.stream.markers import PrimitiveKind

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class FromJava(Protocol[T_co]):
    """Anything that can build a Python value from a decoded ``Value``."""

    def from_value(self, value: Value) -> T_co:
        ...


# ---------------------------------------------------------------------------
# Leaf converters
# ---------------------------------------------------------------------------


class StringConverter:
    """``java.lang.String`` to ``str``; ``null`` is a ``NullPointerError``."""

    def from_value(self, value: Value) -> str:
        if isinstance(value, JavaString):
            return value.value
        if isinstance(value, Null):
            raise NullPointerError()
        raise InvalidTypeError("string")

    def __repr__(self) -> str:
        return "STRING"


class PrimitiveConverter(Generic[T]):
    """A primitive kind, raw or boxed, to its Python equivalent.

    Parameters
    ----------
    kind:
        The primitive kind to accept.
    """

    def __init__(self, kind: PrimitiveKind) -> None:
        self.kind = kind

    def from_value(self, value: Value) -> T:
        if isinstance(value, ObjectData):
            return self._unbox(value)
        if isinstance(value, Primitive) and value.kind is self.kind:
            return value.value  # type: ignore[return-value]
        raise InvalidTypeError(self._short_name)

    def _unbox(self, data: ObjectData) -> T:
        boxed_class = self.kind.boxed_class
        if data.class_name != boxed_class:
            raise InvalidTypeError(boxed_class)
        inner = data.get_field("value")
        if inner is None:
            raise FieldNotFoundError("value")
        if isinstance(inner, Primitive) and inner.kind is self.kind:
            return inner.value  # type: ignore[return-value]
        raise InvalidTypeError(self.kind.name.lower())

    @property
    def _short_name(self) -> str:
        return self.kind.boxed_class.rsplit(".", 1)[-1]

    def __repr__(self) -> str:
        return self.kind.name


STRING = StringConverter()
BYTE: PrimitiveConverter[int] = PrimitiveConverter(PrimitiveKind.BYTE)
SHORT: PrimitiveConverter[int] = PrimitiveConverter(PrimitiveKind.SHORT)
INT: PrimitiveConverter[int] = PrimitiveConverter(PrimitiveKind.INT)
LONG: PrimitiveConverter[int] = PrimitiveConverter(PrimitiveKind.LONG)
FLOAT: PrimitiveConverter[float] = PrimitiveConverter(PrimitiveKind.FLOAT)
DOUBLE: PrimitiveConverter[float] = PrimitiveConverter(PrimitiveKind.DOUBLE)
CHAR: PrimitiveConverter[str] = PrimitiveConverter(PrimitiveKind.CHAR)
BOOLEAN: PrimitiveConverter[bool] = PrimitiveConverter(PrimitiveKind.BOOLEAN)


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


class OptionalConverter(Generic[T]):
    def __init__(self, inner: FromJava[T]) -> None:
        self.inner = inner

    def from_value(self, value: Value) -> T | None:
        if isinstance(value, Null):
            return None
        return self.inner.from_value(value)

    def __repr__(self) -> str:
        return f"optional({self.inner!r})"


class ListConverter(Generic[T]):
    def __init__(self, inner: FromJava[T]) -> None:
        self.inner = inner

    def from_value(self, value: Value) -> list[T]:
        if isinstance(value, Array):
            return [self.inner.from_value(item) for item in value.items]
        if isinstance(value, PrimitiveArray):
            # Elements are already Primitive values.
            return [self.inner.from_value(item) for item in value.items]
        raise InvalidTypeError("array")

    def __repr__(self) -> str:
        return f"list_of({self.inner!r})"


class BoxedConverter(Generic[T]):
    """Delegates unchanged; mirrors a boxed field in a converter tree."""

    def __init__(self, inner: FromJava[T]) -> None:
        self.inner = inner

    def from_value(self, value: Value) -> T:
        return self.inner.from_value(value)

    def __repr__(self) -> str:
        return f"boxed({self.inner!r})"


class ClassConverter(Generic[T]):
    """Checks the class name of an object before delegating."""

    def __init__(self, class_name: str, inner: FromJava[T]) -> None:
        self.class_name = class_name
        self.inner = inner

    def from_value(self, value: Value) -> T:
        found = value.object_data().class_name
        if found != self.class_name:
            raise IncorrectClassError(self.class_name, found)
        return self.inner.from_value(value)


class DispatchConverter(Generic[T]):
    """Picks a converter by the class name of an object."""

    def __init__(self, converters: Mapping[str, FromJava[T]]) -> None:
        self.converters = dict(converters)

    def from_value(self, value: Value) -> T:
        class_name = value.object_data().class_name
        try:
            converter = self.converters[class_name]
        except KeyError:
            raise UnexpectedClassError(class_name) from None
        return converter.from_value(value)


def optional(inner: FromJava[T]) -> OptionalConverter[T]:
    """Accept ``null`` as ``None``; anything else goes to ``inner``."""
    return OptionalConverter(inner)


def list_of(inner: FromJava[T]) -> ListConverter[T]:
    """Convert every element of an object or primitive array with ``inner``."""
    return ListConverter(inner)


def boxed(inner: FromJava[T]) -> BoxedConverter[T]:
    return BoxedConverter(inner)


def of_class(class_name: str, inner: FromJava[T]) -> ClassConverter[T]:
    """Require an object of exactly ``class_name``.

    Raises ``IncorrectClassError`` for objects of any other class and
    ``InvalidTypeError`` for values that are not objects.
    """
    return ClassConverter(class_name, inner)


def by_class(converters: Mapping[str, FromJava[T]]) -> DispatchConverter[T]:
    """Choose a converter from ``converters`` by the object's class name.

    Raises ``UnexpectedClassError`` for class names not in the mapping.
    """
    return DispatchConverter(converters)


def convert(value: Value, converter: FromJava[T]) -> T:
    """Convert ``value`` with ``converter``.

    Raises
    ------
    ConversionError
        If ``value`` does not have the shape ``converter`` expects.
    """
    return converter.from_value(value)
