"""Unit tests for jaded.convert.converters: Value to Python conversion."""
from __future__ import annotations

import pytest

from jaded.convert.converters import (
    BOOLEAN,
    BYTE,
    CHAR,
    DOUBLE,
    FLOAT,
    INT,
    LONG,
    SHORT,
    STRING,
    boxed,
    by_class,
    convert,
    list_of,
    of_class,
    optional,
)
from jaded.errors import (
    ConversionError,
    FieldNotFoundError,
    IncorrectClassError,
    InvalidTypeError,
    NullPointerError,
    UnexpectedClassError,
)
from jaded.model.values import NULL, Array, JavaString, ObjectData, Primitive, PrimitiveArray
from jaded.stream.markers import PrimitiveKind


def _boxed(class_name: str, kind: PrimitiveKind, value: object) -> ObjectData:
    return ObjectData(class_name, {"value": Primitive(kind, value)})  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------


class TestString:
    def test_java_string(self) -> None:
        assert STRING.from_value(JavaString("hi")) == "hi"

    def test_null_is_null_pointer(self) -> None:
        with pytest.raises(NullPointerError):
            STRING.from_value(NULL)

    def test_other_values_are_invalid(self) -> None:
        with pytest.raises(InvalidTypeError) as exc_info:
            STRING.from_value(Primitive(PrimitiveKind.INT, 1))
        assert exc_info.value.expected == "string"


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


class TestPrimitives:
    @pytest.mark.parametrize(
        "converter, kind, boxed_class, value",
        [
            (BYTE, PrimitiveKind.BYTE, "java.lang.Byte", 200),
            (SHORT, PrimitiveKind.SHORT, "java.lang.Short", -5),
            (INT, PrimitiveKind.INT, "java.lang.Integer", 42),
            (LONG, PrimitiveKind.LONG, "java.lang.Long", 2**40),
            (FLOAT, PrimitiveKind.FLOAT, "java.lang.Float", 1.5),
            (DOUBLE, PrimitiveKind.DOUBLE, "java.lang.Double", 2.25),
            (CHAR, PrimitiveKind.CHAR, "java.lang.Character", "z"),
            (BOOLEAN, PrimitiveKind.BOOLEAN, "java.lang.Boolean", True),
        ],
    )
    def test_raw_and_boxed(self, converter, kind: PrimitiveKind, boxed_class: str, value: object) -> None:
        assert converter.from_value(Primitive(kind, value)) == value  # type: ignore[arg-type]
        assert converter.from_value(_boxed(boxed_class, kind, value)) == value

    def test_wrong_primitive_kind(self) -> None:
        with pytest.raises(InvalidTypeError) as exc_info:
            INT.from_value(Primitive(PrimitiveKind.LONG, 1))
        assert exc_info.value.expected == "Integer"

    def test_wrong_boxed_class(self) -> None:
        with pytest.raises(InvalidTypeError) as exc_info:
            INT.from_value(_boxed("java.lang.Long", PrimitiveKind.LONG, 1))
        assert exc_info.value.expected == "java.lang.Integer"

    def test_boxed_without_value_field(self) -> None:
        with pytest.raises(FieldNotFoundError):
            INT.from_value(ObjectData("java.lang.Integer"))

    def test_boxed_with_wrong_value_kind(self) -> None:
        with pytest.raises(InvalidTypeError):
            INT.from_value(_boxed("java.lang.Integer", PrimitiveKind.SHORT, 1))

    def test_null_primitive(self) -> None:
        with pytest.raises(InvalidTypeError):
            INT.from_value(NULL)


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


class TestCombinators:
    def test_optional(self) -> None:
        assert optional(STRING).from_value(NULL) is None
        assert optional(STRING).from_value(JavaString("x")) == "x"

    def test_list_of_object_array(self) -> None:
        value = Array((JavaString("a"), JavaString("b")))
        assert list_of(STRING).from_value(value) == ["a", "b"]

    def test_list_of_boxed_array(self) -> None:
        value = Array(
            (
                _boxed("java.lang.Integer", PrimitiveKind.INT, 1),
                _boxed("java.lang.Integer", PrimitiveKind.INT, 2),
            )
        )
        assert list_of(INT).from_value(value) == [1, 2]

    def test_list_of_primitive_array(self) -> None:
        value = PrimitiveArray(tuple(Primitive(PrimitiveKind.INT, i) for i in range(3)))
        assert list_of(INT).from_value(value) == [0, 1, 2]

    def test_list_of_rejects_non_arrays(self) -> None:
        with pytest.raises(InvalidTypeError):
            list_of(INT).from_value(JavaString("x"))

    def test_nested(self) -> None:
        value = Array((JavaString("a"), NULL))
        assert list_of(optional(STRING)).from_value(value) == ["a", None]
        with pytest.raises(NullPointerError):
            list_of(STRING).from_value(value)

    def test_boxed_delegates(self) -> None:
        assert boxed(INT).from_value(Primitive(PrimitiveKind.INT, 3)) == 3

    def test_of_class(self) -> None:
        converter = of_class("java.lang.Integer", INT)
        assert converter.from_value(_boxed("java.lang.Integer", PrimitiveKind.INT, 9)) == 9
        with pytest.raises(IncorrectClassError) as exc_info:
            converter.from_value(ObjectData("java.lang.Object"))
        assert exc_info.value.found == "java.lang.Object"

    def test_by_class(self) -> None:
        converter = by_class({"java.lang.Integer": INT, "java.lang.Long": LONG})
        assert converter.from_value(_boxed("java.lang.Long", PrimitiveKind.LONG, 5)) == 5
        with pytest.raises(UnexpectedClassError) as exc_info:
            converter.from_value(ObjectData("java.lang.Short"))
        assert exc_info.value.class_name == "java.lang.Short"

    def test_repr(self) -> None:
        assert repr(optional(list_of(INT))) == "optional(list_of(INT))"


class TestConvert:
    def test_convert_entry_point(self) -> None:
        assert convert(JavaString("x"), STRING) == "x"

    def test_class_with_from_value_classmethod(self) -> None:
        class Point:
            def __init__(self, x: int, y: int) -> None:
                self.x = x
                self.y = y

            @classmethod
            def from_value(cls, value) -> "Point":
                data = value.object_data()
                return cls(data.get_field_as("x", INT), data.get_field_as("y", INT))

        value = ObjectData(
            "Point",
            {"x": Primitive(PrimitiveKind.INT, 1), "y": Primitive(PrimitiveKind.INT, 2)},
        )
        point = convert(value, Point)
        assert (point.x, point.y) == (1, 2)

    def test_errors_share_a_base(self) -> None:
        with pytest.raises(ConversionError):
            convert(NULL, STRING)
