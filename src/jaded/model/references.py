"""Internal, handle-indexed records built while a stream is decoded.

These types live in the parser's handle table for as long as the parser
does.  Edges between records are integer handles rather than Python object
references, so a cyclic Java object graph is stored without reference
cycles; ``Parser`` turns them into owned ``Value`` trees on demand.

Nothing here is part of the public API.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from jaded.errors import InvalidReferenceError
from jaded.model.values import Primitive
from jaded.stream.markers import ClassFlag

# ---------------------------------------------------------------------------
# Annotation entries and object fields
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AnnotationReference:
    """An object written into an annotation, by handle."""

    handle: int


@dataclass(frozen=True, slots=True)
class AnnotationBlock:
    """Raw block data written into an annotation."""

    data: bytes


Annotation = Union[AnnotationReference, AnnotationBlock]


@dataclass(frozen=True, slots=True)
class PrimitiveField:
    value: Primitive


@dataclass(frozen=True, slots=True)
class ReferenceField:
    """A field pointing at a fully registered entry."""

    handle: int


@dataclass(frozen=True, slots=True)
class LoopField:
    """A field pointing at an object that was still being decoded.

    ``position`` is the index of the target on the allocation stack at the
    time the field was read.
    """

    position: int


Field = Union[PrimitiveField, ReferenceField, LoopField]


# ---------------------------------------------------------------------------
# Class descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Name and one-character type code of a serializable field."""

    name: str
    type_code: str


@dataclass(frozen=True, slots=True)
class ClassOutline:
    """A decoded class descriptor.

    ``serial_uid`` and ``annotations`` are kept for inspection only; they do
    not influence decoding.
    """

    class_name: str
    serial_uid: int
    super_class: int | None
    fields: tuple[FieldSpec, ...]
    flags: ClassFlag
    annotations: tuple[Annotation, ...] = ()


@dataclass(frozen=True, slots=True)
class ProxyOutline:
    """A dynamic proxy class descriptor: interfaces instead of fields."""

    interfaces: tuple[str, ...]
    annotations: tuple[Annotation, ...]
    class_outline: int


# ---------------------------------------------------------------------------
# Table entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NullReference:
    pass


NULL_REFERENCE = NullReference()


@dataclass(frozen=True, slots=True)
class StringReference:
    text: str


@dataclass(frozen=True, slots=True)
class ArrayReference:
    """An object array; elements are handles."""

    handles: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class PrimitiveArrayReference:
    values: tuple[Primitive, ...]


@dataclass(frozen=True, slots=True)
class ClassObjectReference:
    """A serialized ``Class`` object; ``handle`` points at its descriptor."""

    handle: int


@dataclass(frozen=True, slots=True)
class JavaObject:
    """An object instance.

    ``annotations`` has one entry for every class in the hierarchy whose
    read order includes an annotation block.
    """

    class_handle: int
    fields: dict[str, Field] = field(default_factory=dict)
    annotations: tuple[tuple[Annotation, ...], ...] = ()


@dataclass(frozen=True, slots=True)
class EnumReference:
    class_handle: int
    constant_handle: int


Reference = Union[
    ClassOutline,
    ProxyOutline,
    NullReference,
    StringReference,
    ArrayReference,
    PrimitiveArrayReference,
    ClassObjectReference,
    JavaObject,
    EnumReference,
]


def as_class_outline(reference: Reference) -> ClassOutline:
    """Return ``reference`` if it is a class outline.

    Raises
    ------
    InvalidReferenceError
        For any other kind of entry.
    """
    if isinstance(reference, ClassOutline):
        return reference
    raise InvalidReferenceError("ClassOutline")


def as_string(reference: Reference) -> str:
    """Return the text of a string entry, or raise ``InvalidReferenceError``."""
    if isinstance(reference, StringReference):
        return reference.text
    raise InvalidReferenceError("String")


# ---------------------------------------------------------------------------
# Read order
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FieldsStep:
    """Read the default field data of one class in the hierarchy."""

    fields: tuple[FieldSpec, ...]


@dataclass(frozen=True, slots=True)
class AnnotationsStep:
    """Read one annotation block, up to its ``EndBlockData`` marker."""


ANNOTATIONS = AnnotationsStep()

ReadStep = Union[FieldsStep, AnnotationsStep]
