"""Recursive-descent reader for Java Object Serialization streams.

A stream is a header followed by a sequence of records, each introduced by
a marker byte.  ``Parser._read_record`` reads one record and returns either
a handle (for anything that is registered in the handle table), raw block
data, or the end-of-block sentinel.  Objects, arrays and class descriptors
nest further records inside themselves, so decoding recurses through
``_read_record``.

Decoding proceeds in two phases:

1. Records are decoded into the handle table as ``Reference`` entries whose
   edges are plain integer handles.  A field that refers to an object still
   being decoded (a cycle) is stored as a ``LoopField`` holding the
   target's position on the allocation stack.
2. ``Parser.read`` materializes the entry for the top-level handle into an
   owned ``Value`` tree.  Loop fields become ``Loop`` markers; array
   elements or annotation objects that point back at a value currently
   being materialized are turned into ``Loop`` markers the same way.

Any structural problem raises a ``StreamError`` subclass and aborts the
current ``read``.
"""
from __future__ import annotations

import logging
import os
import struct
from dataclasses import dataclass
from typing import TYPE_CHECKING, BinaryIO, Callable, Iterator, NoReturn, Union

from jaded.errors import (
    DepthLimitError,
    FeatureNotImplementedError,
    InvalidReferenceError,
    InvalidStreamError,
    NodeLimitError,
    NonJavaObjectError,
    UnexpectedBlockDataError,
    UnknownReferenceError,
    UnknownVersionError,
    UnrecognisedTypeError,
    WriteAbortedError,
)
from jaded.model.references import (
    ANNOTATIONS,
    Annotation,
    AnnotationBlock,
    AnnotationReference,
    ArrayReference,
    ClassObjectReference,
    ClassOutline,
    EnumReference,
    Field,
    FieldSpec,
    FieldsStep,
    JavaObject,
    LoopField,
    NullReference,
    PrimitiveArrayReference,
    PrimitiveField,
    ProxyOutline,
    ReadStep,
    Reference,
    ReferenceField,
    StringReference,
    as_class_outline,
    as_string,
)
from jaded.model.values import (
    NULL,
    Array,
    BlockData,
    Content,
    JavaClass,
    JavaEnum,
    JavaString,
    Loop,
    ObjectContent,
    ObjectData,
    Primitive,
    PrimitiveArray,
    Value,
)
from jaded.parser.handles import HandleTable
from jaded.stream.markers import (
    MAGIC,
    NULL_HANDLE,
    REFERENCE_TYPE_CODES,
    VERSION,
    ClassFlag,
    Marker,
    PrimitiveKind,
)
from jaded.stream.reader import ByteReader, ByteSource

if TYPE_CHECKING:
    from jaded.convert.converters import FromJava, T

logger = logging.getLogger(__name__)

# Bulk formats for primitive arrays; chars, booleans and bytes are
# post-processed from the raw bytes instead.
_ARRAY_FORMATS: dict[PrimitiveKind, str] = {
    PrimitiveKind.DOUBLE: "d",
    PrimitiveKind.FLOAT: "f",
    PrimitiveKind.INT: "i",
    PrimitiveKind.LONG: "q",
    PrimitiveKind.SHORT: "h",
}


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParserOptions:
    """Tunable limits for a ``Parser``.

    Parameters
    ----------
    max_depth:
        Maximum nesting of records inside one another, and of values inside
        one another when a tree is materialized.  Streams nested deeper
        raise ``DepthLimitError`` instead of exhausting the interpreter
        stack.
    warn_trailing_data:
        Whether ``jaded.parse`` logs a warning when bytes remain after the
        first content item.
    max_nodes:
        Maximum number of values materialized for one item.  Shared
        subtrees are built once, but a stream can still describe a tree far
        larger than itself; exceeding the limit raises ``NodeLimitError``.
    """

    max_depth: int = 200
    warn_trailing_data: bool = True
    max_nodes: int = 1_000_000


# ---------------------------------------------------------------------------
# Stream records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HandleRecord:
    """A record that resolved to an entry in the handle table (or null)."""

    handle: int


@dataclass(frozen=True, slots=True)
class BlockRecord:
    """A record of raw block data."""

    data: bytes


@dataclass(frozen=True, slots=True)
class EndBlockRecord:
    """The ``EndBlockData`` marker that terminates an annotation."""


END_BLOCK = EndBlockRecord()

StreamRecord = Union[HandleRecord, BlockRecord, EndBlockRecord]


def _handle_of(record: StreamRecord, expected: str = "Ref") -> int:
    if isinstance(record, HandleRecord):
        return record.handle
    raise InvalidReferenceError(expected)


def _signed32(value: int) -> int:
    return value - (1 << 32) if value & 0x8000_0000 else value


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class Parser:
    """Reads Java objects from a serialized stream.

    The stream header is checked on construction; objects are then read in
    turn with ``read``.

    Parameters
    ----------
    source:
        The serialized data: ``bytes``-like, a binary file object, or a
        filesystem path (the parser opens the file and closes it in
        ``close``).
    options:
        Limits to apply; defaults to ``ParserOptions()``.

    Raises
    ------
    NonJavaObjectError
        If the stream does not start with ``0xACED``.
    UnknownVersionError
        If the protocol version is not 5.
    EndOfStreamError
        If the header is incomplete.

    Example
    -------
    ::

        with Parser(Path("demo.obj")) as parser:
            demo = parser.read().as_value().object_data()
            print(demo.class_name, demo.get_field("message"))
    """

    def __init__(
        self,
        source: ByteSource | str | os.PathLike[str],
        options: ParserOptions | None = None,
    ) -> None:
        self._owned: BinaryIO | None = None
        if isinstance(source, (str, os.PathLike)):
            self._owned = open(source, "rb")
            source = self._owned
        self._reader = ByteReader(source)
        self._options = options or ParserOptions()
        self._handles = HandleTable()
        self._depth: int = 0
        self._active: list[int] = []
        # Finished values without Loop markers, shareable within one read.
        self._cache: dict[int, Value] = {}
        self._nodes: int = 0
        self._loops: int = 0
        try:
            self._version = self._read_header()
        except BaseException:
            self.close()
            raise

    def _read_header(self) -> int:
        magic = self._reader.read_u16()
        version = self._reader.read_u16()
        if magic != MAGIC:
            raise NonJavaObjectError(magic)
        if version != VERSION:
            raise UnknownVersionError(version)
        logger.debug("Stream header accepted (version %d)", version)
        return version

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the underlying file if the parser opened it."""
        if self._owned is not None:
            self._owned.close()
            self._owned = None

    def __enter__(self) -> "Parser":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def version(self) -> int:
        """Protocol version from the stream header (always 5)."""
        return self._version

    @property
    def options(self) -> ParserOptions:
        return self._options

    @property
    def handles(self) -> HandleTable:
        """The table of entries decoded so far."""
        return self._handles

    # ------------------------------------------------------------------
    # Public reading API
    # ------------------------------------------------------------------

    def read(self) -> Content:
        """Read the next item from the stream.

        Returns
        -------
        Content
            ``ObjectContent`` for an object (or null, string, array, enum,
            class), ``BlockData`` for raw primitive data.

        Raises
        ------
        StreamError
            If the stream is malformed or truncated.
        """
        # Handles left pending by an earlier failed read can never be
        # registered.
        self._handles.discard_pending()
        record = self._read_record()
        if isinstance(record, HandleRecord):
            self._begin_materialization()
            return ObjectContent(self._materialize(record.handle))
        if isinstance(record, BlockRecord):
            return BlockData(record.data)
        raise InvalidStreamError("Unexpected EndBlockData mark")

    def read_as(self, converter: "FromJava[T]") -> "T":
        """Read the next item and convert it with ``converter``.

        Raises
        ------
        UnexpectedBlockDataError
            If the next item is raw block data rather than an object.
        ConversionError
            If the converter rejects the value.
        """
        content = self.read()
        if isinstance(content, BlockData):
            raise UnexpectedBlockDataError(content.data)
        return converter.from_value(content.as_value())

    def at_eof(self) -> bool:
        """Return True if the stream has no more records."""
        return self._reader.at_eof()

    def read_all(self) -> list[Content]:
        """Read items until the stream is exhausted."""
        return list(self)

    def __iter__(self) -> Iterator[Content]:
        while not self._reader.at_eof():
            yield self.read()

    # ------------------------------------------------------------------
    # Record dispatch
    # ------------------------------------------------------------------

    def _read_record(self) -> StreamRecord:
        if self._depth >= self._options.max_depth:
            raise DepthLimitError(self._options.max_depth)
        self._depth += 1
        try:
            return self._dispatch()
        finally:
            self._depth -= 1

    def _dispatch(self) -> StreamRecord:
        marker = self._reader.read_marker()
        while marker is Marker.RESET:
            self._handles.reset()
            marker = self._reader.read_marker()
        logger.debug("%s record at offset %d", marker.name, self._reader.position - 1)

        if marker is Marker.NULL:
            return HandleRecord(NULL_HANDLE)
        if marker is Marker.REFERENCE:
            return HandleRecord(self._reader.read_u32())
        if marker is Marker.OBJECT:
            return HandleRecord(self._read_object())
        if marker is Marker.ARRAY:
            return HandleRecord(self._read_array())
        if marker is Marker.ENUM:
            return HandleRecord(self._read_enum())
        if marker is Marker.CLASS_DESC:
            return HandleRecord(self._read_class_desc())
        if marker is Marker.PROXY_CLASS_DESC:
            return HandleRecord(self._read_proxy_class())
        if marker is Marker.STRING:
            return HandleRecord(self._read_string(self._reader.read_string))
        if marker is Marker.LONG_STRING:
            return HandleRecord(self._read_string(self._reader.read_long_string))
        if marker is Marker.CLASS:
            return HandleRecord(self._read_class())
        if marker is Marker.BLOCK_DATA:
            return BlockRecord(self._reader.read_bytes(self._reader.read_u8()))
        if marker is Marker.BLOCK_DATA_LONG:
            return BlockRecord(self._reader.read_bytes(self._reader.read_u32()))
        if marker is Marker.END_BLOCK_DATA:
            return END_BLOCK
        # An exception raised while the stream was being written, not a
        # serialized exception object.
        self._read_exception()

    def _register(self, handle: int, reference: Reference) -> None:
        self._handles.register(handle, reference)
        logger.debug("Registered %s as 0x%X", type(reference).__name__, handle)

    # ------------------------------------------------------------------
    # Class descriptors
    # ------------------------------------------------------------------

    def _read_class_desc(self) -> int:
        class_name = self._reader.read_string()
        serial_uid = self._reader.read_u64()
        # Registered before the fields so that field types can refer back.
        handle = self._handles.next_handle()
        flags = ClassFlag.from_byte(self._reader.read_u8())
        field_count = self._reader.read_u16()
        fields: list[FieldSpec] = []
        for _ in range(field_count):
            type_code = chr(self._reader.read_u8())
            field_name = self._reader.read_string()
            if type_code in REFERENCE_TYPE_CODES:
                # The field's type signature, e.g. "Ljava/lang/String;"
                _handle_of(self._read_record(), "Expected reference handle")
            fields.append(FieldSpec(field_name, type_code))
        annotations = self._read_annotations()
        record = self._read_record()
        if not isinstance(record, HandleRecord):
            raise InvalidStreamError("Super class is neither NewClassDesc nor null")
        super_class = None if record.handle == NULL_HANDLE else record.handle
        outline = ClassOutline(
            class_name=class_name,
            serial_uid=serial_uid,
            super_class=super_class,
            fields=tuple(fields),
            flags=flags,
            annotations=annotations,
        )
        self._register(handle, outline)
        return handle

    def _read_proxy_class(self) -> int:
        handle = self._handles.next_handle()
        interface_count = _signed32(self._reader.read_u32())
        if interface_count < 0:
            raise InvalidStreamError("negative proxy interface count")
        interfaces = tuple(self._reader.read_string() for _ in range(interface_count))
        annotations = self._read_annotations()
        class_outline = _handle_of(self._read_record())
        self._register(
            handle,
            ProxyOutline(
                interfaces=interfaces,
                annotations=annotations,
                class_outline=class_outline,
            ),
        )
        return handle

    def _read_annotations(self) -> tuple[Annotation, ...]:
        annotations: list[Annotation] = []
        while True:
            record = self._read_record()
            if isinstance(record, HandleRecord):
                annotations.append(AnnotationReference(record.handle))
            elif isinstance(record, BlockRecord):
                annotations.append(AnnotationBlock(record.data))
            else:
                return tuple(annotations)

    def _class_from(self, handle: int) -> ClassOutline:
        """Resolve a class or proxy descriptor handle to a class outline."""
        seen: set[int] = set()
        reference = self._handles.get(handle)
        while isinstance(reference, ProxyOutline):
            if handle in seen:
                raise InvalidStreamError("proxy class refers to itself")
            seen.add(handle)
            handle = reference.class_outline
            reference = self._handles.get(handle)
        if isinstance(reference, ClassOutline):
            return reference
        raise InvalidReferenceError("Class")

    def _build_read_list(self, handle: int) -> list[ReadStep]:
        """Work out the order of field data and annotations for an object.

        Superclass data always precedes subclass data.  If a class in the
        hierarchy is externalizable in block mode, it and its ancestors
        contribute a single annotation block and no fields; a class with a
        ``writeObject`` method contributes its fields then an annotation.
        """
        chain: list[ClassOutline] = []
        seen: set[int] = set()
        order: list[ReadStep] = []
        current: int | None = handle
        while current is not None:
            if current in seen:
                raise InvalidStreamError("class hierarchy contains a cycle")
            seen.add(current)
            outline = self._class_from(current)
            if outline.flags is ClassFlag.EXT_BLOCK:
                order.append(ANNOTATIONS)
                break
            chain.append(outline)
            current = outline.super_class
        for outline in reversed(chain):
            order.append(FieldsStep(outline.fields))
            if outline.flags is ClassFlag.WRITE:
                order.append(ANNOTATIONS)
        return order

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def _read_object(self) -> int:
        class_handle = _handle_of(self._read_record())
        handle = self._handles.next_handle()
        fields: dict[str, Field] = {}
        annotations: list[tuple[Annotation, ...]] = []
        for step in self._build_read_list(class_handle):
            if isinstance(step, FieldsStep):
                for spec in step.fields:
                    fields[spec.name] = self._read_field(spec.type_code)
            else:
                annotations.append(self._read_annotations())
        self._register(
            handle,
            JavaObject(
                class_handle=class_handle,
                fields=fields,
                annotations=tuple(annotations),
            ),
        )
        return handle

    def _read_field(self, type_code: str) -> Field:
        if type_code not in REFERENCE_TYPE_CODES:
            return PrimitiveField(self._read_primitive(PrimitiveKind.from_code(type_code)))
        target = _handle_of(self._read_record(), "Object")
        if target in self._handles:
            return ReferenceField(target)
        position = self._handles.pending_position(target)
        if position is None:
            raise UnknownReferenceError(target)
        return LoopField(position)

    def _read_primitive(self, kind: PrimitiveKind) -> Primitive:
        reader = self._reader
        if kind is PrimitiveKind.BYTE:
            value: int | float | bool | str = reader.read_u8()
        elif kind is PrimitiveKind.CHAR:
            value = _to_char(reader.read_u16())
        elif kind is PrimitiveKind.DOUBLE:
            value = reader.read_f64()
        elif kind is PrimitiveKind.FLOAT:
            value = reader.read_f32()
        elif kind is PrimitiveKind.INT:
            value = reader.read_i32()
        elif kind is PrimitiveKind.LONG:
            value = reader.read_i64()
        elif kind is PrimitiveKind.SHORT:
            value = reader.read_i16()
        else:
            value = reader.read_u8() == 1
        return Primitive(kind, value)

    # ------------------------------------------------------------------
    # Strings, arrays, enums, classes
    # ------------------------------------------------------------------

    def _read_string(self, read_text: Callable[[], str]) -> int:
        handle = self._handles.next_handle()
        self._register(handle, StringReference(read_text()))
        return handle

    def _read_array(self) -> int:
        class_handle = _handle_of(self._read_record())
        handle = self._handles.next_handle()
        length = _signed32(self._reader.read_u32())
        if length < 0:
            raise InvalidStreamError("negative array length")
        class_name = self._class_from(class_handle).class_name
        if len(class_name) < 2:
            raise UnrecognisedTypeError(" ")
        element_code = class_name[1]
        if element_code in REFERENCE_TYPE_CODES:
            handles = tuple(_handle_of(self._read_record()) for _ in range(length))
            self._register(handle, ArrayReference(handles))
        else:
            kind = PrimitiveKind.from_code(element_code)
            self._register(handle, PrimitiveArrayReference(self._read_primitive_array(kind, length)))
        return handle

    def _read_primitive_array(self, kind: PrimitiveKind, length: int) -> tuple[Primitive, ...]:
        data = self._reader.read_bytes(length * kind.width)
        if kind is PrimitiveKind.BYTE:
            values: list[int | float | bool | str] = list(data)
        elif kind is PrimitiveKind.BOOLEAN:
            values = [byte == 1 for byte in data]
        elif kind is PrimitiveKind.CHAR:
            values = [_to_char(code) for code in struct.unpack(f">{length}H", data)]
        else:
            values = list(struct.unpack(f">{length}{_ARRAY_FORMATS[kind]}", data))
        return tuple(Primitive(kind, value) for value in values)

    def _read_enum(self) -> int:
        class_handle = _handle_of(self._read_record())
        handle = self._handles.next_handle()
        constant_handle = _handle_of(self._read_record())
        self._register(handle, EnumReference(class_handle, constant_handle))
        return handle

    def _read_class(self) -> int:
        descriptor = _handle_of(self._read_record())
        handle = self._handles.next_handle()
        self._register(handle, ClassObjectReference(descriptor))
        return handle

    def _read_exception(self) -> NoReturn:
        logger.debug("Exception record: stream writing was aborted")
        self._handles.reset()
        handle = _handle_of(self._read_record())
        self._begin_materialization()
        exception = self._materialize(handle)
        self._handles.reset()
        raise WriteAbortedError(exception)

    # ------------------------------------------------------------------
    # Materialization
    # ------------------------------------------------------------------

    def _begin_materialization(self) -> None:
        self._active = []
        self._cache = {}
        self._nodes = 0
        self._loops = 0

    def _materialize(self, handle: int) -> Value:
        """Build the owned value tree for the entry behind ``handle``.

        A value whose subtree holds no ``Loop`` does not depend on where it
        is reached from, so it is built once and shared by every later
        reference to the same handle.
        """
        if handle in self._active:
            self._loops += 1
            return Loop(-self._active.index(handle))
        cached = self._cache.get(handle)
        if cached is not None:
            return cached
        if len(self._active) >= self._options.max_depth:
            raise DepthLimitError(self._options.max_depth)
        self._nodes += 1
        if self._nodes > self._options.max_nodes:
            raise NodeLimitError(self._options.max_nodes)
        reference = self._handles.get(handle)
        loops_before = self._loops
        self._active.append(handle)
        try:
            value = self._value_from_reference(reference)
        finally:
            self._active.pop()
        if self._loops == loops_before:
            self._cache[handle] = value
        return value

    def _value_from_reference(self, reference: Reference) -> Value:
        if isinstance(reference, NullReference):
            return NULL
        if isinstance(reference, PrimitiveArrayReference):
            return PrimitiveArray(reference.values)
        if isinstance(reference, ArrayReference):
            return Array(tuple(self._materialize(h) for h in reference.handles))
        if isinstance(reference, StringReference):
            return JavaString(reference.text)
        if isinstance(reference, EnumReference):
            outline = as_class_outline(self._handles.get(reference.class_handle))
            constant = as_string(self._handles.get(reference.constant_handle))
            return JavaEnum(outline.class_name, constant)
        if isinstance(reference, ClassObjectReference):
            return JavaClass(self._class_from(reference.handle).class_name)
        if isinstance(reference, JavaObject):
            return self._object_value(reference)
        raise FeatureNotImplementedError("value from reference")

    def _object_value(self, obj: JavaObject) -> ObjectData:
        outline = self._class_from(obj.class_handle)
        fields: dict[str, Value] = {}
        for name, field in obj.fields.items():
            if isinstance(field, LoopField):
                self._loops += 1
                fields[name] = Loop(-field.position)
            elif isinstance(field, ReferenceField):
                fields[name] = self._materialize(field.handle)
            else:
                fields[name] = field.value
        annotations = tuple(
            tuple(self._annotation_content(entry) for entry in level)
            for level in obj.annotations
        )
        return ObjectData(class_name=outline.class_name, fields=fields, annotations=annotations)

    def _annotation_content(self, entry: Annotation) -> Content:
        if isinstance(entry, AnnotationReference):
            return ObjectContent(self._materialize(entry.handle))
        return BlockData(entry.data)


def _to_char(code: int) -> str:
    # Lone UTF-16 surrogates are not characters on their own.
    if 0xD800 <= code <= 0xDFFF:
        raise InvalidStreamError("invalid character")
    return chr(code)
