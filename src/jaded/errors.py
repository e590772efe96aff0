"""Exception types raised while reading and converting Java streams.

There are two families, both rooted at ``JavaError``:

``StreamError``
    Structural problems with the byte stream itself.  Any of these aborts
    the whole ``Parser.read()`` call; no partially decoded value is ever
    returned.

``ConversionError``
    Problems turning an already decoded ``Value`` into a Python value.
    These are local to one field or value and leave the parser usable, so
    callers may catch them and retry with a different interpretation.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jaded.model.values import Value


class JavaError(Exception):
    """Base class for everything that can go wrong with a Java stream."""


# ---------------------------------------------------------------------------
# Stream (structural) errors
# ---------------------------------------------------------------------------


class StreamError(JavaError):
    """An error in the read/deserialization process."""


class EndOfStreamError(StreamError):
    """The stream ended while more data was expected.

    Parameters
    ----------
    expected:
        Number of bytes the reader asked for.
    available:
        Number of bytes that were actually left.
    """

    def __init__(self, expected: int, available: int) -> None:
        super().__init__(
            f"Unexpected end of stream: needed {expected} byte(s), {available} available"
        )
        self.expected = expected
        self.available = available


class NonJavaObjectError(StreamError):
    """The stream does not start with the serialization magic number."""

    def __init__(self, magic: int) -> None:
        super().__init__(f"This isn't a JavaObject - magic numbers: {magic:X}")
        self.magic = magic


class UnknownVersionError(StreamError):
    """The stream uses a protocol version other than 5."""

    def __init__(self, version: int) -> None:
        super().__init__(f"Unknown serialization version: {version}")
        self.version = version


class UnknownMarkerError(StreamError):
    """The next record tag is not one defined by the protocol."""

    def __init__(self, mark: int) -> None:
        super().__init__(f"Unknown mark: 0x{mark:02X}")
        self.mark = mark


class UnrecognisedTypeError(StreamError):
    """A field or array type code is not one of the allowed characters."""

    def __init__(self, type_code: str) -> None:
        super().__init__(f"Unknown type marker: {type_code!r}")
        self.type_code = type_code


class UnknownReferenceError(StreamError):
    """A back reference points at a handle that was never registered."""

    def __init__(self, handle: int) -> None:
        super().__init__(f"Unknown reference handle: 0x{handle:X}")
        self.handle = handle


class InvalidReferenceError(StreamError):
    """The entry behind a handle is not of the kind required.

    ``expected`` names the kind that was required, not the one found.
    """

    def __init__(self, expected: str) -> None:
        super().__init__(f"Invalid reference. Expected {expected}")
        self.expected = expected


class InvalidStreamError(StreamError):
    """The stream is invalid for a reason described by ``message``."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid Stream: {message}")
        self.message = message


class InvalidUtf8Error(InvalidStreamError):
    """String bytes in the stream are not valid UTF-8."""

    def __init__(self, data: bytes) -> None:
        super().__init__("String is not valid UTF-8")
        self.data = data


class RegistrationOrderError(InvalidStreamError):
    """A handle was registered before something it references.

    Parameters
    ----------
    handle:
        The handle passed to ``HandleTable.register``.
    pending:
        The handle on top of the allocation stack, or ``None`` if the stack
        was empty.
    """

    def __init__(self, handle: int, pending: int | None) -> None:
        super().__init__("object was registered before something it references")
        self.handle = handle
        self.pending = pending


class DepthLimitError(InvalidStreamError):
    """Records are nested deeper than ``ParserOptions.max_depth``."""

    def __init__(self, max_depth: int) -> None:
        super().__init__(f"records nested deeper than {max_depth} levels")
        self.max_depth = max_depth


class NodeLimitError(InvalidStreamError):
    """Materializing one item would build more than ``ParserOptions.max_nodes`` values."""

    def __init__(self, max_nodes: int) -> None:
        super().__init__(f"value tree larger than {max_nodes} nodes")
        self.max_nodes = max_nodes


class FeatureNotImplementedError(StreamError):
    """A protocol feature this reader does not support was encountered."""

    def __init__(self, feature: str) -> None:
        super().__init__(f"{feature} isn't implemented yet")
        self.feature = feature


class WriteAbortedError(StreamError):
    """The writer hit an exception and serialized it into the stream.

    The stream content read so far is void; ``exception`` holds the decoded
    ``Throwable`` object the writer recorded.
    """

    def __init__(self, exception: "Value") -> None:
        name = getattr(exception, "class_name", type(exception).__name__)
        super().__init__(f"Writing aborted by {name}")
        self.exception = exception


# ---------------------------------------------------------------------------
# Conversion errors
# ---------------------------------------------------------------------------


class ConversionError(JavaError):
    """An error converting decoded data into a Python value."""


class FieldNotFoundError(ConversionError):
    """A required field does not exist in the decoded object."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Field '{name}' does not exist")
        self.name = name


class NullPointerError(ConversionError):
    """A non-optional value was ``null``."""

    def __init__(self) -> None:
        super().__init__("No object found")


class InvalidTypeError(ConversionError):
    """The decoded value is not the kind required."""

    def __init__(self, expected: str) -> None:
        super().__init__(f"Expected '{expected}'")
        self.expected = expected


class UnexpectedBlockDataError(ConversionError):
    """Raw block data was read where an object was expected."""

    def __init__(self, data: bytes) -> None:
        super().__init__("Unexpected block data")
        self.data = bytes(data)


class MissingAnnotationError(ConversionError):
    """No annotation was written at the requested hierarchy level."""

    def __init__(self, index: int) -> None:
        super().__init__(f"Missing Annotation: {index}")
        self.index = index


class IncorrectClassError(ConversionError):
    """The decoded object is an instance of the wrong class."""

    def __init__(self, expected: str, found: str) -> None:
        super().__init__(f"Expected class '{expected}', found '{found}'")
        self.expected = expected
        self.found = found


class UnexpectedClassError(ConversionError):
    """A class name was not one of those a converter accepts."""

    def __init__(self, class_name: str) -> None:
        super().__init__(f"Class '{class_name}' was not expected")
        self.class_name = class_name
