"""jaded: decoder for the Java Object Serialization Stream Protocol.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import jaded
    from jaded.convert import INT, STRING

    # Decode the first object in a serialized stream
    content = jaded.parse(Path("demo.obj"))
    demo = content.as_value().object_data()
    demo.class_name
    'org.example.Demo'
    demo.get_field_as("message", STRING)
    'Hello World'

    # Read a typed value straight from bytes
    jaded.read_as(data, INT)

    # Render any byte blob as readable text
    print(jaded.render(blob, fmt="yaml"))

    jaded.__version__
    '0.1.0'
"""
from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from jaded.convert.converters import FromJava, T
    from jaded.model.values import Content, Value
    from jaded.parser.parser import ParserOptions
    from jaded.stream.reader import ByteSource

logger = logging.getLogger(__name__)


def parse(
    source: "ByteSource | str | os.PathLike[str]",
    options: "ParserOptions | None" = None,
) -> "Content":
    """Decode the first content item of a serialized stream.

    Parameters
    ----------
    source:
        Serialized bytes, a binary file object, or a path.
    options:
        Parser limits; see ``ParserOptions``.

    Returns
    -------
    Content
        The decoded object, or raw block data if the stream starts with
        primitives.

    Raises
    ------
    jaded.errors.StreamError
        If the stream is malformed.
    """
    from jaded.parser.parser import Parser, ParserOptions

    options = options or ParserOptions()
    with Parser(source, options) as parser:
        content = parser.read()
        if options.warn_trailing_data and not parser.at_eof():
            logger.warning("Ignoring data after the first item in the stream")
    return content


def read_all(
    source: "ByteSource | str | os.PathLike[str]",
    options: "ParserOptions | None" = None,
) -> list["Content"]:
    """Decode every content item of a serialized stream."""
    from jaded.parser.parser import Parser

    with Parser(source, options) as parser:
        return parser.read_all()


def loads(data: bytes, options: "ParserOptions | None" = None) -> "Value":
    """Decode the first object of ``data``.

    Raises
    ------
    jaded.errors.UnexpectedBlockDataError
        If the stream starts with block data rather than an object.
    """
    return parse(data, options).as_value()


def read_as(
    source: "ByteSource | str | os.PathLike[str]",
    converter: "FromJava[T]",
    options: "ParserOptions | None" = None,
) -> "T":
    """Decode the first object of a stream and convert it with ``converter``.

    Raises
    ------
    jaded.errors.StreamError
        If the stream is malformed.
    jaded.errors.ConversionError
        If the object does not have the shape ``converter`` expects.
    """
    from jaded.parser.parser import Parser

    with Parser(source, options) as parser:
        return parser.read_as(converter)


# Load the ``jaded.render`` subpackage before defining ``render`` so the
# import system's submodule attribute does not later shadow the function.
from jaded.render import blob as _render_blob  # noqa: E402,F401


def render(data: bytes, fmt: str = "json") -> str:
    """Render an arbitrary byte blob as readable text.

    Java streams become JSON or YAML (``fmt``), other bytes UTF-8 text or
    a hex-escaped rendering.  Never raises for any ``data``.
    """
    from jaded.render.blob import ContentType, bytes_to_string

    return bytes_to_string(data, ContentType(fmt.lower()))


__all__ = [
    "__version__",
    "parse",
    "read_all",
    "loads",
    "read_as",
    "render",
]
