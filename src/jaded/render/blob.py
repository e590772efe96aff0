"""Human-readable rendering of opaque byte blobs.

Values fetched from a key-value store are often Java-serialized objects,
sometimes plain text and occasionally arbitrary binary data.  The functions
here try each interpretation in turn:

1. Decode the first item of a Java serialization stream and render it as
   JSON or YAML.
2. Decode the bytes as UTF-8 text.
3. Escape every non-ASCII byte as ``\\xNN``.

The last step cannot fail, so rendering never raises for any input.
"""
from __future__ import annotations

import logging
from enum import Enum

from jaded.errors import JavaError
from jaded.model.serializer import ValueSerializer
from jaded.parser.parser import Parser, ParserOptions

logger = logging.getLogger(__name__)


class ContentType(str, Enum):
    """Structured-text format of a rendered Java value."""

    JSON = "json"
    YAML = "yaml"


def render_java(data: bytes, fmt: ContentType = ContentType.JSON, options: ParserOptions | None = None) -> str:
    """Decode the first item of a Java stream and render it as ``fmt``.

    Raises
    ------
    JavaError
        If ``data`` is not a well-formed Java serialization stream.
    """
    content = Parser(data, options).read()
    serializer = ValueSerializer()
    if fmt is ContentType.YAML:
        return serializer.to_yaml(content)
    return serializer.to_json(content)


def escape_bytes(data: bytes) -> str:
    """Render ASCII bytes as themselves and anything else as ``\\xNN``."""
    return "".join(chr(b) if b < 0x80 else f"\\x{b:02x}" for b in data)


def deserialize_bytes(
    data: bytes, fmt: ContentType = ContentType.JSON
) -> tuple[str, ContentType | None]:
    """Render ``data`` with the first interpretation that succeeds.

    Returns
    -------
    tuple[str, ContentType | None]
        The rendered text and, when the bytes were a Java stream, the
        format it was rendered in; ``None`` for text and escaped output.
    """
    try:
        text = render_java(data, fmt)
    except JavaError as exc:
        logger.debug("Not a Java stream (%s); trying UTF-8", exc)
    else:
        logger.debug("Rendered %d bytes as Java %s", len(data), fmt.value)
        return text, fmt

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("Not UTF-8 text; escaping bytes")
        return escape_bytes(data), None
    logger.debug("Rendered %d bytes as UTF-8 text", len(data))
    return text, None


def bytes_to_string(data: bytes, fmt: ContentType = ContentType.JSON) -> str:
    """Like ``deserialize_bytes`` but return only the text.

    Empty input renders as the empty string.
    """
    if not data:
        return ""
    text, _ = deserialize_bytes(data, fmt)
    return text
