"""Rendering of arbitrary byte blobs as readable text."""
from __future__ import annotations

from jaded.render.blob import ContentType, bytes_to_string, deserialize_bytes, escape_bytes, render_java

__all__ = [
    "ContentType",
    "bytes_to_string",
    "deserialize_bytes",
    "escape_bytes",
    "render_java",
]
