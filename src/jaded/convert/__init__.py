"""Typed conversion of decoded values and annotation reading."""
from __future__ import annotations

from jaded.convert.annotations import AnnotationIter
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
    FromJava,
    boxed,
    by_class,
    convert,
    list_of,
    of_class,
    optional,
)

__all__ = [
    "AnnotationIter",
    "FromJava",
    "convert",
    "STRING",
    "BYTE",
    "SHORT",
    "INT",
    "LONG",
    "FLOAT",
    "DOUBLE",
    "CHAR",
    "BOOLEAN",
    "optional",
    "list_of",
    "boxed",
    "of_class",
    "by_class",
]
