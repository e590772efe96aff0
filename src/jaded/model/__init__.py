"""Decoded value model.

Exports the public ``Value`` variants, stream ``Content`` and the
``ValueSerializer``.  The handle-indexed records in
``jaded.model.references`` are internal to the parser.
"""
from __future__ import annotations

from jaded.model.serializer import ValueSerializer
from jaded.model.values import (
    NULL,
    Array,
    BlockData,
    Content,
    JavaClass,
    JavaEnum,
    JavaString,
    Loop,
    Null,
    ObjectContent,
    ObjectData,
    Primitive,
    PrimitiveArray,
    Value,
)

__all__ = [
    "NULL",
    "Array",
    "BlockData",
    "Content",
    "JavaClass",
    "JavaEnum",
    "JavaString",
    "Loop",
    "Null",
    "ObjectContent",
    "ObjectData",
    "Primitive",
    "PrimitiveArray",
    "Value",
    "ValueSerializer",
]
