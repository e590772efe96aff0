"""Stream decoding: the record dispatcher and its handle table.

Exports the ``Parser`` class and its ``ParserOptions``.
"""
from __future__ import annotations

from jaded.parser.handles import HandleTable
from jaded.parser.parser import Parser, ParserOptions

__all__ = [
    "HandleTable",
    "Parser",
    "ParserOptions",
]
