"""CLI package.

The ``cli`` sub-package contains the Click application and its commands.
Commands import the library lazily so that ``jaded --help`` stays fast.
"""
from __future__ import annotations
