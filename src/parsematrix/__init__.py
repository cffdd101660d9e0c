"""
parsematrix - differential conformance testing for multi-version parsers.

Runs one snippet through every grammar version of a parser family and checks
trees, source ranges, diagnostics, parse context and post-parse state
against a single expectation.
"""

from __future__ import annotations

from ._version import get_version
from .core import (
    FixtureError,
    ParseMatrix,
    ParseMatrixError,
    ParserFamily,
    SourceMapFormatError,
    decode_annotations,
    iter_annotations,
)

__version__ = get_version()

__all__ = [
    "FixtureError",
    "ParseMatrix",
    "ParseMatrixError",
    "ParserFamily",
    "SourceMapFormatError",
    "__version__",
    "decode_annotations",
    "iter_annotations",
]
