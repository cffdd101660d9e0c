"""Core harness: version matrix, annotation decoding, path resolution, assertions."""

from .assertions import ParseMatrix, assert_source_range, is_frozen
from .ast_path import find_matching_nodes, require_path, resolve_path
from .auditor import audit_final_state, final_state_violations
from .diagnostics import DiagnosticCollector, ExpectedDiagnostic
from .errors import (
    AstPathNotFoundError,
    ConfigError,
    FixtureError,
    ParseMatrixError,
    SourceMapFormatError,
    UnknownDiagnosticFieldError,
    UnknownVersionError,
)
from .interfaces import ParserFamily
from .source_map import Annotation, PathStep, SourceSpan, decode_annotations, iter_annotations
from .versions import ParserFactory, VersionMatrix

__all__ = [
    "Annotation",
    "AstPathNotFoundError",
    "ConfigError",
    "DiagnosticCollector",
    "ExpectedDiagnostic",
    "FixtureError",
    "ParseMatrix",
    "ParseMatrixError",
    "ParserFactory",
    "ParserFamily",
    "PathStep",
    "SourceMapFormatError",
    "SourceSpan",
    "UnknownDiagnosticFieldError",
    "UnknownVersionError",
    "VersionMatrix",
    "assert_source_range",
    "audit_final_state",
    "decode_annotations",
    "final_state_violations",
    "find_matching_nodes",
    "is_frozen",
    "iter_annotations",
    "require_path",
    "resolve_path",
]
