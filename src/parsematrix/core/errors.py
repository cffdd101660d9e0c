"""
Error types for the parsematrix harness.

Fixture errors mean the test itself is broken (a malformed annotation, a
path that leads nowhere, a version the family does not know). They are kept
apart from ``AssertionError`` so a broken fixture never looks like a parser
regression.
"""

from __future__ import annotations

from dataclasses import dataclass


class ParseMatrixError(Exception):
    """Base exception for all parsematrix errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class FixtureError(ParseMatrixError):
    """
    Raised when a test fixture is malformed.

    Examples:
    - Annotation line that does not follow the source-map format
    - AST path that selects no node
    - Version identifier outside the family table
    """

    pass


class SourceMapFormatError(FixtureError):
    """Raised when an annotation line cannot be decoded."""

    def __init__(self, line: str):
        self.line = line
        super().__init__(f"Cannot parse source map description line: {line!r}.")


class AstPathNotFoundError(FixtureError):
    """Raised when an AST path resolves to nothing."""

    def __init__(self, path: tuple[str, ...], tree: object, version: str | None = None):
        self.path = path
        self.tree = tree
        context = ErrorContext(version=version) if version else None
        super().__init__(f"No entity with AST path {list(path)} in {tree!r}", context)


class UnknownVersionError(FixtureError):
    """Raised when a parser is requested for a version the family lacks."""

    def __init__(self, version: str, family: str):
        self.version = version
        super().__init__(f"Unrecognized {family} version {version}")


class UnknownDiagnosticFieldError(FixtureError):
    """Raised when a diagnostic annotation names a field other than location/highlights."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Unknown diagnostic range {field}")


class ConfigError(ParseMatrixError):
    """
    Raised when harness configuration is invalid.

    Examples:
    - ``family`` is not a ``module:attribute`` import path
    - The imported attribute is not a ParserFamily
    """

    pass


@dataclass
class ErrorContext:
    """
    Where in the matrix an error happened.

    Attributes:
        version: Grammar version being exercised
        source: Optional code snippet under test
    """

    version: str | None = None
    source: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "(2.0) in '10 + 20'"
        """
        location = f"({self.version})" if self.version else ""
        if self.source is not None:
            location += f" in {self.source!r}"
        return location.strip()
