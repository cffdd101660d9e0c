"""
Assertion engine.

``ParseMatrix`` runs one code snippet through every targeted grammar version
of a parser family and checks the result against a single expectation:

    matrix = ParseMatrix(CALC)
    matrix.assert_parses(
        s("send", s("lit", 10), "+", s("lit", 20)),
        "10 + 20",
        '''
        ~~~~~~~ expression
        |   ^ operator
        ''',
    )

Fixture problems raise ``FixtureError`` subclasses; mismatches raise
``AssertionError`` prefixed with the offending version.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from .ast_path import find_matching_nodes, require_path
from .auditor import audit_final_state
from .diagnostics import DiagnosticCollector, ExpectedDiagnostic
from .errors import FixtureError, UnknownDiagnosticFieldError
from .interfaces import Diagnostic, Parser, ParserFamily, SourceRange
from .source_map import SourceSpan, iter_annotations
from .versions import ParserFactory, VersionMatrix

logger = logging.getLogger(__name__)

ExpectedDiagnosticLike = ExpectedDiagnostic | Sequence[Any] | Mapping[str, Any]


def _attribute_names(value: object) -> list[str]:
    names = [a.name for a in getattr(type(value), "__attrs_attrs__", ())]
    for cls in type(value).__mro__:
        slots = cls.__dict__.get("__slots__", ())
        names.extend([slots] if isinstance(slots, str) else slots)
    names.extend(getattr(value, "__dict__", {}))
    return [n for n in names if n not in ("__dict__", "__weakref__") and hasattr(value, n)]


def _refuses_writes(value: object) -> bool:
    """Write an attribute back to its own value; a refusal means immutable."""
    if type(value).__setattr__ is object.__setattr__:
        return False
    names = _attribute_names(value)
    if not names:
        return False
    current = getattr(value, names[0])
    try:
        setattr(value, names[0], current)
    except (AttributeError, TypeError):
        return True
    return False


def is_frozen(value: object) -> bool:
    """
    Whether ``value`` is an immutable object.

    Recognises frozen dataclasses, frozen pydantic models, tuples, objects
    with a truthy ``frozen`` attribute, and classes (``__slots__`` or attrs
    frozen classes) whose ``__setattr__`` refuses writes.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return value.__dataclass_params__.frozen  # type: ignore[attr-defined]
    if isinstance(value, BaseModel):
        return bool(value.model_config.get("frozen"))
    if isinstance(value, tuple):
        return True
    if getattr(value, "frozen", False):
        return True
    return _refuses_writes(value)


def _fail(version: str, what: str, expected: object, actual: object) -> None:
    raise AssertionError(f"({version}) {what}\nexpected: {expected!r}\nactual:   {actual!r}")


def _check_equal(expected: object, actual: object, version: str, what: str) -> None:
    if expected != actual:
        _fail(version, what, expected, actual)


def assert_source_range(
    expected: SourceSpan | None, found: Any, version: str, what: str
) -> None:
    """Compare a decoded annotation span against a range reported by a parser."""
    if expected is None:
        if found is not None:
            _fail(version, f"range of {what}", None, found)
        return

    if not isinstance(found, SourceRange):
        raise AssertionError(f"({version}) {found!r} is not a source range for {what}")
    _check_equal(
        (expected.begin, expected.end),
        (found.begin_pos, found.end_pos),
        version,
        f"range of {what}",
    )


class ParseMatrix:
    """
    Differential assertions over every grammar version of a parser family.

    Attributes:
        family: Collaborators of the language under test
        versions: Versions targeted when an assertion names none
        diagnostics: Diagnostics of the version currently being checked
    """

    def __init__(self, family: ParserFamily, versions: Iterable[str] | None = None) -> None:
        self.family = family
        self.diagnostics = DiagnosticCollector()
        self.factory = ParserFactory(family, self.diagnostics)
        self.matrix = VersionMatrix(self.factory)
        self.versions = tuple(versions) if versions is not None else family.all_versions

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def _targets(self, versions: Iterable[str] | None) -> tuple[str, ...]:
        return self.versions if versions is None else tuple(versions)

    def _parse(self, parser: Parser, version: str, name: str, code: str) -> Any:
        """
        Parse ``code``, prefixing the version onto any exception raised.

        Exceptions whose ``str()`` ignores ``args`` (``OSError``, custom
        ``__str__``) carry the version as a note instead.
        """
        buffer = self.family.make_buffer(name, code)
        try:
            return parser.parse(buffer)
        except Exception as exc:
            prefix = f"({version})"
            exc.args = (f"{prefix} {exc}",)
            if prefix not in str(exc):
                exc.add_note(prefix)
            raise

    def _parse_tolerant(self, parser: Parser, version: str, name: str, code: str) -> Any:
        """Parse ``code``; a syntax rejection is fine, its diagnostic was reported."""
        try:
            return self._parse(parser, version, name, code)
        except self.family.syntax_error:
            logger.debug(f"({version}) rejected {code!r}")
            return None

    # ------------------------------------------------------------------
    # Trees
    # ------------------------------------------------------------------

    def assert_parses(
        self,
        ast: Any,
        code: str,
        source_maps: str = "",
        versions: Iterable[str] | None = None,
    ) -> None:
        """
        Require every targeted version to parse ``code`` into ``ast``.

        Also re-checks with the lexer's UTF-32 mode enabled and requires every
        other version to either reject ``code`` or accept it silently.

        Args:
            ast: Expected tree, or None if the parse must produce no tree
            code: Snippet to parse
            source_maps: Annotation block locating ranges in ``code``
            versions: Targeted versions (default: the matrix defaults)
        """
        targets = self._targets(versions)

        for version, parser in self.matrix.each(targets):
            self._try_parsing(ast, code, parser, source_maps, version)

        for version, parser in self.matrix.each(targets):
            parser.lexer.force_utf32 = True
            self._try_parsing(ast, code, parser, source_maps, version)

        for version, parser in self.matrix.each(self.matrix.complement(targets)):
            # Success means ``code`` is valid for ``version`` with another meaning.
            self._parse_tolerant(parser, version, "(assert_older_versions)", code)

    def _try_parsing(
        self, ast: Any, code: str, parser: Parser, source_maps: str, version: str
    ) -> None:
        parsed_ast = self._parse(parser, version, "(assert_parses)", code)

        if ast is None:
            if parsed_ast is not None:
                _fail(version, "AST equality", None, parsed_ast)
            return

        _check_equal(ast, parsed_ast, version, "AST equality")

        frozen = self.family.is_frozen or is_frozen
        for annotation in iter_annotations(source_maps):
            astlet = require_path(parsed_ast, annotation.path, self.family.is_node, version)

            if not frozen(astlet):
                raise AssertionError(f"({version}) {astlet!r} is not frozen")
            location = astlet.location
            if not frozen(location):
                raise AssertionError(f"({version}) location {location!r} is not frozen")
            if not hasattr(location, annotation.field):
                raise AssertionError(
                    f"({version}) {location!r} has no {annotation.field!r} for:\n{parsed_ast!r}"
                )

            found_range = getattr(location, annotation.field)
            assert_source_range(annotation.span, found_range, version, repr(annotation.line))

        audit_final_state(parser, version, self.family.context_flags)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def _check_diagnostic(
        self, expected: ExpectedDiagnosticLike, actual: Diagnostic, version: str
    ) -> None:
        expectation = ExpectedDiagnostic.coerce(expected)
        message = self.family.compile_message(expectation.reason, expectation.arguments)

        _check_equal(expectation.level, actual.level, version, "diagnostic level")
        _check_equal(expectation.reason, actual.reason, version, "diagnostic reason")
        _check_equal(expectation.arguments, dict(actual.arguments), version, "diagnostic arguments")
        _check_equal(message, actual.message, version, "diagnostic message")

    def assert_diagnoses(
        self,
        diagnostic: ExpectedDiagnosticLike,
        code: str,
        source_maps: str = "",
        versions: Iterable[str] | None = None,
    ) -> None:
        """
        Require every targeted version to emit exactly ``diagnostic`` for ``code``.

        Annotation fields: ``location`` is the diagnostic's own range;
        ``highlights (N)`` is its Nth (0-based) highlighted range.
        """
        for version, parser in self.matrix.each(self._targets(versions)):
            self._parse_tolerant(parser, version, "(assert_diagnoses)", code)

            if len(self.diagnostics) != 1:
                raise AssertionError(
                    f"({version}) emits a single diagnostic, not\n{self.diagnostics.render()}"
                )

            emitted = self.diagnostics[0]
            self._check_diagnostic(diagnostic, emitted, version)

            for annotation in iter_annotations(source_maps):
                if annotation.field == "location":
                    assert_source_range(annotation.span, emitted.location, version, "location")
                elif annotation.field == "highlights":
                    if annotation.path and not annotation.path[0].isdigit():
                        raise FixtureError(f"Highlight index must be numeric: {annotation.line!r}")
                    index = int(annotation.path[0]) if annotation.path else 0
                    highlights = emitted.highlights
                    found = highlights[index] if index < len(highlights) else None
                    assert_source_range(annotation.span, found, version, f"{index}th highlight")
                else:
                    raise UnknownDiagnosticFieldError(annotation.field)

    def assert_diagnoses_many(
        self,
        diagnostics: Sequence[ExpectedDiagnosticLike],
        code: str,
        versions: Iterable[str] | None = None,
    ) -> None:
        """Require the exact ordered sequence of ``diagnostics`` for ``code``."""
        for version, parser in self.matrix.each(self._targets(versions)):
            self._parse_tolerant(parser, version, "(assert_diagnoses_many)", code)

            _check_equal(len(diagnostics), len(self.diagnostics), version, "diagnostic count")
            for expected, actual in zip(diagnostics, self.diagnostics):
                self._check_diagnostic(expected, actual, version)

    def refute_diagnoses(self, code: str, versions: Iterable[str] | None = None) -> None:
        """Require ``code`` to parse without any diagnostic."""
        for version, parser in self.matrix.each(self._targets(versions)):
            self._parse_tolerant(parser, version, "(refute_diagnoses)", code)

            if len(self.diagnostics):
                raise AssertionError(
                    f"({version}) emits no diagnostics, not\n{self.diagnostics.render()}"
                )

    # ------------------------------------------------------------------
    # Parse context
    # ------------------------------------------------------------------

    def _is_marker_call(self, node: Any) -> bool:
        return (
            node.type == "send"
            and len(node.children) > 1
            and node.children[1] == self.family.marker
        )

    def assert_context(
        self,
        context: Iterable[str],
        code: str,
        versions: Iterable[str] | None = None,
    ) -> None:
        """Require the context flags set at the marker call in ``code`` to equal ``context``."""
        expected = set(context)

        for version, parser in self.matrix.each(self._targets(versions)):
            parsed_ast = self._parse(parser, version, "(assert_context)", code)

            nodes = find_matching_nodes(parsed_ast, self._is_marker_call, self.family.is_node)
            if len(nodes) != 1:
                raise AssertionError(
                    f"({version}) there must be exactly 1 `{self.family.marker}()` call, "
                    f"found {len(nodes)}"
                )

            node_context = nodes[0].context
            actual = {flag for flag in self.family.context_flags if getattr(node_context, flag)}
            _check_equal(expected, actual, version, "parsing context")
