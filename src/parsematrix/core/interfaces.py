"""
Collaborator surface consumed by the harness.

The grammar-version parsers, their lexers, the message catalog and the AST
node classes all live outside this package. The protocols below describe the
attributes the harness reads; ``ParserFamily`` bundles one language's
collaborators so the rest of the harness stays language-agnostic.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SourceRange(Protocol):
    """Half-open ``[begin_pos, end_pos)`` interval into a source buffer."""

    begin_pos: int
    end_pos: int


class Diagnostic(Protocol):
    """A warning or error emitted by a parser while parsing."""

    level: str
    reason: str
    arguments: Mapping[str, Any]
    message: str
    location: SourceRange
    highlights: Sequence[SourceRange]

    def render(self) -> str: ...


class DiagnosticSink(Protocol):
    consumer: Callable[[Any], None] | None


class Lexer(Protocol):
    cmdarg: Sequence[Any]
    cond: Sequence[Any]
    cmdarg_stack: Sequence[Any]
    cond_stack: Sequence[Any]
    lambda_stack: Sequence[Any]
    paren_nest: int
    force_utf32: bool


class Parser(Protocol):
    """One grammar-version parser instance."""

    diagnostics: DiagnosticSink
    lexer: Lexer
    context: Any
    static_env: Any
    max_numparam_stack: Sequence[Any]
    current_arg_stack: Sequence[Any]
    pattern_variables: Any
    pattern_hash_keys: Any

    def parse(self, buffer: Any) -> Any: ...


def default_is_node(value: object) -> bool:
    """Anything with a ``type`` and a ``children`` sequence counts as a node."""
    return (
        hasattr(value, "type")
        and isinstance(getattr(value, "children", None), Sequence)
        and not isinstance(value, str)
    )


@dataclass(frozen=True)
class ParserFamily:
    """
    The collaborators of one evolving language.

    Attributes:
        name: Human-readable language name used in error messages
        versions: Ordered mapping of version identifier to parser constructor.
            Its order is the order the matrix iterates in.
        make_buffer: ``(name, source) -> buffer`` accepted by ``Parser.parse``
        syntax_error: Exception type a parser raises to reject its input
        compile_message: ``(reason, arguments) -> str`` message formatter
        context_flags: Names of every boolean parse-context flag
        marker: Method name of the call used to probe parse context
        is_node: Predicate telling AST nodes apart from literal children
        is_frozen: Immutability predicate for nodes and location maps;
            None uses the built-in check
    """

    name: str
    versions: Mapping[str, Callable[[], Parser]]
    make_buffer: Callable[[str, str], Any]
    syntax_error: type[BaseException]
    compile_message: Callable[[str, Mapping[str, Any]], str]
    context_flags: tuple[str, ...] = ()
    marker: str = "get_context"
    is_node: Callable[[object], bool] = field(default=default_is_node)
    is_frozen: Callable[[object], bool] | None = None

    @property
    def all_versions(self) -> tuple[str, ...]:
        return tuple(self.versions)
