"""
Source-map annotation mini-language.

Fixtures describe source ranges by drawing markers under a code snippet:

    10 + 20
    ~~~~~~~ expression
    |   ^ operator
    |     ~~ expression (lit/2)

Each line is: leading whitespace (its width is the range start), a run of
``~``/``^`` (its width is the range length) or a single ``!`` (no range),
whitespace, a ``[a-z_]+`` field name and an optional ``(path)`` of
dot-separated ``[a-z_./0-9]`` segments. A leading ``|`` (after whitespace)
lets a line keep its columns inside an indented literal and is stripped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict

from .errors import FixtureError, SourceMapFormatError

logger = logging.getLogger(__name__)

_WHITESPACE = frozenset(" \t\n\r\f\v")
_RANGE_MARKERS = frozenset("~^")
_NO_RANGE_MARKER = "!"
_CONTINUATION = "|"
_FIELD_CHARS = frozenset("abcdefghijklmnopqrstuvwxyz_")
_PATH_CHARS = _FIELD_CHARS | frozenset("./0123456789")


class SourceSpan(BaseModel):
    """Half-open ``[begin, end)`` character range decoded from an annotation."""

    begin: int
    end: int

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.begin}...{self.end}"


class PathStep(BaseModel):
    """
    One step of an AST path.

    ``index`` is 0-based; the text form ``dstr/2`` is 1-based, so it decodes
    to ``PathStep(node_type="dstr", index=1)``.
    """

    node_type: str
    index: int = 0

    model_config = ConfigDict(frozen=True)

    @classmethod
    def parse(cls, segment: str) -> PathStep:
        type_str, sep, index_str = segment.partition("/")
        if not sep:
            return cls(node_type=type_str)
        if not index_str.isdigit() or int(index_str) < 1:
            raise FixtureError(f"Invalid occurrence index in AST path segment {segment!r}")
        return cls(node_type=type_str, index=int(index_str) - 1)


class Annotation(BaseModel):
    """A decoded annotation line."""

    span: SourceSpan | None
    field: str
    path: tuple[str, ...] = ()
    line: str

    model_config = ConfigDict(frozen=True)

    @property
    def steps(self) -> tuple[PathStep, ...]:
        return tuple(PathStep.parse(segment) for segment in self.path)


def _strip_continuation(line: str) -> str:
    """Remove a leading ``\\s*|`` marker and trailing whitespace."""
    i = 0
    while i < len(line) and line[i] in _WHITESPACE:
        i += 1
    if i < len(line) and line[i] == _CONTINUATION:
        line = line[i + 1 :]
    return line.rstrip()


def _scan_run(line: str, pos: int, chars: frozenset[str]) -> int:
    """Return the first position at or after ``pos`` not in ``chars``."""
    while pos < len(line) and line[pos] in chars:
        pos += 1
    return pos


def decode_line(line: str) -> Annotation:
    """
    Decode one stripped, non-empty annotation line.

    Raises:
        SourceMapFormatError: the line does not follow the annotation format
    """
    pos = _scan_run(line, 0, _WHITESPACE)
    begin = pos

    if pos < len(line) and line[pos] == _NO_RANGE_MARKER:
        pos += 1
        span = None
    else:
        marker_end = _scan_run(line, pos, _RANGE_MARKERS)
        if marker_end == pos:
            raise SourceMapFormatError(line)
        span = SourceSpan(begin=begin, end=marker_end)
        pos = marker_end

    field_start = _scan_run(line, pos, _WHITESPACE)
    if field_start == pos:
        raise SourceMapFormatError(line)
    field_end = _scan_run(line, field_start, _FIELD_CHARS)
    if field_end == field_start:
        raise SourceMapFormatError(line)
    field = line[field_start:field_end]

    if field_end == len(line):
        return Annotation(span=span, field=field, line=line)

    path_open = _scan_run(line, field_end, _WHITESPACE)
    if path_open == field_end or path_open >= len(line) or line[path_open] != "(":
        raise SourceMapFormatError(line)
    path_end = _scan_run(line, path_open + 1, _PATH_CHARS)
    if path_end == path_open + 1 or line[path_end:] != ")":
        raise SourceMapFormatError(line)

    path = tuple(line[path_open + 1 : path_end].split("."))
    return Annotation(span=span, field=field, path=path, line=line)


def iter_annotations(descriptions: str) -> Iterator[Annotation]:
    """
    Lazily decode an annotation block, one ``Annotation`` per non-blank line.

    Lines are yielded in source order; a malformed line raises
    ``SourceMapFormatError`` once decoding reaches it.
    """
    for raw in descriptions.split("\n"):
        line = _strip_continuation(raw)
        if not line:
            continue

        annotation = decode_line(line)
        logger.debug(f"Decoded annotation {annotation.field} {annotation.span} {annotation.path}")
        yield annotation


def decode_annotations(descriptions: str) -> list[Annotation]:
    """Decode a whole annotation block eagerly."""
    return list(iter_annotations(descriptions))
