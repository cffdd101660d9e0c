"""Shared pytest fixtures for parsematrix tests."""

from __future__ import annotations

import pytest
from calc_lang import CALC, CalcParser, CalcSyntaxError, Node
from calc_lang.source import Buffer

from parsematrix.core.assertions import ParseMatrix
from parsematrix.core.interfaces import ParserFamily


@pytest.fixture
def matrix() -> ParseMatrix:
    """Return a ParseMatrix over every calc version."""
    return ParseMatrix(CALC)


@pytest.fixture
def parse():
    """Parse a snippet with one calc version, outside the matrix."""

    def _parse(code: str, version: str = "2.1") -> Node | None:
        parser = CALC.versions[version]()
        return parser.parse(Buffer("(test)", code))

    return _parse


def make_family(parser_class: type[CalcParser], **overrides) -> ParserFamily:
    """A calc family whose every version uses ``parser_class``."""
    options = {
        "name": "calc",
        "versions": {version: parser_class for version in CALC.versions},
        "make_buffer": Buffer,
        "syntax_error": CalcSyntaxError,
        "compile_message": CALC.compile_message,
        "context_flags": CALC.context_flags,
    }
    options.update(overrides)
    return ParserFamily(**options)


@pytest.fixture
def family_with():
    """Build a single-parser calc family, for misbehaving parser doubles."""
    return make_family
