"""
calc: a tiny multi-version language used to exercise parsematrix.

Five grammar versions share one lexer and one recursive-descent parser; see
``parser`` for how they differ.
"""

from parsematrix.core.interfaces import ParserFamily

from .diagnostics import MESSAGES, CalcSyntaxError, Diagnostic, compile_message
from .nodes import Node, s
from .parser import CONTEXT_FLAGS, Calc10, Calc11, Calc20, Calc21, CalcLite, CalcParser
from .source import Buffer, Range

CALC = ParserFamily(
    name="calc",
    versions={
        "1.0": Calc10,
        "1.1": Calc11,
        "2.0": Calc20,
        "2.1": Calc21,
        "lite": CalcLite,
    },
    make_buffer=Buffer,
    syntax_error=CalcSyntaxError,
    compile_message=compile_message,
    context_flags=CONTEXT_FLAGS,
)

ALL_VERSIONS = CALC.all_versions
SINCE_1_1 = ["1.1", "2.0", "2.1"]
SINCE_2_0 = ["2.0", "2.1"]
NUMBERED = ["1.0", "1.1", "2.0", "2.1"]

__all__ = [
    "ALL_VERSIONS",
    "CALC",
    "CONTEXT_FLAGS",
    "MESSAGES",
    "NUMBERED",
    "SINCE_1_1",
    "SINCE_2_0",
    "Buffer",
    "Calc10",
    "Calc11",
    "Calc20",
    "Calc21",
    "CalcLite",
    "CalcParser",
    "CalcSyntaxError",
    "Diagnostic",
    "Node",
    "Range",
    "compile_message",
    "s",
]
