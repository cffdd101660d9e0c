"""Lexer for the calc test language."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .diagnostics import Diagnostic, DiagnosticEngine
from .source import Buffer, Range

KEYWORDS = {"def": "kDEF", "end": "kEND"}

PUNCTUATION = {
    "+": "tPLUS",
    "-": "tMINUS",
    "*": "tSTAR",
    "/": "tDIVIDE",
    "=": "tEQL",
    "(": "tLPAREN",
    ")": "tRPAREN",
    "{": "tLCURLY",
    "}": "tRCURLY",
    "|": "tPIPE",
    ",": "tCOMMA",
    ";": "tSEMI",
    "\n": "tSEMI",
}


@dataclass(frozen=True)
class Token:
    type: str
    value: Any
    range: Range
    space_before: bool = False


class Lexer:
    """
    Tokenizes a whole buffer up front.

    ``force_utf32`` makes the lexer read characters out of a UTF-32LE
    encoding of the source instead of the ``str`` itself.
    """

    def __init__(self, diagnostics: DiagnosticEngine, lambdas: bool = True) -> None:
        self.diagnostics = diagnostics
        self.lambdas = lambdas
        self.force_utf32 = False

        self.cond: list[bool] = []
        self.cmdarg: list[bool] = []
        self.cond_stack: list[list[bool]] = []
        self.cmdarg_stack: list[list[bool]] = []
        self.lambda_stack: list[int] = []
        self.paren_nest = 0
        self.brace_nest = 0

    def _load(self, source: str) -> None:
        self._length = len(source)
        if self.force_utf32:
            self._encoded = source.encode("utf-32-le")
        else:
            self._source = source

    def _char(self, pos: int) -> str:
        if pos >= self._length:
            return ""
        if self.force_utf32:
            return self._encoded[pos * 4 : pos * 4 + 4].decode("utf-32-le")
        return self._source[pos]

    def tokenize(self, buffer: Buffer) -> list[Token]:
        self._load(buffer.source)
        tokens: list[Token] = []
        pos = 0
        space = False

        while pos < self._length:
            c = self._char(pos)

            if c in " \t\r":
                pos += 1
                space = True
                continue

            start = pos
            if c.isdigit():
                while self._char(pos).isdigit():
                    pos += 1
                digits = "".join(self._char(i) for i in range(start, pos))
                tokens.append(Token("tINTEGER", int(digits), Range(start, pos), space))
            elif c.isalpha() or c == "_":
                while self._char(pos).isalnum() or self._char(pos) == "_":
                    pos += 1
                word = "".join(self._char(i) for i in range(start, pos))
                kind = KEYWORDS.get(word, "tIDENTIFIER")
                tokens.append(Token(kind, word, Range(start, pos), space))
            elif c == "-" and self._char(pos + 1) == ">" and self.lambdas:
                pos += 2
                self.lambda_stack.append(self.brace_nest)
                tokens.append(Token("tLAMBDA", "->", Range(start, pos), space))
            elif c in PUNCTUATION:
                pos += 1
                kind = PUNCTUATION[c]
                if kind == "tLPAREN":
                    self.paren_nest += 1
                elif kind == "tRPAREN":
                    self.paren_nest -= 1
                elif kind == "tLCURLY":
                    self.brace_nest += 1
                elif kind == "tRCURLY":
                    self.brace_nest -= 1
                    if self.lambda_stack and self.lambda_stack[-1] == self.brace_nest:
                        self.lambda_stack.pop()
                tokens.append(Token(kind, c, Range(start, pos), space))
            else:
                self.diagnostics.process(
                    Diagnostic("error", "unexpected_char", {"character": c}, Range(start, start + 1))
                )

            space = False

        tokens.append(Token("tEOF", None, Range(self._length, self._length), space))
        return tokens
