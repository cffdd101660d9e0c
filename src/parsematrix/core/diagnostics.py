"""
Diagnostic collection and expectations.

Each ``ParseMatrix`` owns one ``DiagnosticCollector``. The version matrix
clears it before building the next parser, so records never leak from one
grammar version into another.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .interfaces import Diagnostic


class DiagnosticCollector:
    """Accumulates diagnostics emitted during a single version's parse."""

    def __init__(self) -> None:
        self._records: list[Diagnostic] = []

    def append(self, diagnostic: Diagnostic) -> None:
        self._records.append(diagnostic)

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._records)

    def __getitem__(self, index: int) -> Diagnostic:
        return self._records[index]

    def render(self) -> str:
        """Render every collected diagnostic, one per line."""
        return "\n".join(d.render() for d in self._records)


class ExpectedDiagnostic(BaseModel):
    """
    What a test expects a parser to report.

    Examples:
        - ExpectedDiagnostic(level="warning", reason="ambiguous_prefix",
          arguments={"prefix": "*"})
        - ExpectedDiagnostic.coerce(("error", "unexpected_token", {"token": "tRPAREN"}))
    """

    level: str
    reason: str
    arguments: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def coerce(
        cls, value: ExpectedDiagnostic | Sequence[Any] | Mapping[str, Any]
    ) -> ExpectedDiagnostic:
        """Accept a model, a ``(level, reason[, arguments])`` tuple or a mapping."""
        if isinstance(value, ExpectedDiagnostic):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(value)

        level, reason, *rest = value
        arguments = rest[0] if rest and rest[0] is not None else {}
        return cls(level=level, reason=reason, arguments=dict(arguments))
