"""
Version matrix: parser construction and per-version iteration.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator

from .diagnostics import DiagnosticCollector
from .errors import UnknownVersionError
from .interfaces import Parser, ParserFamily

logger = logging.getLogger(__name__)


class ParserFactory:
    """Builds fresh parsers wired to a diagnostic collector."""

    def __init__(self, family: ParserFamily, collector: DiagnosticCollector) -> None:
        self.family = family
        self.collector = collector

    def build(self, version: str) -> Parser:
        """
        Construct a new parser for ``version``.

        Raises:
            UnknownVersionError: ``version`` is not in the family table
        """
        try:
            constructor = self.family.versions[version]
        except KeyError:
            raise UnknownVersionError(version, self.family.name) from None

        parser = constructor()
        parser.diagnostics.consumer = self.collector.append
        logger.debug(f"Built {self.family.name} {version} parser {type(parser).__name__}")
        return parser


class VersionMatrix:
    """Iterates the supported versions of a family, one fresh parser each."""

    def __init__(self, factory: ParserFactory) -> None:
        self.factory = factory

    @property
    def supported(self) -> tuple[str, ...]:
        return self.factory.family.all_versions

    def select(self, versions: Iterable[str]) -> list[str]:
        """Intersect ``versions`` with the supported set, in supported order."""
        requested = set(versions)
        return [v for v in self.supported if v in requested]

    def complement(self, versions: Iterable[str]) -> list[str]:
        """Supported versions not in ``versions``, in supported order."""
        excluded = set(versions)
        return [v for v in self.supported if v not in excluded]

    def each(self, versions: Iterable[str]) -> Iterator[tuple[str, Parser]]:
        """
        Yield ``(version, parser)`` for every requested, supported version.

        The diagnostic collector is cleared before each parser is built.
        Unknown identifiers are skipped.
        """
        for version in self.select(versions):
            self.factory.collector.clear()
            logger.debug(f"Running version {version}")
            yield version, self.factory.build(version)

    def run(self, versions: Iterable[str], callback: Callable[[str, Parser], object]) -> None:
        """Invoke ``callback(version, parser)`` for each selected version."""
        for version, parser in self.each(versions):
            callback(version, parser)
