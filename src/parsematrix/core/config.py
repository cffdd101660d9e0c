"""
Harness configuration.

Read from ``[tool.parsematrix]`` in the nearest ``pyproject.toml`` or from a
standalone ``parsematrix.toml`` (top-level keys):

    [tool.parsematrix]
    family = "calc_lang:CALC"
    versions = ["2.0", "2.1"]

``PARSEMATRIX_VERSIONS`` (comma-separated) overrides ``versions``. Both only
set the default targets: an assertion that lists its own versions runs
exactly those, and versions left out of the default still get the
untargeted check.
"""

from __future__ import annotations

import importlib
import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError
from .interfaces import ParserFamily

logger = logging.getLogger(__name__)

VERSIONS_ENV_VAR = "PARSEMATRIX_VERSIONS"
PYPROJECT = "pyproject.toml"
STANDALONE = "parsematrix.toml"


@dataclass
class HarnessConfig:
    """Which parser family to test and which of its versions to target by default."""

    family: str | None = None
    versions: list[str] | None = None
    source: Path | None = field(default=None, compare=False)

    def load_family(self) -> ParserFamily:
        """
        Import the configured ``module:attribute`` family.

        Raises:
            ConfigError: no family configured, bad import path or wrong type
        """
        if not self.family:
            raise ConfigError("No parser family configured (set [tool.parsematrix] family)")

        module_name, sep, attr = self.family.partition(":")
        if not sep or not module_name or not attr:
            raise ConfigError(f"family must look like 'module:attribute', got {self.family!r}")

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise ConfigError(f"Cannot import parser family module {module_name!r}: {e}") from e

        try:
            family = getattr(module, attr)
        except AttributeError:
            raise ConfigError(f"Module {module_name!r} has no attribute {attr!r}") from None

        if not isinstance(family, ParserFamily):
            raise ConfigError(f"{self.family} is {type(family).__name__}, not a ParserFamily")
        return family

    def target_versions(self, family: ParserFamily) -> tuple[str, ...]:
        """Configured default versions known to ``family``, in matrix order."""
        if self.versions is None:
            return family.all_versions

        unknown = [v for v in self.versions if v not in family.versions]
        if unknown:
            logger.warning(
                "Ignoring versions unknown to %s: %s", family.name, ", ".join(unknown)
            )
        requested = set(self.versions)
        return tuple(v for v in family.all_versions if v in requested)


def find_config_file(start: Path | None = None) -> Path | None:
    """Walk up from ``start`` to the first directory holding harness configuration."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        standalone = directory / STANDALONE
        if standalone.is_file():
            return standalone
        pyproject = directory / PYPROJECT
        if pyproject.is_file() and "parsematrix" in _read_toml(pyproject).get("tool", {}):
            return pyproject
    return None


def _read_toml(path: Path) -> dict:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def load_config(path: Path | None = None, start: Path | None = None) -> HarnessConfig:
    """
    Load harness configuration.

    Args:
        path: Explicit configuration file; searched for when omitted
        start: Directory the search starts from (default: cwd)

    Returns:
        HarnessConfig, empty if no configuration exists
    """
    if path is None:
        path = find_config_file(start)

    data: dict = {}
    if path is not None:
        raw = _read_toml(path)
        data = raw if path.name == STANDALONE else raw.get("tool", {}).get("parsematrix", {})

    versions = data.get("versions")
    if versions is not None and not (
        isinstance(versions, list) and all(isinstance(v, str) for v in versions)
    ):
        raise ConfigError(f"versions must be a list of strings in {path}")

    env_value = os.environ.get(VERSIONS_ENV_VAR, "").strip()
    if env_value:
        versions = [v.strip() for v in env_value.split(",") if v.strip()]

    return HarnessConfig(family=data.get("family"), versions=versions, source=path)
