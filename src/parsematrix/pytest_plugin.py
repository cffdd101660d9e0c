"""
pytest plugin providing the ``parse_matrix`` fixture.

Registered through the ``pytest11`` entry point. The fixture reads the
project's ``[tool.parsematrix]`` configuration and hands each test a fresh
``ParseMatrix`` with its own diagnostic collector.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from parsematrix.core.assertions import ParseMatrix
from parsematrix.core.config import HarnessConfig, load_config


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("parsematrix")
    group.addoption(
        "--parsematrix-versions",
        action="store",
        default=None,
        help=(
            "Comma-separated grammar versions targeted by assertions that "
            "name no versions of their own"
        ),
    )


@pytest.fixture(scope="session")
def parsematrix_config(request: pytest.FixtureRequest) -> HarnessConfig:
    """Return the harness configuration for this test session."""
    config = load_config(start=Path(str(request.config.rootpath)))
    option = request.config.getoption("--parsematrix-versions")
    if option:
        config.versions = [v.strip() for v in option.split(",") if v.strip()]
    return config


@pytest.fixture
def parse_matrix(parsematrix_config: HarnessConfig) -> ParseMatrix:
    """Return a ParseMatrix for the configured parser family."""
    family = parsematrix_config.load_family()
    return ParseMatrix(family, parsematrix_config.target_versions(family))
