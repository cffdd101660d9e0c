"""Tests for the parse_matrix pytest fixture."""

import pytest
from calc_lang import CALC, s

from parsematrix.core.assertions import ParseMatrix
from parsematrix.core.config import VERSIONS_ENV_VAR, HarnessConfig


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(VERSIONS_ENV_VAR, raising=False)


def test_fixture_uses_project_family(parse_matrix: ParseMatrix) -> None:
    assert parse_matrix.family is CALC
    parse_matrix.assert_parses(s("lit", 1), "1")


def test_config_is_shared(parsematrix_config: HarnessConfig) -> None:
    assert parsematrix_config.family == "calc_lang:CALC"


def test_each_test_gets_a_fresh_matrix(
    parse_matrix: ParseMatrix, parsematrix_config: HarnessConfig
) -> None:
    other = ParseMatrix(parsematrix_config.load_family())
    assert other.diagnostics is not parse_matrix.diagnostics


def test_configured_versions(pytester: pytest.Pytester, clean_env: None) -> None:
    pytester.makepyprojecttoml(
        """
        [tool.parsematrix]
        family = "calc_lang:CALC"
        versions = ["lite"]
        """
    )
    pytester.makepyfile(
        """
        def test_targets(parse_matrix):
            assert parse_matrix.versions == ("lite",)
        """
    )
    result = pytester.runpytest()
    result.assert_outcomes(passed=1)


def test_versions_option_overrides_config(pytester: pytest.Pytester, clean_env: None) -> None:
    pytester.makepyprojecttoml(
        """
        [tool.parsematrix]
        family = "calc_lang:CALC"
        versions = ["lite"]
        """
    )
    pytester.makepyfile(
        """
        def test_targets(parse_matrix):
            assert parse_matrix.versions == ("2.0", "2.1")
        """
    )
    result = pytester.runpytest("--parsematrix-versions", "2.1, 2.0")
    result.assert_outcomes(passed=1)


def test_explicit_versions_ignore_option(pytester: pytest.Pytester, clean_env: None) -> None:
    pytester.makepyprojecttoml(
        """
        [tool.parsematrix]
        family = "calc_lang:CALC"
        """
    )
    pytester.makepyfile(
        """
        from calc_lang import s

        def test_targets(parse_matrix, monkeypatch):
            built = []
            build = parse_matrix.factory.build

            def recording_build(version):
                built.append(version)
                return build(version)

            monkeypatch.setattr(parse_matrix.factory, "build", recording_build)
            parse_matrix.assert_parses(
                s("numblock", s("send", None, "foo"), 1, s("lvar", "_1")),
                "foo { _1 }",
                versions=["2.0", "2.1"],
            )
            assert parse_matrix.versions == ("lite",)
            assert built[:4] == ["2.0", "2.1", "2.0", "2.1"]
        """
    )
    result = pytester.runpytest("--parsematrix-versions", "lite")
    result.assert_outcomes(passed=1)


def test_missing_family_is_reported(pytester: pytest.Pytester, clean_env: None) -> None:
    pytester.makepyprojecttoml(
        """
        [tool.parsematrix]
        versions = ["2.0"]
        """
    )
    pytester.makepyfile(
        """
        def test_targets(parse_matrix):
            pass
        """
    )
    result = pytester.runpytest()
    result.assert_outcomes(errors=1)
    result.stdout.fnmatch_lines(["*No parser family configured*"])
