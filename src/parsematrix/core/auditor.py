"""
Post-parse state audit.

After a successful parse every version-independent bookkeeping structure of
the parser and its lexer must be back to its initial state. Leftovers mean
the parser under test leaks state between parses.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

LEXER_STACKS = ("cmdarg", "cond", "cmdarg_stack", "cond_stack")
PARSER_STACKS = (
    "max_numparam_stack",
    "current_arg_stack",
    "pattern_variables",
    "pattern_hash_keys",
)


def _is_empty(structure: Any) -> bool:
    empty = getattr(structure, "empty", None)
    if callable(empty):
        return bool(empty())
    return len(structure) == 0


def final_state_violations(parser: Any, version: str, flags: Iterable[str]) -> list[str]:
    """Return one message per structure not in its initial state."""
    lexer = parser.lexer
    violations: list[str] = []

    for name in LEXER_STACKS:
        if not _is_empty(getattr(lexer, name)):
            violations.append(f"({version}) expected {name} to be empty after parsing")

    if lexer.paren_nest != 0:
        violations.append(f"({version}) expected paren_nest to be 0 after parsing")
    if not _is_empty(lexer.lambda_stack):
        violations.append(f"({version}) expected lambda_stack to be empty after parsing")

    if not _is_empty(parser.static_env):
        violations.append(f"({version}) expected static_env to be empty after parsing")
    for flag in flags:
        if getattr(parser.context, flag):
            violations.append(f"({version}) expected context.{flag} to be `false` after parsing")

    for name in PARSER_STACKS:
        if not _is_empty(getattr(parser, name)):
            violations.append(f"({version}) expected {name} to be empty after parsing")

    return violations


def audit_final_state(parser: Any, version: str, flags: Iterable[str]) -> None:
    """
    Fail on the first structure not back to its initial state.

    Raises:
        AssertionError: naming the version and the offending structure
    """
    violations = final_state_violations(parser, version, flags)
    if violations:
        raise AssertionError(violations[0])
