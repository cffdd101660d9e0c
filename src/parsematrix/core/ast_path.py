"""
AST path resolution and predicate search.

A path such as ``send.lit/2`` walks the direct children of each node:
the first ``send`` child of the root, then the second ``lit`` child of that.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from .errors import AstPathNotFoundError
from .interfaces import default_is_node
from .source_map import PathStep

NodePredicate = Callable[[Any], bool]


def resolve_path(
    root: Any,
    steps: Iterable[PathStep],
    is_node: NodePredicate = default_is_node,
) -> Any | None:
    """
    Follow ``steps`` down from ``root``.

    Only direct children are considered at each step, in the order the node
    stores them. An empty path resolves to ``root`` itself.

    Returns:
        The selected node, or None if some step has no matching child
    """
    node = root
    for step in steps:
        matching = [
            child
            for child in node.children
            if is_node(child) and child.type == step.node_type
        ]
        if step.index >= len(matching):
            return None
        node = matching[step.index]
    return node


def require_path(
    root: Any,
    path: tuple[str, ...],
    is_node: NodePredicate = default_is_node,
    version: str | None = None,
) -> Any:
    """Resolve a raw annotation path, raising if it selects nothing."""
    node = resolve_path(root, (PathStep.parse(segment) for segment in path), is_node)
    if node is None:
        raise AstPathNotFoundError(path, root, version)
    return node


def find_matching_nodes(
    root: Any,
    predicate: NodePredicate,
    is_node: NodePredicate = default_is_node,
) -> list[Any]:
    """Return every node under ``root`` (inclusive) matching ``predicate``, in pre-order."""
    if not is_node(root):
        return []

    result = []
    if predicate(root):
        result.append(root)
    for child in root.children:
        result.extend(find_matching_nodes(child, predicate, is_node))
    return result
