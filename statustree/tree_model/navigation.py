"""Path lookups over a ``PathTree``: ancestors and subtree walks."""

from __future__ import annotations

from collections.abc import Iterator

from .types import PATH_SEPARATOR, Node, PathTree


def ancestor_paths(full_path: str) -> list[str]:
    """Return ancestor paths of ``full_path`` nearest-first, excluding the root."""
    segments = full_path.split(PATH_SEPARATOR)
    return [PATH_SEPARATOR.join(segments[:idx]) for idx in range(len(segments) - 1, 0, -1)]


def ancestors(tree: PathTree, node: Node) -> list[Node]:
    """Return existing ancestor nodes of ``node`` nearest-first, excluding the root."""
    found: list[Node] = []
    for path in ancestor_paths(node.full_path):
        ancestor = tree.nodes.get(path)
        if ancestor is not None:
            found.append(ancestor)
    return found


def iter_subtree(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all its descendants in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.sorted_children()))


def iter_subtree_leaves(node: Node) -> Iterator[Node]:
    for current in iter_subtree(node):
        if current.is_leaf:
            yield current


def iter_post_order(node: Node) -> Iterator[Node]:
    """Yield descendants of ``node`` children-first, then ``node`` itself."""
    stack: list[tuple[Node, bool]] = [(node, False)]
    while stack:
        current, visited = stack.pop()
        if visited or not current.children:
            yield current
            continue
        stack.append((current, True))
        for child in reversed(current.sorted_children()):
            stack.append((child, False))

