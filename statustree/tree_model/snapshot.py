"""Immutable snapshot emission for full or partial tree refreshes."""

from __future__ import annotations

from .filtering import SearchResult
from .types import Node, NodeSnapshot, PathTree


def _snapshot_node(node: Node, search: SearchResult) -> NodeSnapshot:
    shown_children = [child for child in node.sorted_children() if search.is_shown(child)]
    stub = search.active and node.depth > 0 and node.full_path not in search.retained
    expanded = node.expanded and not node.is_leaf and not stub
    children: tuple[NodeSnapshot, ...] = ()
    if expanded:
        children = tuple(_snapshot_node(child, search) for child in shown_children)
    return NodeSnapshot(
        name=node.name,
        full_path=node.full_path,
        is_leaf=node.is_leaf,
        depth=node.depth,
        expanded=expanded,
        selected=node.selected,
        partial=node.partial,
        payload=node.payload,
        children=children,
        has_children=bool(shown_children) and not stub,
        match=node.full_path in search.matches,
    )


def build_snapshot(
    tree: PathTree,
    search: SearchResult | None = None,
    root_path: str | None = None,
) -> NodeSnapshot | None:
    """Freeze the visible tree rooted at ``root_path`` (whole tree by default).

    Children of collapsed groups are omitted. With an active search, nodes
    outside the retained set are pruned, except top-level groups which are
    emitted collapsed. Returns ``None`` when ``root_path`` is unknown.
    """
    active_search = search or SearchResult()
    node = tree.get(root_path or "")
    if node is None:
        return None
    return _snapshot_node(node, active_search)


def iter_snapshot(snapshot: NodeSnapshot):
    """Yield ``snapshot`` and its emitted descendants in pre-order."""
    stack = [snapshot]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))
