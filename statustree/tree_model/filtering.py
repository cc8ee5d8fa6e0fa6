"""Search-driven visibility: matches, retained ancestors, forced expansion."""

from __future__ import annotations

from dataclasses import dataclass

from .navigation import ancestor_paths
from .types import Node, PathTree


@dataclass(frozen=True)
class SearchResult:
    """Visibility sets computed for one query.

    ``retained`` holds matches and all their ancestors. ``forced_expanded``
    holds groups opened for this response only; it is never persisted.
    """

    query: str = ""
    matches: frozenset[str] = frozenset()
    retained: frozenset[str] = frozenset()
    forced_expanded: frozenset[str] = frozenset()

    @property
    def active(self) -> bool:
        return bool(self.query)

    def is_shown(self, node: Node) -> bool:
        """Return whether ``node`` survives pruning.

        Top-level groups are always shown (collapsed when nothing inside
        matched) so the outline keeps its first level.
        """
        if not self.active:
            return True
        if node.full_path in self.retained:
            return True
        return node.depth == 1 and not node.is_leaf


def normalize_query(query: str | None) -> str:
    return (query or "").strip()


def node_matches(node: Node, folded_query: str) -> bool:
    """Case-insensitive substring test against name, path, and leaf display name."""
    if folded_query in node.name.casefold() or folded_query in node.full_path.casefold():
        return True
    if node.payload is not None and folded_query in node.payload.display_name.casefold():
        return True
    return False


def apply_search_filter(tree: PathTree, query: str | None) -> SearchResult:
    """Compute matches for ``query`` and force their ancestors open.

    The tree itself is not pruned, so selection aggregation still sees every
    node; snapshots consult ``SearchResult.is_shown`` instead. An empty query
    is a no-op.
    """
    normalized = normalize_query(query)
    if not normalized:
        return SearchResult()

    folded = normalized.casefold()
    matches: set[str] = set()
    forced: set[str] = set()
    for node in tree.nodes.values():
        if not node_matches(node, folded):
            continue
        matches.add(node.full_path)
        for path in ancestor_paths(node.full_path):
            if path in forced:
                break
            forced.add(path)

    for path in forced:
        tree.nodes[path].expanded = True

    return SearchResult(
        query=normalized,
        matches=frozenset(matches),
        retained=frozenset(matches | forced),
        forced_expanded=frozenset(forced),
    )
