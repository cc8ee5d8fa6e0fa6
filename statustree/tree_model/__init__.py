"""Path-tree engine: build, expand, filter, select, and snapshot.

Defines ``PathTree``/``Node`` and the per-request transforms applied to them.
Also provides markdown structure export and plain-text outline rows.
"""

from __future__ import annotations

from .build import BuildResult, build_path_tree, split_path
from .expansion import ExpandToggleResult, apply_expand_state, default_expanded, expanded_paths, toggle_expand
from .export import tree_to_markdown
from .filtering import SearchResult, apply_search_filter, node_matches
from .navigation import ancestor_paths, ancestors, iter_post_order, iter_subtree, iter_subtree_leaves
from .rendering import format_snapshot, format_snapshot_row
from .selection import SelectToggleResult, aggregate_selection, apply_selection, resolve_selected, toggle_select
from .snapshot import build_snapshot, iter_snapshot
from .types import (
    MALFORMED_PATH,
    PATH_COLLISION,
    PATH_NOT_FOUND,
    PATH_SEPARATOR,
    FlatRecord,
    LeafPayload,
    Node,
    NodeSnapshot,
    PathTree,
    TreeWarning,
)

__all__ = [
    "MALFORMED_PATH",
    "PATH_COLLISION",
    "PATH_NOT_FOUND",
    "PATH_SEPARATOR",
    "FlatRecord",
    "LeafPayload",
    "Node",
    "NodeSnapshot",
    "PathTree",
    "TreeWarning",
    "BuildResult",
    "build_path_tree",
    "split_path",
    "ExpandToggleResult",
    "apply_expand_state",
    "default_expanded",
    "expanded_paths",
    "toggle_expand",
    "SearchResult",
    "apply_search_filter",
    "node_matches",
    "SelectToggleResult",
    "aggregate_selection",
    "apply_selection",
    "resolve_selected",
    "toggle_select",
    "ancestor_paths",
    "ancestors",
    "iter_post_order",
    "iter_subtree",
    "iter_subtree_leaves",
    "build_snapshot",
    "iter_snapshot",
    "format_snapshot",
    "format_snapshot_row",
    "tree_to_markdown",
]
