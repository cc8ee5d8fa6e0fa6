"""Per-path expand/collapse state applied onto freshly built trees.

Persisted state is a plain ``full_path -> bool`` mapping. Paths absent from
the mapping fall back to the structural default: top-level groups open,
deeper groups closed. Entries for paths not present in the current tree are
kept untouched so they are honored again when the path reappears.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .types import PATH_NOT_FOUND, Node, PathTree, TreeWarning


def default_expanded(node: Node) -> bool:
    """Structural default expand flag when no persisted value exists."""
    return node.depth == 1


def apply_expand_state(tree: PathTree, mapping: Mapping[str, bool]) -> None:
    """Set ``expanded`` on every structural node from ``mapping`` or defaults."""
    for node in tree.nodes.values():
        if node.is_leaf:
            node.expanded = False
            continue
        stored = mapping.get(node.full_path)
        node.expanded = bool(stored) if isinstance(stored, bool) else default_expanded(node)


def expanded_paths(tree: PathTree) -> set[str]:
    """Return paths of structural nodes currently flagged expanded."""
    return {node.full_path for node in tree.nodes.values() if not node.is_leaf and node.expanded}


@dataclass(frozen=True)
class ExpandToggleResult:
    """Outcome of one expand/collapse action."""

    mapping: dict[str, bool]
    node: Node | None = None
    changed: bool = False
    warnings: list[TreeWarning] = field(default_factory=list)


def toggle_expand(
    tree: PathTree,
    mapping: Mapping[str, bool],
    full_path: str,
    expanded: bool,
) -> ExpandToggleResult:
    """Set one group's expand flag and record exactly that entry.

    Descendant and sibling entries are left as stored. A missing or leaf path
    is a reported no-op.
    """
    updated = dict(mapping)
    node = tree.nodes.get(full_path)
    if node is None or node.is_leaf:
        reason = "no such group" if node is None else "leaves cannot be expanded"
        return ExpandToggleResult(
            mapping=updated,
            warnings=[TreeWarning(PATH_NOT_FOUND, full_path, f"{reason}; action ignored")],
        )

    changed = node.expanded != expanded or updated.get(full_path) != expanded
    node.expanded = expanded
    updated[full_path] = expanded
    return ExpandToggleResult(mapping=updated, node=node, changed=changed)
