"""Leaf selection marking and bottom-up group aggregation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .navigation import ancestors, iter_post_order, iter_subtree, iter_subtree_leaves
from .types import PATH_NOT_FOUND, Node, PathTree, TreeWarning


def _aggregate_node(node: Node) -> None:
    """Recompute one group's flags from its direct children."""
    if node.is_leaf:
        node.partial = False
        return
    children = node.children.values()
    node.selected = bool(node.children) and all(child.selected for child in children)
    node.partial = not node.selected and any(child.selected or child.partial for child in children)


def aggregate_selection(tree: PathTree) -> None:
    """Single post-order pass computing every group's aggregate selection.

    A group is selected iff it has children and all of them are selected.
    ``partial`` marks groups with some, but not all, selected descendants.
    The root carries no selection of its own.
    """
    for node in iter_post_order(tree.root):
        if node is tree.root:
            continue
        _aggregate_node(node)
    tree.root.selected = False
    tree.root.partial = False


def apply_selection(tree: PathTree, selected_ids: Iterable[int]) -> None:
    """Mark leaves by membership in ``selected_ids`` then aggregate groups."""
    wanted = set(selected_ids)
    for leaf in tree.iter_leaves():
        leaf.selected = leaf.payload.leaf_id in wanted
    aggregate_selection(tree)


@dataclass(frozen=True)
class SelectToggleResult:
    """Outcome of one select/deselect action."""

    selected_ids: set[int]
    node: Node | None = None
    changed_paths: set[str] = field(default_factory=set)
    warnings: list[TreeWarning] = field(default_factory=list)


def toggle_select(
    tree: PathTree,
    selected_ids: Iterable[int],
    full_path: str,
    selected: bool,
) -> SelectToggleResult:
    """Select or clear ``full_path`` and keep ancestors consistent.

    Groups propagate the new value down to every descendant leaf; afterwards
    each ancestor up to the root is re-aggregated. Ids of leaves outside the
    touched subtree stay in the returned set even when not in this tree.
    """
    updated = set(selected_ids)
    node = tree.nodes.get(full_path)
    if node is None:
        return SelectToggleResult(
            selected_ids=updated,
            warnings=[TreeWarning(PATH_NOT_FOUND, full_path, "no such node; action ignored")],
        )

    lineage = ancestors(tree, node)
    touched = list(iter_subtree(node)) + lineage
    before = {current.full_path: (current.selected, current.partial) for current in touched}

    for leaf in iter_subtree_leaves(node):
        leaf.selected = selected
        if selected:
            updated.add(leaf.payload.leaf_id)
        else:
            updated.discard(leaf.payload.leaf_id)

    for current in iter_post_order(node):
        _aggregate_node(current)
    for ancestor in lineage:
        _aggregate_node(ancestor)

    changed = {
        current.full_path
        for current in touched
        if before[current.full_path] != (current.selected, current.partial)
    }
    return SelectToggleResult(selected_ids=updated, node=node, changed_paths=changed)


def resolve_selected(tree: PathTree, selected_ids: Iterable[int]) -> tuple[list[Node], list[int]]:
    """Return selected leaves in path order plus persisted ids missing from ``tree``."""
    wanted = set(selected_ids)
    leaves = [leaf for leaf in tree.iter_leaves() if leaf.payload.leaf_id in wanted]
    present = {leaf.payload.leaf_id for leaf in leaves}
    return leaves, sorted(wanted - present)
