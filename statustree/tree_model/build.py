"""Flat path records to in-memory ``PathTree`` construction."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .types import (
    MALFORMED_PATH,
    PATH_COLLISION,
    PATH_SEPARATOR,
    FlatRecord,
    LeafPayload,
    Node,
    PathTree,
    TreeWarning,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    """Built tree plus the non-fatal warnings accumulated per record."""

    tree: PathTree
    warnings: list[TreeWarning] = field(default_factory=list)


def split_path(full_path: str) -> list[str] | None:
    """Split ``full_path`` into segments, or ``None`` when any segment is empty."""
    if not full_path:
        return None
    segments = full_path.split(PATH_SEPARATOR)
    if any(not segment for segment in segments):
        return None
    return segments


def _discard_subtree(tree: PathTree, node: Node) -> int:
    """Drop every descendant of ``node`` from the path index."""
    removed = 0
    stack = list(node.children.values())
    while stack:
        child = stack.pop()
        tree.nodes.pop(child.full_path, None)
        removed += 1
        stack.extend(child.children.values())
    node.children.clear()
    return removed


def _insert_record(tree: PathTree, record: FlatRecord, warnings: list[TreeWarning]) -> None:
    segments = split_path(record.full_path)
    if segments is None:
        warnings.append(
            TreeWarning(MALFORMED_PATH, record.full_path, "path has an empty segment; record skipped")
        )
        return

    current = tree.root
    for depth, segment in enumerate(segments[:-1], start=1):
        child = current.children.get(segment)
        if child is None:
            child = Node(
                name=segment,
                full_path=PATH_SEPARATOR.join(segments[:depth]),
                depth=depth,
            )
            current.children[segment] = child
            tree.nodes[child.full_path] = child
        elif child.is_leaf:
            warnings.append(
                TreeWarning(
                    PATH_COLLISION,
                    record.full_path,
                    f"ancestor {child.full_path!r} is a leaf; record skipped",
                )
            )
            return
        current = child

    name = segments[-1]
    payload = LeafPayload(
        leaf_id=record.leaf_id,
        display_name=record.display_name,
        url=record.url,
    )
    existing = current.children.get(name)
    if existing is None:
        leaf = Node(name=name, full_path=record.full_path, depth=len(segments), payload=payload)
        current.children[name] = leaf
        tree.nodes[leaf.full_path] = leaf
        return

    if existing.is_leaf:
        warnings.append(
            TreeWarning(
                PATH_COLLISION,
                record.full_path,
                f"duplicate leaf path; id {existing.payload.leaf_id} replaced by {record.leaf_id}",
            )
        )
        existing.payload = payload
        return

    removed = _discard_subtree(tree, existing)
    existing.payload = payload
    warnings.append(
        TreeWarning(
            PATH_COLLISION,
            record.full_path,
            f"leaf replaces group; {removed} descendant node(s) discarded",
        )
    )


def build_path_tree(records: Iterable[FlatRecord]) -> BuildResult:
    """Build a rooted tree from flat path-qualified records.

    Intermediate segments become structural nodes, the final segment becomes
    a leaf. Where a leaf path and a group path coincide the leaf wins, so the
    resulting structure does not depend on record order. Malformed records
    are skipped and reported, never raised.
    """
    tree = PathTree()
    warnings: list[TreeWarning] = []
    count = 0
    for record in records:
        count += 1
        _insert_record(tree, record, warnings)

    for warning in warnings:
        logger.debug("build warning: %s", warning)
    logger.debug("built tree with %d node(s) from %d record(s)", len(tree), count)
    return BuildResult(tree=tree, warnings=warnings)
