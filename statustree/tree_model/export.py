"""Markdown structure export of the whole path tree."""

from __future__ import annotations

from datetime import datetime

from .types import Node, PathTree

DEFAULT_EXPORT_TITLE = "Projects Structure"


def _write_node(lines: list[str], node: Node, level: int) -> None:
    if level > 0:
        lines.append(f"{'#' * (level + 1)} {node.name}")
        lines.append("")
        lines.append(f"- **Full Path:** `{node.full_path}`")
        lines.append("")

    children = node.sorted_children()
    leaves = [child for child in children if child.is_leaf]
    groups = [child for child in children if not child.is_leaf]
    if leaves:
        if level > 0:
            lines.append("**Items:**")
            lines.append("")
        for leaf in leaves:
            payload = leaf.payload
            lines.append(f"- [{payload.display_name}]({payload.url}): `{leaf.full_path}`")
        lines.append("")

    for group in groups:
        _write_node(lines, group, level + 1)


def tree_to_markdown(
    tree: PathTree,
    title: str = DEFAULT_EXPORT_TITLE,
    generated_at: datetime | None = None,
) -> str:
    """Render every group as a heading and every leaf as a linked list item.

    Heading depth follows tree depth (``##`` for top-level groups). Leaves of a
    group are listed before its subgroups.
    """
    lines = [f"# {title}", ""]
    if generated_at is not None:
        lines.append(f"Generated on: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}")
        lines.append("")
    _write_node(lines, tree.root, 0)
    return "\n".join(lines).rstrip("\n") + "\n"
