"""Plain-text outline rows for tree snapshots."""

from __future__ import annotations

from .snapshot import iter_snapshot
from .types import NodeSnapshot


def selection_box(snapshot: NodeSnapshot) -> str:
    if snapshot.selected:
        return "[x]"
    if snapshot.partial:
        return "[-]"
    return "[ ]"


def format_snapshot_row(snapshot: NodeSnapshot, base_depth: int = 1) -> str:
    """Render one snapshot node as an indented outline row."""
    indent = "  " * max(0, snapshot.depth - base_depth)
    box = selection_box(snapshot)
    if snapshot.is_leaf:
        label = snapshot.payload.display_name if snapshot.payload is not None else snapshot.name
        suffix = f" ({snapshot.name})" if label != snapshot.name else ""
        return f"{indent}  {box} {label}{suffix}"
    if snapshot.has_children:
        marker = "▾ " if snapshot.expanded else "▸ "
    else:
        marker = "  "
    return f"{indent}{marker}{box} {snapshot.name}/"


def format_snapshot(snapshot: NodeSnapshot) -> list[str]:
    """Render every emitted row of ``snapshot``, skipping the synthetic root."""
    rows: list[str] = []
    base_depth = max(1, snapshot.depth)
    for node in iter_snapshot(snapshot):
        if node.depth == 0:
            continue
        rows.append(format_snapshot_row(node, base_depth))
    return rows
