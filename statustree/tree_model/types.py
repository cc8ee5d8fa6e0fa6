"""Path-tree datatypes shared by builder, transforms, and snapshots."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

PATH_SEPARATOR = "/"

MALFORMED_PATH = "malformed_path"
PATH_COLLISION = "path_collision"
PATH_NOT_FOUND = "path_not_found"


@dataclass(frozen=True)
class FlatRecord:
    """One monitorable item as delivered by the record cache."""

    full_path: str
    leaf_id: int
    display_name: str
    url: str


@dataclass(frozen=True)
class LeafPayload:
    """External identity carried by leaf nodes only."""

    leaf_id: int
    display_name: str
    url: str


@dataclass(frozen=True)
class TreeWarning:
    """Non-fatal problem recorded while building or mutating a tree."""

    kind: str
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.kind}: {self.path!r}: {self.message}"


@dataclass(eq=False)
class Node:
    """Mutable per-request tree node keyed by ``full_path``.

    ``expanded``, ``selected`` and ``partial`` are transient and are
    recomputed on every request from persisted state.
    """

    name: str
    full_path: str
    depth: int
    payload: LeafPayload | None = None
    children: dict[str, Node] = field(default_factory=dict)
    expanded: bool = False
    selected: bool = False
    partial: bool = False

    @property
    def is_leaf(self) -> bool:
        return self.payload is not None

    def sorted_children(self) -> list[Node]:
        """Children in lexicographic segment order."""
        return [self.children[name] for name in sorted(self.children)]


class PathTree:
    """Rooted node tree plus a flat ``full_path -> Node`` index.

    Nodes hold no parent references; parents are found through the index by
    trimming the last path segment.
    """

    def __init__(self) -> None:
        self.root = Node(name="", full_path="", depth=0, expanded=True)
        self.nodes: dict[str, Node] = {}

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, full_path: object) -> bool:
        return full_path in self.nodes

    def get(self, full_path: str) -> Node | None:
        if not full_path:
            return self.root
        return self.nodes.get(full_path)

    def parent_of(self, node: Node) -> Node:
        parent_path, _sep, _name = node.full_path.rpartition(PATH_SEPARATOR)
        parent = self.get(parent_path)
        return parent if parent is not None else self.root

    def iter_nodes(self) -> Iterator[Node]:
        """Yield every non-root node in pre-order, children sorted."""
        stack = list(reversed(self.root.sorted_children()))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.sorted_children()))

    def iter_leaves(self) -> Iterator[Node]:
        for node in self.iter_nodes():
            if node.is_leaf:
                yield node


@dataclass(frozen=True)
class NodeSnapshot:
    """Immutable rendered view of one node handed to external renderers."""

    name: str
    full_path: str
    is_leaf: bool
    depth: int
    expanded: bool
    selected: bool
    partial: bool = False
    payload: LeafPayload | None = None
    children: tuple[NodeSnapshot, ...] = ()
    has_children: bool = False
    match: bool = False

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable mapping of this snapshot subtree."""
        data: dict[str, object] = {
            "name": self.name,
            "full_path": self.full_path,
            "is_leaf": self.is_leaf,
            "depth": self.depth,
            "expanded": self.expanded,
            "selected": self.selected,
            "partial": self.partial,
            "has_children": self.has_children,
            "match": self.match,
        }
        if self.payload is not None:
            data["leaf"] = {
                "leaf_id": self.payload.leaf_id,
                "display_name": self.payload.display_name,
                "url": self.payload.url,
            }
        data["children"] = [child.to_dict() for child in self.children]
        return data


__all__ = [
    "PATH_SEPARATOR",
    "MALFORMED_PATH",
    "PATH_COLLISION",
    "PATH_NOT_FOUND",
    "FlatRecord",
    "LeafPayload",
    "TreeWarning",
    "Node",
    "PathTree",
    "NodeSnapshot",
]
