"""Per-request composition of build, expand, mutate, filter, and select.

Each ``handle`` call rebuilds the tree from flat records, applies the user's
persisted state, performs at most one action, and writes changed state back
only after the snapshot has been produced.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .records import coerce_leaf_id
from .state.stores import ExpandStateStore, SelectionStore
from .tree_model.build import build_path_tree
from .tree_model.expansion import apply_expand_state, toggle_expand
from .tree_model.filtering import SearchResult, apply_search_filter
from .tree_model.navigation import ancestor_paths
from .tree_model.selection import apply_selection, resolve_selected, toggle_select
from .tree_model.snapshot import build_snapshot
from .tree_model.types import PATH_SEPARATOR, FlatRecord, LeafPayload, NodeSnapshot, PathTree, TreeWarning

logger = logging.getLogger(__name__)

ACTION_NONE = "none"
ACTION_EXPAND = "expand"
ACTION_COLLAPSE = "collapse"
ACTION_SELECT = "select"


@dataclass(frozen=True)
class TreeAction:
    """The single mutating action carried by one request."""

    kind: str = ACTION_NONE
    path: str = ""
    selected: bool = True

    @classmethod
    def none(cls) -> TreeAction:
        return cls()

    @classmethod
    def expand(cls, path: str) -> TreeAction:
        return cls(kind=ACTION_EXPAND, path=path)

    @classmethod
    def collapse(cls, path: str) -> TreeAction:
        return cls(kind=ACTION_COLLAPSE, path=path)

    @classmethod
    def select(cls, path: str, selected: bool = True) -> TreeAction:
        return cls(kind=ACTION_SELECT, path=path, selected=selected)


@dataclass(frozen=True)
class TreeRequest:
    user_key: str
    records: list[FlatRecord]
    action: TreeAction = field(default_factory=TreeAction)
    search_term: str = ""
    partial: bool = False


@dataclass(frozen=True)
class TreeResponse:
    """Snapshot plus the state written back and all non-fatal warnings.

    ``root_path`` is ``""`` for a full snapshot, otherwise the path of the
    subtree the caller should re-render.
    """

    snapshot: NodeSnapshot
    root_path: str
    expand_state: dict[str, bool]
    selected_ids: frozenset[int]
    search: SearchResult
    warnings: list[TreeWarning] = field(default_factory=list)
    expand_state_changed: bool = False
    selection_changed: bool = False

    @property
    def partial(self) -> bool:
        return bool(self.root_path)


def common_ancestor_path(paths: Iterable[str]) -> str:
    """Return the longest shared segment prefix of ``paths`` (``""`` for none)."""
    common: list[str] | None = None
    for path in paths:
        segments = path.split(PATH_SEPARATOR) if path else []
        if common is None:
            common = segments
            continue
        size = 0
        for left, right in zip(common, segments):
            if left != right:
                break
            size += 1
        common = common[:size]
    return PATH_SEPARATOR.join(common or [])


def is_emitted(tree: PathTree, full_path: str, search: SearchResult) -> bool:
    """Return whether ``full_path`` appears in the full snapshot for ``search``."""
    node = tree.nodes.get(full_path)
    if node is None or not search.is_shown(node):
        return False
    for path in ancestor_paths(full_path):
        ancestor = tree.nodes[path]
        if not ancestor.expanded or not search.is_shown(ancestor):
            return False
        if search.active and path not in search.retained:
            return False
    return True


def visible_refresh_root(tree: PathTree, changed_paths: Iterable[str], search: SearchResult) -> str:
    """Lowest common ancestor of ``changed_paths`` that is actually rendered."""
    candidate = common_ancestor_path(changed_paths)
    while candidate and not is_emitted(tree, candidate, search):
        candidate = candidate.rpartition(PATH_SEPARATOR)[0]
    return candidate


class TreeOrchestrator:
    """Runs one stateless request against injected per-user stores."""

    def __init__(self, expand_store: ExpandStateStore, selection_store: SelectionStore) -> None:
        self.expand_store = expand_store
        self.selection_store = selection_store

    def handle(self, request: TreeRequest) -> TreeResponse:
        build_result = build_path_tree(request.records)
        tree = build_result.tree
        warnings = list(build_result.warnings)

        stored_mapping = self.expand_store.get(request.user_key)
        stored_selected = self.selection_store.get(request.user_key)
        mapping = dict(stored_mapping)
        selected_ids = set(stored_selected)

        apply_expand_state(tree, mapping)
        apply_selection(tree, selected_ids)

        action = request.action
        changed_paths: set[str] = set()
        if action.kind in (ACTION_EXPAND, ACTION_COLLAPSE):
            expand_result = toggle_expand(tree, mapping, action.path, action.kind == ACTION_EXPAND)
            mapping = expand_result.mapping
            warnings.extend(expand_result.warnings)
            if expand_result.node is not None:
                changed_paths.add(action.path)
        elif action.kind == ACTION_SELECT:
            select_result = toggle_select(tree, selected_ids, action.path, action.selected)
            selected_ids = select_result.selected_ids
            warnings.extend(select_result.warnings)
            if select_result.node is not None:
                changed_paths.add(action.path)
                changed_paths.update(select_result.changed_paths)
        elif action.kind != ACTION_NONE:
            logger.warning("ignoring unknown action kind %r", action.kind)

        search = apply_search_filter(tree, request.search_term)
        apply_selection(tree, selected_ids)

        root_path = ""
        if request.partial and changed_paths:
            root_path = visible_refresh_root(tree, changed_paths, search)
        snapshot = build_snapshot(tree, search, root_path)

        expand_changed = mapping != stored_mapping
        selection_changed = selected_ids != stored_selected
        if expand_changed:
            self.expand_store.put(request.user_key, mapping)
        if selection_changed:
            self.selection_store.put(request.user_key, selected_ids)

        logger.debug(
            "request user=%s action=%s path=%r search=%r nodes=%d warnings=%d refresh_root=%r",
            request.user_key,
            action.kind,
            action.path,
            search.query,
            len(tree),
            len(warnings),
            root_path,
        )
        return TreeResponse(
            snapshot=snapshot,
            root_path=root_path,
            expand_state=mapping,
            selected_ids=frozenset(selected_ids),
            search=search,
            warnings=warnings,
            expand_state_changed=expand_changed,
            selection_changed=selection_changed,
        )

    def save_selection(self, user_key: str, raw_ids: Iterable[object], records: Iterable[FlatRecord]) -> set[int]:
        """Replace ``user_key``'s selection with known ids from ``raw_ids``.

        Non-integer values and ids absent from ``records`` are dropped.
        """
        known = {record.leaf_id for record in records}
        saved: set[int] = set()
        for raw in raw_ids:
            leaf_id = coerce_leaf_id(raw)
            if leaf_id is None or leaf_id not in known:
                logger.debug("dropping unknown selection id %r for user %s", raw, user_key)
                continue
            saved.add(leaf_id)
        self.selection_store.put(user_key, saved)
        return saved

    def list_selected(self, user_key: str, records: Iterable[FlatRecord]) -> tuple[list[tuple[str, LeafPayload]], list[int]]:
        """Return ``(full_path, payload)`` for selected leaves plus stale ids."""
        tree = build_path_tree(records).tree
        leaves, missing = resolve_selected(tree, self.selection_store.get(user_key))
        return [(leaf.full_path, leaf.payload) for leaf in leaves], missing
