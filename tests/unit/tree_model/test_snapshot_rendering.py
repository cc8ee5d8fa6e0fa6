"""Snapshot emission, outline rows, and markdown export tests."""

from __future__ import annotations

import unittest
from datetime import datetime

from statustree.tree_model import (
    FlatRecord,
    apply_expand_state,
    apply_selection,
    build_path_tree,
    build_snapshot,
    format_snapshot,
    tree_to_markdown,
)


def _fresh_tree():
    records = [
        FlatRecord(full_path="teamA/svc1", leaf_id=1, display_name="svc1", url="https://x/teamA/svc1"),
        FlatRecord(full_path="teamA/svc2", leaf_id=2, display_name="Service 2", url="https://x/teamA/svc2"),
        FlatRecord(full_path="teamB/core/svc3", leaf_id=3, display_name="svc3", url="https://x/teamB/core/svc3"),
        FlatRecord(full_path="root-item", leaf_id=4, display_name="root-item", url="https://x/root-item"),
    ]
    return build_path_tree(records).tree


class SnapshotTests(unittest.TestCase):
    def test_collapsed_groups_omit_children_but_report_has_children(self) -> None:
        tree = _fresh_tree()
        apply_expand_state(tree, {})
        apply_selection(tree, set())
        snapshot = build_snapshot(tree)

        self.assertEqual(snapshot.depth, 0)
        self.assertEqual([child.name for child in snapshot.children], ["root-item", "teamA", "teamB"])
        team_b = snapshot.children[2]
        self.assertTrue(team_b.expanded)
        core = team_b.children[0]
        self.assertFalse(core.expanded)
        self.assertTrue(core.has_children)
        self.assertEqual(core.children, ())

    def test_subtree_snapshot_and_unknown_root(self) -> None:
        tree = _fresh_tree()
        apply_expand_state(tree, {})
        apply_selection(tree, {1})
        subtree = build_snapshot(tree, root_path="teamA")
        self.assertEqual(subtree.full_path, "teamA")
        self.assertTrue(subtree.partial)
        self.assertEqual([child.selected for child in subtree.children], [True, False])
        self.assertIsNone(build_snapshot(tree, root_path="nope"))

    def test_to_dict_carries_leaf_payload(self) -> None:
        tree = _fresh_tree()
        apply_expand_state(tree, {})
        data = build_snapshot(tree, root_path="teamA/svc2").to_dict()
        self.assertEqual(data["leaf"], {"leaf_id": 2, "display_name": "Service 2", "url": "https://x/teamA/svc2"})
        self.assertEqual(data["children"], [])


class OutlineRenderingTests(unittest.TestCase):
    def test_format_snapshot_rows(self) -> None:
        tree = _fresh_tree()
        apply_expand_state(tree, {})
        apply_selection(tree, {1, 3})
        rows = format_snapshot(build_snapshot(tree))
        self.assertEqual(
            rows,
            [
                "  [ ] root-item",
                "▾ [-] teamA/",
                "    [x] svc1",
                "    [ ] Service 2 (svc2)",
                "▾ [x] teamB/",
                "  ▸ [x] core/",
            ],
        )


class MarkdownExportTests(unittest.TestCase):
    def test_tree_to_markdown_structure(self) -> None:
        text = tree_to_markdown(_fresh_tree(), title="Structure", generated_at=datetime(2024, 5, 1, 8, 30))
        self.assertEqual(
            text,
            "\n".join(
                [
                    "# Structure",
                    "",
                    "Generated on: 2024-05-01 08:30:00",
                    "",
                    "- [root-item](https://x/root-item): `root-item`",
                    "",
                    "## teamA",
                    "",
                    "- **Full Path:** `teamA`",
                    "",
                    "**Items:**",
                    "",
                    "- [svc1](https://x/teamA/svc1): `teamA/svc1`",
                    "- [Service 2](https://x/teamA/svc2): `teamA/svc2`",
                    "",
                    "## teamB",
                    "",
                    "- **Full Path:** `teamB`",
                    "",
                    "### core",
                    "",
                    "- **Full Path:** `teamB/core`",
                    "",
                    "**Items:**",
                    "",
                    "- [svc3](https://x/teamB/core/svc3): `teamB/core/svc3`",
                ]
            )
            + "\n",
        )


if __name__ == "__main__":
    unittest.main()
