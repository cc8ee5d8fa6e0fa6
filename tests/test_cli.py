"""CLI argument handling and output format tests."""

from __future__ import annotations

import io
import json
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from statustree import cli

RECORDS = [
    {"id": 1, "name": "svc1", "path_with_namespace": "teamA/svc1", "web_url": "https://x/teamA/svc1"},
    {"id": 2, "name": "svc2", "path_with_namespace": "teamA/svc2", "web_url": "https://x/teamA/svc2"},
    {"id": 3, "name": "svc3", "path_with_namespace": "teamB/svc3", "web_url": "https://x/teamB/svc3"},
    {"id": 4, "name": "broken", "path_with_namespace": "teamB//broken", "web_url": ""},
]


class CliTests(unittest.TestCase):
    def run_cli(self, tmp: Path, *args: str) -> tuple[str, str]:
        records_path = tmp / "records.json"
        records_path.write_text(json.dumps(RECORDS), encoding="utf-8")
        stdout = io.StringIO()
        stderr = io.StringIO()
        argv = [str(records_path), "--state", str(tmp / "state.json"), "--user", "alice", *args]
        with mock.patch("statustree.config.CONFIG_PATH", tmp / "config.json"), mock.patch.object(
            sys, "stdout", stdout
        ), mock.patch.object(sys, "stderr", stderr):
            cli.main(argv)
        return stdout.getvalue(), stderr.getvalue()

    def test_text_output_and_malformed_warning(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out, err = self.run_cli(Path(tmp))
        self.assertEqual(
            out.splitlines(),
            [
                "▾ [ ] teamA/",
                "    [ ] svc1",
                "    [ ] svc2",
                "▾ [ ] teamB/",
                "    [ ] svc3",
            ],
        )
        self.assertIn("malformed_path", err)
        self.assertIn("teamB//broken", err)

    def test_actions_persist_between_invocations(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self.run_cli(root, "--select", "teamA")
            self.run_cli(root, "--collapse", "teamB")
            out, _err = self.run_cli(root)

            state = json.loads((root / "state.json").read_text(encoding="utf-8"))
        self.assertEqual(state["users"]["alice"]["selected"], [1, 2])
        self.assertEqual(state["users"]["alice"]["expanded"], {"teamB": False})
        self.assertEqual(out.splitlines()[0], "▾ [x] teamA/")
        self.assertEqual(out.splitlines()[-1], "▸ [ ] teamB/")

    def test_json_output_with_partial_refresh(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out, _err = self.run_cli(Path(tmp), "--select", "teamA/svc1", "--partial", "--format", "json")
        payload = json.loads(out)
        self.assertEqual(payload["root_path"], "teamA")
        self.assertEqual(payload["snapshot"]["full_path"], "teamA")
        self.assertTrue(payload["snapshot"]["partial"])
        self.assertEqual(payload["selected_ids"], [1])

    def test_markdown_export(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out, _err = self.run_cli(Path(tmp), "--format", "markdown")
        self.assertTrue(out.startswith("# Projects Structure\n"))
        self.assertIn("## teamA", out)
        self.assertIn("- [svc3](https://x/teamB/svc3): `teamB/svc3`", out)

    def test_missing_records_file_exits(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(SystemExit) as ctx:
                cli.main([str(Path(tmp) / "missing.json")])
        self.assertIn("Path not found", str(ctx.exception))

    def test_action_flags_are_mutually_exclusive(self) -> None:
        with mock.patch.object(sys, "stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.build_parser().parse_args(["r.json", "--expand", "a", "--collapse", "b"])


if __name__ == "__main__":
    unittest.main()
