"""Command-line front door for statustree.

Loads flat records, applies one action for a user, and prints the snapshot.
State persists between invocations in the JSON state file.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from . import config
from .orchestrator import TreeAction, TreeOrchestrator, TreeRequest, TreeResponse
from .records import load_records
from .state.stores import JsonExpandStateStore, JsonSelectionStore, JsonStateFile
from .tree_model.build import build_path_tree
from .tree_model.export import tree_to_markdown
from .tree_model.rendering import format_snapshot

OUTPUT_FORMATS = ("text", "json", "markdown")


def _action_from_args(args: argparse.Namespace) -> TreeAction:
    if args.expand is not None:
        return TreeAction.expand(args.expand)
    if args.collapse is not None:
        return TreeAction.collapse(args.collapse)
    if args.select is not None:
        return TreeAction.select(args.select, True)
    if args.deselect is not None:
        return TreeAction.select(args.deselect, False)
    return TreeAction.none()


def render_response(response: TreeResponse, output_format: str) -> str:
    """Render a response as outline text or JSON."""
    if output_format == "json":
        payload = {
            "root_path": response.root_path,
            "snapshot": response.snapshot.to_dict(),
            "selected_ids": sorted(response.selected_ids),
            "warnings": [
                {"kind": warning.kind, "path": warning.path, "message": warning.message}
                for warning in response.warnings
            ],
        }
        return json.dumps(payload, indent=2) + "\n"
    rows = format_snapshot(response.snapshot)
    return "".join(f"{row}\n" for row in rows)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Browse and select path-named items as an expandable tree."
    )
    parser.add_argument("records", help="JSON file with an array of flat records.")
    parser.add_argument("--user", default=None, help="User key for persisted state (default from config).")
    parser.add_argument("--state", default=None, help="Path of the JSON state file (default from config).")
    parser.add_argument("--search", default="", help="Case-insensitive substring filter.")
    actions = parser.add_mutually_exclusive_group()
    actions.add_argument("--expand", metavar="PATH", help="Expand the group at PATH.")
    actions.add_argument("--collapse", metavar="PATH", help="Collapse the group at PATH.")
    actions.add_argument("--select", metavar="PATH", help="Select PATH and everything under it.")
    actions.add_argument("--deselect", metavar="PATH", help="Clear PATH and everything under it.")
    parser.add_argument("--partial", action="store_true", help="Print only the subtree touched by the action.")
    parser.add_argument("--format", choices=OUTPUT_FORMATS, default="text", help="Output format.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging on stderr.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments, run one request, and write the result to stdout.

    Non-fatal warnings go to stderr one per line.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    records_path = Path(args.records)
    if not records_path.exists():
        raise SystemExit(f"Path not found: {records_path}")
    try:
        records, load_warnings = load_records(records_path)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Cannot read records from {records_path}: {exc}") from exc

    if args.format == "markdown":
        build_result = build_path_tree(records)
        sys.stdout.write(tree_to_markdown(build_result.tree))
        for warning in load_warnings + build_result.warnings:
            sys.stderr.write(f"warning: {warning}\n")
        return

    state_path = Path(args.state) if args.state else config.load_state_path()
    state_file = JsonStateFile(state_path)
    orchestrator = TreeOrchestrator(JsonExpandStateStore(state_file), JsonSelectionStore(state_file))
    response = orchestrator.handle(
        TreeRequest(
            user_key=args.user or config.load_default_user(),
            records=records,
            action=_action_from_args(args),
            search_term=args.search,
            partial=args.partial,
        )
    )
    sys.stdout.write(render_response(response, args.format))
    for warning in load_warnings + response.warnings:
        sys.stderr.write(f"warning: {warning}\n")


if __name__ == "__main__":
    main()
