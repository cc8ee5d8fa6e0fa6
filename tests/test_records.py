"""Flat-record decoding tests for engine and cached-project key layouts."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from statustree.records import coerce_leaf_id, load_records, record_from_mapping, records_from_json
from statustree.tree_model import MALFORMED_PATH, FlatRecord


class RecordDecodingTests(unittest.TestCase):
    def test_cached_project_keys_are_accepted(self) -> None:
        record = record_from_mapping(
            {
                "id": 12,
                "name": "Billing",
                "path_with_namespace": "finance/billing",
                "web_url": "https://git.example.com/finance/billing",
            }
        )
        self.assertEqual(
            record,
            FlatRecord(
                full_path="finance/billing",
                leaf_id=12,
                display_name="Billing",
                url="https://git.example.com/finance/billing",
            ),
        )

    def test_engine_keys_take_precedence_and_name_defaults_to_last_segment(self) -> None:
        record = record_from_mapping({"full_path": "a/b/c", "path_with_namespace": "x/y", "leaf_id": "7"})
        self.assertEqual(record, FlatRecord(full_path="a/b/c", leaf_id=7, display_name="c", url=""))

    def test_coerce_leaf_id(self) -> None:
        self.assertEqual(coerce_leaf_id(5), 5)
        self.assertEqual(coerce_leaf_id(" 42 "), 42)
        self.assertIsNone(coerce_leaf_id(True))
        self.assertIsNone(coerce_leaf_id("abc"))
        self.assertIsNone(coerce_leaf_id(3.0))
        self.assertEqual(coerce_leaf_id("-5"), -5)

    def test_coerce_leaf_id_rejects_non_ascii_and_malformed_strings(self) -> None:
        for raw in ("\u00b2", "\u0663", "--5", "-", "", "   ", "1 2", "+3", "0x10"):
            self.assertIsNone(coerce_leaf_id(raw), raw)

    def test_bad_string_id_skips_only_that_entry(self) -> None:
        records, warnings = records_from_json(
            [{"full_path": "a/b", "id": 1}, {"full_path": "a/c", "id": "--2"}, {"full_path": "a/d", "id": "\u00b2"}]
        )
        self.assertEqual([record.leaf_id for record in records], [1])
        self.assertEqual([warning.path for warning in warnings], ["#1", "#2"])

    def test_null_engine_key_falls_back_to_cached_project_key(self) -> None:
        record = record_from_mapping(
            {"full_path": None, "path_with_namespace": "a/b", "leaf_id": None, "id": 9, "display_name": None, "name": "B"}
        )
        self.assertEqual(record, FlatRecord(full_path="a/b", leaf_id=9, display_name="B", url=""))

    def test_undecodable_entries_become_warnings(self) -> None:
        records, warnings = records_from_json(
            [{"full_path": "a/b", "leaf_id": 1}, {"full_path": "a/c"}, "junk", {"leaf_id": 2}]
        )
        self.assertEqual([record.full_path for record in records], ["a/b"])
        self.assertEqual([warning.path for warning in warnings], ["#1", "#2", "#3"])
        self.assertTrue(all(warning.kind == MALFORMED_PATH for warning in warnings))

    def test_non_array_document_yields_single_warning(self) -> None:
        records, warnings = records_from_json({"full_path": "a"})
        self.assertEqual(records, [])
        self.assertEqual(len(warnings), 1)

    def test_load_records_reads_file_and_propagates_json_errors(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "records.json"
            path.write_text(json.dumps([{"full_path": "g/item", "leaf_id": 3}]), encoding="utf-8")
            records, warnings = load_records(path)
            self.assertEqual(len(records), 1)
            self.assertEqual(warnings, [])

            path.write_text("{broken", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_records(path)


if __name__ == "__main__":
    unittest.main()
