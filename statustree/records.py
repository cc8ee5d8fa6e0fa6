"""Flat record decoding from cached-project JSON exports."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from pathlib import Path

from .tree_model.types import MALFORMED_PATH, PATH_SEPARATOR, FlatRecord, TreeWarning

PATH_KEYS = ("full_path", "path_with_namespace")
ID_KEYS = ("leaf_id", "id")
NAME_KEYS = ("display_name", "name")
URL_KEYS = ("url", "web_url")
LEAF_ID_PATTERN = re.compile(r"-?[0-9]+")


def _first(raw: Mapping[str, object], keys: tuple[str, ...]) -> object | None:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def coerce_leaf_id(value: object) -> int | None:
    """Accept ints and ASCII decimal strings with an optional single minus.

    Booleans, other types, and any other string shape yield ``None``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if LEAF_ID_PATTERN.fullmatch(stripped):
            return int(stripped)
    return None


def record_from_mapping(raw: object) -> FlatRecord | None:
    """Decode one record, or ``None`` when path or id is unusable.

    Engine keys (``full_path``/``leaf_id``/``display_name``/``url``) take
    precedence over cached-project keys (``path_with_namespace``/``id``/
    ``name``/``web_url``). The display name defaults to the last path segment.
    """
    if not isinstance(raw, Mapping):
        return None
    full_path = _first(raw, PATH_KEYS)
    leaf_id = coerce_leaf_id(_first(raw, ID_KEYS))
    if not isinstance(full_path, str) or leaf_id is None:
        return None
    display_name = _first(raw, NAME_KEYS)
    if not isinstance(display_name, str) or not display_name:
        display_name = full_path.rsplit(PATH_SEPARATOR, 1)[-1]
    url = _first(raw, URL_KEYS)
    return FlatRecord(
        full_path=full_path,
        leaf_id=leaf_id,
        display_name=display_name,
        url=url if isinstance(url, str) else "",
    )


def records_from_json(data: object) -> tuple[list[FlatRecord], list[TreeWarning]]:
    """Decode a JSON array of record objects, skipping undecodable entries."""
    if not isinstance(data, list):
        return [], [TreeWarning(MALFORMED_PATH, "", "record set is not a JSON array")]
    records: list[FlatRecord] = []
    warnings: list[TreeWarning] = []
    for index, raw in enumerate(data):
        record = record_from_mapping(raw)
        if record is None:
            warnings.append(
                TreeWarning(MALFORMED_PATH, f"#{index}", "record lacks a usable path or id; skipped")
            )
            continue
        records.append(record)
    return records, warnings


def load_records(path: Path) -> tuple[list[FlatRecord], list[TreeWarning]]:
    """Read and decode a records file; I/O and JSON errors propagate."""
    data = json.loads(path.read_text(encoding="utf-8"))
    return records_from_json(data)

