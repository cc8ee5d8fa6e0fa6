"""Key-value stores for per-user expand mappings and selected leaf ids.

Every ``get``/``put`` is treated as atomic and last-write-wins: concurrent
writers for the same user key overwrite each other without merging.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class ExpandStateStore(Protocol):
    def get(self, user_key: str) -> dict[str, bool]: ...

    def put(self, user_key: str, mapping: Mapping[str, bool]) -> None: ...


class SelectionStore(Protocol):
    def get(self, user_key: str) -> set[int]: ...

    def put(self, user_key: str, selected_ids: Iterable[int]) -> None: ...


def _clean_expand_mapping(raw: object) -> dict[str, bool]:
    """Keep only ``str -> bool`` entries."""
    if not isinstance(raw, Mapping):
        return {}
    return {key: value for key, value in raw.items() if isinstance(key, str) and key and isinstance(value, bool)}


def _clean_selected_ids(raw: object) -> set[int]:
    """Keep only integer ids; booleans are not ids."""
    if not isinstance(raw, (list, tuple, set, frozenset)):
        return set()
    return {value for value in raw if isinstance(value, int) and not isinstance(value, bool)}


class InMemoryExpandStateStore:
    """Process-local expand store, mainly for tests and single-shot runs."""

    def __init__(self, initial: Mapping[str, Mapping[str, bool]] | None = None) -> None:
        self._data: dict[str, dict[str, bool]] = {
            user_key: dict(mapping) for user_key, mapping in (initial or {}).items()
        }

    def get(self, user_key: str) -> dict[str, bool]:
        return dict(self._data.get(user_key, {}))

    def put(self, user_key: str, mapping: Mapping[str, bool]) -> None:
        self._data[user_key] = dict(mapping)


class InMemorySelectionStore:
    """Process-local selection store, mainly for tests and single-shot runs."""

    def __init__(self, initial: Mapping[str, Iterable[int]] | None = None) -> None:
        self._data: dict[str, set[int]] = {user_key: set(ids) for user_key, ids in (initial or {}).items()}

    def get(self, user_key: str) -> set[int]:
        return set(self._data.get(user_key, set()))

    def put(self, user_key: str, selected_ids: Iterable[int]) -> None:
        self._data[user_key] = set(selected_ids)


class JsonStateFile:
    """One JSON document holding every user's expand and selection state.

    Layout: ``{"users": {user_key: {"expanded": {...}, "selected": [...]}}}``.
    Missing or malformed documents read as empty state.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> dict[str, dict[str, object]]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("ignoring unreadable state file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        users = data.get("users")
        if not isinstance(users, dict):
            return {}
        return {key: value for key, value in users.items() if isinstance(key, str) and isinstance(value, dict)}

    def user_entry(self, user_key: str) -> dict[str, object]:
        return self.load().get(user_key, {})

    def update_user(self, user_key: str, key: str, value: object) -> None:
        """Replace one field of one user's entry and rewrite the document."""
        users = self.load()
        entry = dict(users.get(user_key, {}))
        entry[key] = value
        users[user_key] = entry
        text = json.dumps({"users": users}, indent=2, sort_keys=True) + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._replace_contents(text)
        except OSError as exc:
            logger.warning("could not write state file %s: %s", self.path, exc)

    def _replace_contents(self, text: str) -> None:
        """Write ``text`` to a sibling temp file, then swap it into place."""
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            tmp_path.replace(self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise


class JsonExpandStateStore:
    """``ExpandStateStore`` view over a ``JsonStateFile``."""

    def __init__(self, state_file: JsonStateFile) -> None:
        self.state_file = state_file

    def get(self, user_key: str) -> dict[str, bool]:
        return _clean_expand_mapping(self.state_file.user_entry(user_key).get("expanded"))

    def put(self, user_key: str, mapping: Mapping[str, bool]) -> None:
        self.state_file.update_user(user_key, "expanded", _clean_expand_mapping(mapping))


class JsonSelectionStore:
    """``SelectionStore`` view over a ``JsonStateFile``."""

    def __init__(self, state_file: JsonStateFile) -> None:
        self.state_file = state_file

    def get(self, user_key: str) -> set[int]:
        return _clean_selected_ids(self.state_file.user_entry(user_key).get("selected"))

    def put(self, user_key: str, selected_ids: Iterable[int]) -> None:
        self.state_file.update_user(user_key, "selected", sorted(_clean_selected_ids(list(selected_ids))))
