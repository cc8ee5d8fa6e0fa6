"""Per-user persisted expand and selection state."""

from __future__ import annotations

from .stores import (
    ExpandStateStore,
    InMemoryExpandStateStore,
    InMemorySelectionStore,
    JsonExpandStateStore,
    JsonSelectionStore,
    JsonStateFile,
    SelectionStore,
)

__all__ = [
    "ExpandStateStore",
    "SelectionStore",
    "InMemoryExpandStateStore",
    "InMemorySelectionStore",
    "JsonStateFile",
    "JsonExpandStateStore",
    "JsonSelectionStore",
]
