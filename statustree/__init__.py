"""Public package surface for statustree.

Exports ``main`` for programmatic CLI invocation.
The tree engine lives in ``statustree.tree_model`` and ``statustree.orchestrator``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
