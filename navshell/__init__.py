"""Public package surface for navshell.

Exports ``main`` for programmatic CLI invocation. The navigation core lives
in ``navshell.navigation`` and ``navshell.scroll``; the terminal host lives
in ``navshell.runtime``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["main"]
