"""Terminal host for the navigation shell.

``run_shell`` drives the navigation core from a real TTY; ``ShellSession``
holds the same wiring without touching the terminal and is what tests use.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .session import SessionOptions, ShellSession


def run_shell(*args, **kwargs):
    """Lazily import the runtime entrypoint so ``--classify`` stays light."""
    from .app import run_shell as _run_shell

    return _run_shell(*args, **kwargs)


def __getattr__(name: str):
    if name in {"SessionOptions", "ShellSession"}:
        from . import session as _session

        return getattr(_session, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "SessionOptions",
    "ShellSession",
    "run_shell",
]
