"""Runtime composition: build a session around a TTY and start the loop."""

from __future__ import annotations

import sys
from pathlib import Path

from ..scheduler import Scheduler
from ..storage import KeyValueStore
from .highlight import DEFAULT_STYLE, colorize_source, read_text
from .loop import run_main_loop
from .session import SessionOptions, ShellSession
from .terminal import TerminalController

SAMPLE_CONTENT = """\
Recent activity

  Northwind Traders      visit logged        2 hours ago
  Contoso Ltd            call scheduled      yesterday
  Fabrikam Inc           new customer        3 days ago
  Tailspin Toys          visit logged        last week

Try it:
  - resize the terminal past 77 and 103 columns to change device mode
  - rest the pointer in the first two columns to peek the sidebar
  - scroll with the wheel; the header collapses and an expanded
    sidebar folds to icons after 300ms of stillness
  - press m for the drawer, s for the sidebar, esc to close/collapse
"""


def load_content_lines(path: Path | None, style: str = DEFAULT_STYLE, no_color: bool = False) -> list[str]:
    """Return the content pane rows for ``path`` (or the built-in sample)."""
    if path is None:
        source = SAMPLE_CONTENT
        source_path = None
    else:
        source = read_text(path)
        source_path = path
    rendered = colorize_source(source, source_path, style=style, no_color=no_color)
    filler = [""] * 40 if path is None else []
    return rendered.splitlines() + filler


def run_shell(
    storage: KeyValueStore,
    content_path: Path | None = None,
    options: SessionOptions | None = None,
    style: str = DEFAULT_STYLE,
) -> None:
    """Run the interactive shell on the controlling terminal."""
    options = options if options is not None else SessionOptions()
    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SystemExit("navshell needs an interactive terminal.")
    title = content_path.name if content_path is not None else options.title
    session = ShellSession(
        storage,
        Scheduler(),
        load_content_lines(content_path, style=style, no_color=options.no_color),
        options=SessionOptions(
            title=title,
            subtitle=options.subtitle or "navigation shell",
            no_color=options.no_color,
            geometry=options.geometry,
            timing=options.timing,
        ),
    )
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    run_main_loop(session, terminal, stdin_fd)
