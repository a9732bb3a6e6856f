"""Main interactive event loop for the terminal shell.

Each iteration picks up terminal resizes, runs due timers and the pending
animation frame, redraws when the frame changed, and waits for input no
longer than the next timer deadline or one frame, whichever comes first.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass

from ..scheduler import FRAME_MS
from .input import read_key
from .session import ShellSession
from .terminal import TerminalController


@dataclass(frozen=True)
class RuntimeLoopTiming:
    frame_ms: float = FRAME_MS
    idle_timeout_ms: float = 250.0


def input_timeout_ms(session: ShellSession, timing: RuntimeLoopTiming) -> int:
    """How long the next read may block without starving timers or frames."""
    timeout = timing.idle_timeout_ms
    if session.scheduler.has_pending_frames():
        timeout = min(timeout, timing.frame_ms)
    deadline = session.scheduler.next_deadline()
    if deadline is not None:
        timeout = min(timeout, max(0.0, deadline - session.scheduler.now()))
    return int(timeout)


def run_main_loop(
    session: ShellSession,
    terminal: TerminalController,
    stdin_fd: int,
    timing: RuntimeLoopTiming | None = None,
    get_terminal_size: Callable[..., object] = shutil.get_terminal_size,
) -> None:
    """Run the interactive loop until the session asks to quit."""
    timing = timing if timing is not None else RuntimeLoopTiming()
    last_frame = ""
    with terminal.raw_mode():
        term = get_terminal_size((80, 24))
        session.mount(term.columns, term.lines)
        try:
            while not session.quit_requested:
                term = get_terminal_size((80, 24))
                session.resize(term.columns, term.lines)
                session.tick()

                frame = session.render()
                if frame != last_frame:
                    terminal.write_frame(frame)
                    last_frame = frame

                try:
                    key = read_key(stdin_fd, timeout_ms=input_timeout_ms(session, timing))
                except KeyboardInterrupt:
                    continue
                if key == "":
                    continue
                if session.handle_key(key):
                    break
        finally:
            session.unmount()
