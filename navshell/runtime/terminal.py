"""Terminal control for the interactive shell.

Owns the raw-mode lifecycle, alternate-screen switching and mouse reporting.
Any-motion tracking (1003) is enabled on top of button tracking so pointer
hover reaches the proximity detector.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

_MOUSE_ON = b"\x1b[?1000h\x1b[?1003h\x1b[?1006h"
_MOUSE_OFF = b"\x1b[?1000l\x1b[?1003l\x1b[?1006l"


class TerminalController:
    """Manage terminal mode transitions for one TUI session."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with mouse reporting enabled."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Alternate screen, hidden cursor.
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l" + _MOUSE_ON)

    def disable_tui_mode(self) -> None:
        """Restore the main screen, cursor and cooked tty state."""
        os.write(self.stdout_fd, _MOUSE_OFF + b"\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def write_frame(self, frame: str) -> None:
        """Home the cursor and draw ``frame`` over the previous one."""
        os.write(self.stdout_fd, ("\x1b[H" + frame).encode("utf-8", errors="replace"))

    @contextlib.contextmanager
    def raw_mode(self):
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
