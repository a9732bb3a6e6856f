"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into key tokens. SGR mouse
reports become ``MOUSE_<KIND>:<col>:<row>`` tokens with 1-based cells.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CSI_FINAL_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def decode_sgr_mouse(payload: str, final: str) -> str:
    """Decode an SGR mouse report body (``btn;col;row``) and final ``M``/``m``."""
    try:
        btn_s, col_s, row_s = payload.split(";")
        btn = int(btn_s)
        col = int(col_s)
        row = int(row_s)
    except ValueError:
        return "ESC"
    button = btn & 0b11
    if btn & 0b0100_0000:
        wheel = {0: "UP", 1: "DOWN", 2: "LEFT", 3: "RIGHT"}[button]
        return f"MOUSE_WHEEL_{wheel}:{col}:{row}"
    if btn & 0b0010_0000:
        return f"MOUSE_MOVE:{col}:{row}"
    if button == 0:
        suffix = "DOWN" if final == "M" else "UP"
        return f"MOUSE_LEFT_{suffix}:{col}:{row}"
    return "MOUSE"


def parse_mouse_col_row(mouse_key: str) -> tuple[int | None, int | None]:
    parts = mouse_key.split(":")
    if len(parts) < 3:
        return None, None
    try:
        return int(parts[1]), int(parts[2])
    except ValueError:
        return None, None


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token; ``""`` when nothing arrived within ``timeout_ms``."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""
        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch == b"\t":
        return "TAB"
    if ch in {b"\r", b"\n"}:
        return "ENTER"
    if ch == b"\x03":
        return "CTRL_C"
    if ch != b"\x1b":
        return ch.decode("utf-8", errors="replace")

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq != b"[":
        _PENDING_BYTES.append(seq)
        return "ESC"
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq in _CSI_FINAL_KEYS:
        return _CSI_FINAL_KEYS[seq]
    if seq in {b"5", b"6"}:
        tail = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if tail == b"~":
            return "PAGE_UP" if seq == b"5" else "PAGE_DOWN"
        return "ESC"
    if seq == b"<":
        payload: list[bytes] = []
        while True:
            part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
            if part is None:
                return "ESC"
            if part in {b"M", b"m"}:
                break
            payload.append(part)
            if len(payload) > 64:
                return "ESC"
        return decode_sgr_mouse(b"".join(payload).decode("ascii", errors="replace"), part.decode("ascii"))
    return "ESC"
