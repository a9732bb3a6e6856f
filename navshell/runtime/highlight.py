"""Content loading and Pygments highlighting for the terminal host."""

from __future__ import annotations

from pathlib import Path

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import JsonLexer, TextLexer, get_lexer_for_filename
from pygments.util import ClassNotFound

from .ansi import sanitize_terminal_text

DEFAULT_STYLE = "monokai"


def read_text(path: Path) -> str:
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def _formatter(style: str) -> Terminal256Formatter:
    try:
        return Terminal256Formatter(style=style)
    except ClassNotFound:
        return Terminal256Formatter(style=DEFAULT_STYLE)


def colorize_source(source: str, path: Path | None, style: str = DEFAULT_STYLE, no_color: bool = False) -> str:
    """Return ``source`` with control bytes escaped and, unless disabled, highlighted."""
    safe = sanitize_terminal_text(source)
    if no_color:
        return safe
    lexer = TextLexer()
    if path is not None:
        try:
            lexer = get_lexer_for_filename(path.name, safe)
        except ClassNotFound:
            pass
    return highlight(safe, lexer, _formatter(style)).rstrip("\n")


def colorize_json(text: str, style: str = DEFAULT_STYLE, no_color: bool = False) -> str:
    if no_color:
        return text
    return highlight(text, JsonLexer(), _formatter(style))
