"""ANSI-aware text measurement and clipping.

Runner output arrives colored; these helpers keep pane borders aligned when
escape sequences and wide characters are present.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``."""
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences are kept verbatim and do not count toward width; tabs are
    expanded into spaces. Other control characters are dropped.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        if ch != "\t" and not ch.isprintable():
            i += 1
            continue
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    return "".join(out)


def pad_ansi_line(text: str, width: int) -> str:
    """Clip to ``width`` then right-pad with spaces to exactly ``width`` columns."""
    clipped = clip_ansi_line(text, width)
    gap = width - display_width(clipped)
    if "\x1b" in clipped:
        clipped += "\033[0m"
    return clipped + " " * max(0, gap)


def chunk_plain_text(text: str, width: int) -> list[str]:
    """Hard-wrap unstyled text into ``width``-column chunks, line by line."""
    if width <= 0:
        return []
    chunks: list[str] = []
    for line in text.splitlines() or [""]:
        current: list[str] = []
        col = 0
        for ch in line:
            w = char_display_width(ch, col)
            if col + w > width and current:
                chunks.append("".join(current))
                current = []
                col = 0
            current.append(" " * w if ch == "\t" else ch)
            col += w
        chunks.append("".join(current))
    return chunks
