"""Contextual one-line key help for each mode."""

from __future__ import annotations

from ..modes import Mode
from ..ui_theme import UITheme

HELP_ITEMS: dict[Mode, tuple[tuple[str, str], ...]] = {
    Mode.BROWSING: (
        ("EXIT", "q"),
        ("FILTER", "f"),
        ("RUN TEST", "Enter"),
        ("RUN TEST IN SHELL", "r"),
        ("NAVIGATE", "jk/arrows PgUp/PgDown/Home/End"),
        ("ACTIVATE OUTPUT", "2"),
        ("OPEN FILE", "o"),
    ),
    Mode.OUTPUT_SCROLLING: (
        ("SCROLL", "jk/arrows PgUp/PgDown/Home/End"),
        ("ACTIVATE TESTS LIST", "1"),
    ),
    Mode.FILTER_EDITING: (
        ("STOP EDITING", "Esc/Enter"),
        ("CLEAR", "Ctrl+U"),
    ),
    Mode.ERROR_DISPLAY: (("CLOSE ERROR MESSAGE", "Esc/Enter/q"),),
}


def help_line(mode: Mode, theme: UITheme) -> str:
    parts = [
        f"{theme.help_text}{label} {theme.reset}{theme.help_key}{key}{theme.reset}"
        for label, key in HELP_ITEMS[mode]
    ]
    return f"{theme.help_text} | {theme.reset}".join(parts)
