"""Frame composition for the tests/output terminal view.

Builds complete ANSI frames from a ``RenderContext`` without touching runtime
state: a help line, the filter box, the tests and output panes, and the
loading and error overlays.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..ansi import chunk_plain_text, clip_ansi_line, display_width, pad_ansi_line
from ..modes import Mode
from ..ui_theme import DEFAULT_THEME, UITheme
from .help import help_line

FILTER_BOX_ROWS = 3
HELP_ROWS = 1
LOADING_TEXT = "Loading ..."
LOADING_BOX_WIDTH = 30
ERROR_BOX_WIDTH = 70
ELLIPSIS = "…"


@dataclass(frozen=True)
class ScreenLayout:
    width: int
    height: int
    left_width: int
    right_width: int
    pane_height: int

    @property
    def list_rows(self) -> int:
        return max(1, self.pane_height - 2)

    @property
    def output_rows(self) -> int:
        return max(1, self.pane_height - 2)


def compute_layout(columns: int, lines: int) -> ScreenLayout:
    width = max(4, columns)
    height = max(HELP_ROWS + FILTER_BOX_ROWS + 3, lines)
    left_width = max(2, width // 2)
    return ScreenLayout(
        width=width,
        height=height,
        left_width=left_width,
        right_width=max(2, width - left_width),
        pane_height=height - HELP_ROWS - FILTER_BOX_ROWS,
    )


def list_window_start(cursor: int, rows: int) -> int:
    """First visible list index, keeping the cursor near the middle."""
    return max(0, cursor - rows // 2)


@dataclass
class RenderContext:
    layout: ScreenLayout
    mode: Mode
    filter_text: str
    filtered_count: int
    total_count: int
    list_items: list[tuple[int, str]] = field(default_factory=list)
    cursor: int = 0
    output_lines: list[str] = field(default_factory=list)
    output_offset: int = 0
    loading: bool = False
    error_message: str = ""
    theme: UITheme = DEFAULT_THEME


def fit_path(path: str, width: int) -> str:
    """Clip ``path`` to ``width`` columns, keeping its tail (the test name)."""
    if width <= 0:
        return ""
    if display_width(path) <= width:
        return path
    if width == 1:
        return ELLIPSIS
    tail: list[str] = []
    used = 1
    for ch in reversed(path):
        w = display_width(ch)
        if used + w > width:
            break
        tail.append(ch)
        used += w
    return ELLIPSIS + "".join(reversed(tail))


def _box_top(title: str, width: int, color: str, theme: UITheme) -> str:
    inner = max(0, width - 2)
    label = clip_ansi_line(title, inner)
    fill = "─" * max(0, inner - display_width(label))
    return f"{color}┌{theme.reset}{theme.title}{label}{theme.reset}{color}{fill}┐{theme.reset}"


def _box_row(content: str, width: int, color: str, theme: UITheme) -> str:
    inner = max(0, width - 2)
    return f"{color}│{theme.reset}{pad_ansi_line(content, inner)}{color}│{theme.reset}"


def _box_bottom(width: int, color: str, theme: UITheme) -> str:
    return f"{color}└{'─' * max(0, width - 2)}┘{theme.reset}"


def _filter_box(context: RenderContext) -> list[str]:
    theme = context.theme
    width = context.layout.width
    editing = context.mode is Mode.FILTER_EDITING
    color = theme.border_active if editing else theme.border
    count = f"{context.filtered_count}/{context.total_count}"
    inner = max(0, width - 2)
    text_width = max(0, inner - len(count) - 1)
    text = context.filter_text + ("_" if editing else "")
    text = fit_path(text, text_width)
    styled = f"{theme.filter_text}{text}{theme.reset}" if editing else text
    gap = " " * max(0, inner - display_width(text) - len(count))
    content = f"{styled}{gap}{theme.filter_count}{count}{theme.reset}"
    return [
        _box_top("Filter", width, color, theme),
        _box_row(content, width, color, theme),
        _box_bottom(width, color, theme),
    ]


def _list_pane(context: RenderContext) -> list[str]:
    theme = context.theme
    layout = context.layout
    width = layout.left_width
    color = theme.border_active if context.mode is Mode.BROWSING else theme.border
    inner = max(0, width - 2)
    rows = [_box_top("Tests", width, color, theme)]
    items = context.list_items[: layout.list_rows]
    for row in range(layout.list_rows):
        if row < len(items):
            index, path = items[row]
            text = fit_path(path, inner)
            if index == context.cursor:
                text = f"{theme.selected}{text}{' ' * max(0, inner - display_width(text))}{theme.reset}"
        else:
            text = ""
        rows.append(_box_row(text, width, color, theme))
    rows.append(_box_bottom(width, color, theme))
    return rows


def _output_pane(context: RenderContext) -> list[str]:
    theme = context.theme
    layout = context.layout
    width = layout.right_width
    color = theme.border_active if context.mode is Mode.OUTPUT_SCROLLING else theme.border
    rows = [_box_top("Output", width, color, theme)]
    start = max(0, min(context.output_offset, len(context.output_lines)))
    visible = context.output_lines[start : start + layout.output_rows]
    for row in range(layout.output_rows):
        text = visible[row] if row < len(visible) else ""
        rows.append(_box_row(text, width, color, theme))
    rows.append(_box_bottom(width, color, theme))
    return rows


def _overlay(rows: list[str], top: int, left: int) -> str:
    """Draw ``rows`` at absolute 0-based screen coordinates."""
    return "".join(f"\033[{top + offset + 1};{left + 1}H{row}" for offset, row in enumerate(rows))


def _loading_overlay(context: RenderContext) -> str:
    theme = context.theme
    layout = context.layout
    width = min(LOADING_BOX_WIDTH, layout.width)
    inner = max(0, width - 2)
    text = LOADING_TEXT[:inner]
    pad_left = (inner - len(text)) // 2
    content = f"{theme.loading}{' ' * pad_left}{text}{theme.reset}"
    rows = [
        _box_top("", width, theme.border_active, theme),
        _box_row(content, width, theme.border_active, theme),
        _box_bottom(width, theme.border_active, theme),
    ]
    top = max(0, (layout.height - len(rows)) // 2)
    left = max(0, (layout.width - width) // 2)
    return _overlay(rows, top, left)


def _error_overlay(context: RenderContext) -> str:
    theme = context.theme
    layout = context.layout
    width = min(ERROR_BOX_WIDTH, layout.width)
    inner = max(1, width - 2)
    max_body_rows = max(1, layout.height - 2)
    lines = chunk_plain_text(context.error_message, inner)[:max_body_rows]
    rows = [_box_top("Error", width, theme.error_border, theme)]
    rows.extend(
        _box_row(f"{theme.error_text}{line}{theme.reset}", width, theme.error_border, theme) for line in lines
    )
    rows.append(_box_bottom(width, theme.error_border, theme))
    top = max(0, (layout.height - len(rows)) // 2)
    left = max(0, (layout.width - width) // 2)
    return _overlay(rows, top, left)


def render_frame(context: RenderContext) -> str:
    """Compose one full-screen frame as a single ANSI string."""
    layout = context.layout
    screen: list[str] = [pad_ansi_line(help_line(context.mode, context.theme), layout.width)]
    screen.extend(_filter_box(context))
    left_rows = _list_pane(context)
    right_rows = _output_pane(context)
    screen.extend(left + right for left, right in zip(left_rows, right_rows))

    out = ["\033[H\033[J", "\r\n".join(screen[: layout.height])]
    if context.loading:
        out.append(_loading_overlay(context))
    if context.error_message:
        out.append(_error_overlay(context))
    return "".join(out)


__all__ = [
    "RenderContext",
    "ScreenLayout",
    "compute_layout",
    "fit_path",
    "list_window_start",
    "render_frame",
]
