"""Main interactive event loop for the terminal UI.

One key is read and fully processed before the next render. Feature logic
lives in the controller; this module only wires layout, rendering, and input.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable

from ..input import KeyBindingRegistry, handle_key, read_key
from ..modes import Mode
from ..render import RenderContext, ScreenLayout, compute_layout, list_window_start, render_frame
from ..state import AppState
from ..terminal import TerminalController
from ..ui_theme import UITheme

KEY_POLL_TIMEOUT_MS = 120


def current_layout() -> ScreenLayout:
    term = shutil.get_terminal_size((80, 24))
    return compute_layout(term.columns, term.lines)


def sync_layout(state: AppState, layout: ScreenLayout) -> None:
    """Store viewport sizes used by paging and output-scroll clamping."""
    if (state.list_rows, state.output_rows) == (layout.list_rows, layout.output_rows):
        return
    state.list_rows = layout.list_rows
    state.output_rows = layout.output_rows
    state.output_scroll_offset = min(state.output_scroll_offset, state.max_output_offset())
    state.dirty = True


def build_render_context(state: AppState, layout: ScreenLayout, theme: UITheme) -> RenderContext:
    view = state.filtered_view()
    start = list_window_start(state.cursor.index, layout.list_rows)
    items = [(index, state.tree.full_path(entity)) for index, entity in view.window(start, layout.list_rows)]
    return RenderContext(
        layout=layout,
        mode=state.mode,
        filter_text=state.input_buffer,
        filtered_count=state.filtered_count,
        total_count=state.total_count,
        list_items=items,
        cursor=state.cursor.index,
        output_lines=state.output_lines,
        output_offset=state.output_scroll_offset,
        loading=state.loading,
        error_message=state.error_message if state.mode is Mode.ERROR_DISPLAY else "",
        theme=theme,
    )


def draw(state: AppState, terminal: TerminalController, theme: UITheme) -> None:
    """Render and write one frame immediately."""
    layout = current_layout()
    sync_layout(state, layout)
    terminal.write(render_frame(build_render_context(state, layout, theme)))
    state.dirty = False


def run_main_loop(
    state: AppState,
    terminal: TerminalController,
    stdin_fd: int,
    keymaps: dict[Mode, KeyBindingRegistry],
    theme: UITheme,
    read: Callable[..., str] = read_key,
) -> None:
    """Run the interactive loop until the quit transition fires."""
    with terminal.raw_mode():
        while not state.modes.terminated:
            sync_layout(state, current_layout())
            if state.dirty:
                draw(state, terminal, theme)
            try:
                key = read(stdin_fd, timeout_ms=KEY_POLL_TIMEOUT_MS)
            except KeyboardInterrupt:
                continue
            if key == "":
                continue
            if handle_key(key, state.modes, keymaps):
                state.dirty = True
