"""Runtime composition layer for pytexp.

Builds the initial state, binds key actions to state mutations and external
commands, and starts the loop.
"""

from __future__ import annotations

import logging
import sys
import termios
from collections.abc import Callable
from functools import partial

from ..config import Settings
from ..discovery import DiscoveryResult, SourceEntity
from ..editor import open_in_editor
from ..errors import ExternalCommandError
from ..input import KeyActions, build_keymaps
from ..runner import RunResult, run_test, runner_command_line
from ..selection import half_page
from ..shell import run_command_in_shell
from ..state import AppState
from ..terminal import TerminalController
from ..ui_theme import resolve_theme
from .loop import draw, run_main_loop

logger = logging.getLogger(__name__)


class ExplorerController:
    """State mutations and external calls behind each key binding."""

    def __init__(
        self,
        state: AppState,
        settings: Settings,
        render: Callable[[], None],
        run: Callable[[str, Settings], RunResult] = run_test,
        dispatch_shell: Callable[[str], str | None] = run_command_in_shell,
        open_editor: Callable[[str, int], str | None] = open_in_editor,
    ) -> None:
        self.state = state
        self.settings = settings
        self.render = render
        self.run = run
        self.dispatch_shell = dispatch_shell
        self.open_editor = open_editor

    def move_cursor(self, delta: int) -> None:
        self.state.cursor.move(delta, self.state.filtered_count)

    def page_cursor(self, direction: int) -> None:
        self.state.cursor.page(direction, self.state.filtered_count, self.state.list_rows)

    def cursor_to_first(self) -> None:
        self.state.cursor.first(self.state.filtered_count)

    def cursor_to_last(self) -> None:
        self.state.cursor.last(self.state.filtered_count)

    def edit_filter(self, key: str) -> None:
        """Mutate the filter buffer, then recompute matches against the new text."""
        if key == "BACKSPACE":
            self.state.input_buffer = self.state.input_buffer[:-1]
        elif key == "CTRL_U":
            self.state.input_buffer = ""
        else:
            self.state.input_buffer += key
        self.state.refresh_filter()

    def _selected(self) -> SourceEntity | None:
        entity = self.state.selected_entity()
        if entity is None:
            logger.debug("no entity selected")
        return entity

    def run_selected(self) -> None:
        entity = self._selected()
        if entity is None:
            return
        full_path = self.state.tree.full_path(entity)
        self.state.loading = True
        self.render()
        try:
            result = self.run(full_path, self.settings)
        except ExternalCommandError as exc:
            self.state.set_error(str(exc))
            return
        finally:
            self.state.loading = False
            self.state.dirty = True
        self.state.set_output(result.display_text())

    def run_selected_in_shell(self) -> None:
        entity = self._selected()
        if entity is None:
            return
        command = runner_command_line(self.state.tree.full_path(entity), self.settings)
        error = self.dispatch_shell(command)
        if error:
            self.state.set_error(error)

    def open_selected_in_editor(self) -> None:
        entity = self._selected()
        if entity is None:
            return
        error = self.open_editor(self.state.tree.file_path(entity), entity.source_line)
        if error:
            self.state.set_error(error)

    def _set_output_offset(self, offset: int) -> None:
        self.state.output_scroll_offset = max(0, min(offset, self.state.max_output_offset()))

    def scroll_output(self, delta: int) -> None:
        self._set_output_offset(self.state.output_scroll_offset + delta)

    def page_output(self, direction: int) -> None:
        step = half_page(self.state.output_rows)
        self.scroll_output(step if direction > 0 else -step)

    def output_to_top(self) -> None:
        self._set_output_offset(0)

    def output_to_bottom(self) -> None:
        self._set_output_offset(self.state.max_output_offset())

    def reset_output_scroll(self) -> None:
        self.state.output_scroll_offset = 0

    def clear_error(self) -> None:
        self.state.clear_error()

    def key_actions(self) -> KeyActions:
        return KeyActions(
            move_cursor=self.move_cursor,
            page_cursor=self.page_cursor,
            cursor_to_first=self.cursor_to_first,
            cursor_to_last=self.cursor_to_last,
            run_selected=self.run_selected,
            run_selected_in_shell=self.run_selected_in_shell,
            open_selected_in_editor=self.open_selected_in_editor,
            edit_filter=self.edit_filter,
            scroll_output=self.scroll_output,
            page_output=self.page_output,
            output_to_top=self.output_to_top,
            output_to_bottom=self.output_to_bottom,
            reset_output_scroll=self.reset_output_scroll,
            clear_error=self.clear_error,
        )


def build_initial_state(discovery: DiscoveryResult) -> AppState:
    """Fresh state in browsing mode; skipped files open the error modal."""
    state = AppState(tree=discovery.tree)
    state.refresh_filter()
    summary = discovery.skipped_summary()
    if summary:
        state.set_error(summary)
    return state


def run_explorer(
    discovery: DiscoveryResult,
    settings: Settings,
    no_color: bool = False,
) -> None:
    """Start the interactive explorer on the discovered entities."""
    state = build_initial_state(discovery)
    theme = resolve_theme(settings.theme, no_color=no_color)
    try:
        terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    except termios.error as exc:
        raise SystemExit(f"pytexp needs an interactive terminal: {exc}") from exc
    controller = ExplorerController(state, settings, render=partial(draw, state, terminal, theme))
    keymaps = build_keymaps(controller.key_actions())
    logger.debug("starting explorer with %d entities", state.total_count)
    run_main_loop(state, terminal, sys.stdin.fileno(), keymaps, theme)
