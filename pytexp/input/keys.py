"""Per-mode keyboard bindings and dispatch through the mode table."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..modes import Mode, ModeMachine, Trigger
from .key_registry import KeyBinding, KeyBindingRegistry

OUTPUT_LINE_STEP = 5


@dataclass(frozen=True)
class KeyActions:
    """Side effects the key layer can request from the application."""

    move_cursor: Callable[[int], None]
    page_cursor: Callable[[int], None]
    cursor_to_first: Callable[[], None]
    cursor_to_last: Callable[[], None]
    run_selected: Callable[[], None]
    run_selected_in_shell: Callable[[], None]
    open_selected_in_editor: Callable[[], None]
    edit_filter: Callable[[str], None]
    scroll_output: Callable[[int], None]
    page_output: Callable[[int], None]
    output_to_top: Callable[[], None]
    output_to_bottom: Callable[[], None]
    reset_output_scroll: Callable[[], None]
    clear_error: Callable[[], None]


def _noop() -> None:
    return None


def _printable(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


def build_keymaps(actions: KeyActions) -> dict[Mode, KeyBindingRegistry]:
    browsing = KeyBindingRegistry().register_bindings(
        KeyBinding(("q",), Trigger.QUIT, _noop),
        KeyBinding(("f",), Trigger.FILTER, _noop),
        KeyBinding(("2",), Trigger.ACTIVATE_OUTPUT, _noop),
        KeyBinding(("ENTER",), Trigger.RUN, actions.run_selected),
        KeyBinding(("r",), Trigger.RUN_IN_SHELL, actions.run_selected_in_shell),
        KeyBinding(("o", "e"), Trigger.OPEN_IN_EDITOR, actions.open_selected_in_editor),
        KeyBinding(("UP", "k"), Trigger.NAVIGATE, lambda: actions.move_cursor(-1)),
        KeyBinding(("DOWN", "j"), Trigger.NAVIGATE, lambda: actions.move_cursor(1)),
        KeyBinding(("PGUP", "CTRL_U"), Trigger.NAVIGATE, lambda: actions.page_cursor(-1)),
        KeyBinding(("PGDN", "CTRL_D"), Trigger.NAVIGATE, lambda: actions.page_cursor(1)),
        KeyBinding(("HOME", "g"), Trigger.NAVIGATE, actions.cursor_to_first),
        KeyBinding(("END", "G"), Trigger.NAVIGATE, actions.cursor_to_last),
    )

    def filter_character(key: str) -> KeyBinding | None:
        if not _printable(key):
            return None
        return KeyBinding((key,), Trigger.CHARACTER_INPUT, lambda: actions.edit_filter(key))

    filter_editing = KeyBindingRegistry(fallback=filter_character).register_bindings(
        KeyBinding(("BACKSPACE",), Trigger.CHARACTER_INPUT, lambda: actions.edit_filter("BACKSPACE")),
        KeyBinding(("CTRL_U",), Trigger.CHARACTER_INPUT, lambda: actions.edit_filter("CTRL_U")),
        KeyBinding(("ESC", "ENTER", "UP", "DOWN"), Trigger.COMMIT, _noop),
    )

    output_scrolling = KeyBindingRegistry().register_bindings(
        KeyBinding(("1",), Trigger.ACTIVATE_TESTS_LIST, actions.reset_output_scroll),
        KeyBinding(("UP", "k"), Trigger.SCROLL, lambda: actions.scroll_output(-OUTPUT_LINE_STEP)),
        KeyBinding(("DOWN", "j"), Trigger.SCROLL, lambda: actions.scroll_output(OUTPUT_LINE_STEP)),
        KeyBinding(("PGUP", "CTRL_U"), Trigger.SCROLL, lambda: actions.page_output(-1)),
        KeyBinding(("PGDN", "CTRL_D"), Trigger.SCROLL, lambda: actions.page_output(1)),
        KeyBinding(("HOME", "g"), Trigger.SCROLL, actions.output_to_top),
        KeyBinding(("END", "G"), Trigger.SCROLL, actions.output_to_bottom),
    )

    error_display = KeyBindingRegistry().register_bindings(
        KeyBinding(("ESC", "ENTER", "q"), Trigger.DISMISS, actions.clear_error),
    )

    return {
        Mode.BROWSING: browsing,
        Mode.FILTER_EDITING: filter_editing,
        Mode.OUTPUT_SCROLLING: output_scrolling,
        Mode.ERROR_DISPLAY: error_display,
    }


def handle_key(
    key: str,
    machine: ModeMachine,
    keymaps: dict[Mode, KeyBindingRegistry],
) -> bool:
    """Dispatch ``key`` for the active mode; return ``True`` when it was handled.

    The transition is applied first, then the binding's side effect runs, so a
    side effect may itself move the machine on (e.g. into the error modal).
    Keys without a binding in the active mode change nothing.
    """
    binding = keymaps[machine.mode].lookup(key)
    if binding is None:
        return False
    if not machine.fire(binding.trigger):
        return False
    binding.handler()
    return True
