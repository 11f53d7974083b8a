"""Closed set of UI modes and the explicit transition table between them.

Each ``(mode, trigger)`` pair maps to the next mode; pairs that are absent are
no-ops. ``None`` as a target means the application terminates.
"""

from __future__ import annotations

from enum import Enum


class Mode(str, Enum):
    BROWSING = "browsing"
    OUTPUT_SCROLLING = "output_scrolling"
    FILTER_EDITING = "filter_editing"
    ERROR_DISPLAY = "error_display"


class Trigger(str, Enum):
    ACTIVATE_OUTPUT = "activate_output"
    ACTIVATE_TESTS_LIST = "activate_tests_list"
    FILTER = "filter"
    QUIT = "quit"
    NAVIGATE = "navigate"
    RUN = "run"
    RUN_IN_SHELL = "run_in_shell"
    OPEN_IN_EDITOR = "open_in_editor"
    COMMAND_FAILED = "command_failed"
    CHARACTER_INPUT = "character_input"
    COMMIT = "commit"
    SCROLL = "scroll"
    DISMISS = "dismiss"


TERMINATE = None

TRANSITIONS: dict[tuple[Mode, Trigger], Mode | None] = {
    (Mode.BROWSING, Trigger.ACTIVATE_OUTPUT): Mode.OUTPUT_SCROLLING,
    (Mode.BROWSING, Trigger.FILTER): Mode.FILTER_EDITING,
    (Mode.BROWSING, Trigger.QUIT): TERMINATE,
    (Mode.BROWSING, Trigger.NAVIGATE): Mode.BROWSING,
    (Mode.BROWSING, Trigger.RUN): Mode.BROWSING,
    (Mode.BROWSING, Trigger.RUN_IN_SHELL): Mode.BROWSING,
    (Mode.BROWSING, Trigger.OPEN_IN_EDITOR): Mode.BROWSING,
    (Mode.BROWSING, Trigger.COMMAND_FAILED): Mode.ERROR_DISPLAY,
    (Mode.FILTER_EDITING, Trigger.CHARACTER_INPUT): Mode.FILTER_EDITING,
    (Mode.FILTER_EDITING, Trigger.COMMIT): Mode.BROWSING,
    (Mode.OUTPUT_SCROLLING, Trigger.ACTIVATE_TESTS_LIST): Mode.BROWSING,
    (Mode.OUTPUT_SCROLLING, Trigger.SCROLL): Mode.OUTPUT_SCROLLING,
    (Mode.ERROR_DISPLAY, Trigger.DISMISS): Mode.BROWSING,
}


class UnhandledTransition(Exception):
    """Raised by ``ModeMachine.require`` for pairs missing from the table."""


class ModeMachine:
    """Holds the single active mode and applies table transitions."""

    def __init__(self, mode: Mode = Mode.BROWSING) -> None:
        self.mode = mode
        self.terminated = False

    def accepts(self, trigger: Trigger) -> bool:
        return not self.terminated and (self.mode, trigger) in TRANSITIONS

    def fire(self, trigger: Trigger) -> bool:
        """Apply ``trigger``; return ``False`` (and change nothing) when it is a no-op."""
        if not self.accepts(trigger):
            return False
        target = TRANSITIONS[(self.mode, trigger)]
        if target is TERMINATE:
            self.terminated = True
        else:
            self.mode = target
        return True

    def require(self, trigger: Trigger) -> None:
        if not self.fire(trigger):
            raise UnhandledTransition(f"{trigger.value} is not valid in {self.mode.value}")
