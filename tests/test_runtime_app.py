"""Controller behavior behind key bindings: filtering, runs, and errors."""

from __future__ import annotations

import unittest
from unittest import mock

from pytexp.config import Settings
from pytexp.discovery import DiscoveryResult, EntityTreeBuilder
from pytexp.errors import ExternalCommandError
from pytexp.input import build_keymaps, handle_key
from pytexp.modes import Mode
from pytexp.runner import RunResult
from pytexp.runtime.app import ExplorerController, build_initial_state


def _tree(count: int = 3):
    builder = EntityTreeBuilder()
    if count:
        builder.add_module("tests/test_sample.py")
    for idx in range(count):
        builder.add_function(f"test_case_{idx}", idx * 3 + 1, in_class=False)
    return builder.build()


class _Harness:
    def __init__(self, count: int = 3, run=None) -> None:
        self.state = build_initial_state(DiscoveryResult(tree=_tree(count)))
        self.renders: list[bool] = []
        self.run = run or mock.Mock(return_value=RunResult("passed\n", "", 0))
        self.dispatch_shell = mock.Mock(return_value=None)
        self.open_editor = mock.Mock(return_value=None)
        self.controller = ExplorerController(
            self.state,
            Settings(),
            render=lambda: self.renders.append(self.state.loading),
            run=self.run,
            dispatch_shell=self.dispatch_shell,
            open_editor=self.open_editor,
        )
        self.keymaps = build_keymaps(self.controller.key_actions())

    def press(self, *keys: str) -> None:
        for key in keys:
            handle_key(key, self.state.modes, self.keymaps)


class InitialStateTests(unittest.TestCase):
    def test_counts_start_unfiltered(self) -> None:
        harness = _Harness()
        self.assertEqual(harness.state.filtered_count, 3)
        self.assertEqual(harness.state.total_count, 3)
        self.assertIs(harness.state.mode, Mode.BROWSING)

    def test_skipped_files_open_error_modal(self) -> None:
        result = DiscoveryResult(tree=_tree(), skipped=[("tests/test_bad.py", "line 2: invalid syntax")])
        state = build_initial_state(result)

        self.assertIs(state.mode, Mode.ERROR_DISPLAY)
        self.assertIn("tests/test_bad.py: line 2: invalid syntax", state.error_message)

    def test_zero_entities_navigation_is_inert(self) -> None:
        harness = _Harness(count=0)
        harness.press("DOWN", "END", "PGDN", "UP", "ENTER", "r", "o")

        self.assertEqual(harness.state.filtered_count, 0)
        self.assertEqual(harness.state.cursor.index, 0)
        self.assertIs(harness.state.mode, Mode.BROWSING)
        harness.run.assert_not_called()
        harness.dispatch_shell.assert_not_called()
        harness.open_editor.assert_not_called()


class FilterEditingTests(unittest.TestCase):
    def test_filter_recomputes_after_each_character(self) -> None:
        harness = _Harness()
        harness.press("f", "_", "2")

        self.assertEqual(harness.state.input_buffer, "_2")
        self.assertEqual(harness.state.filtered_count, 1)
        self.assertIs(harness.state.mode, Mode.FILTER_EDITING)

    def test_cursor_is_reclamped_not_reset(self) -> None:
        harness = _Harness(count=5)
        harness.press("j", "j", "j")
        self.assertEqual(harness.state.cursor.index, 3)

        harness.press("f", "c", "a", "s", "e")
        self.assertEqual(harness.state.cursor.index, 3)

        harness.press("_", "1")
        self.assertEqual(harness.state.filtered_count, 1)
        self.assertEqual(harness.state.cursor.index, 0)

    def test_backspace_and_clear(self) -> None:
        harness = _Harness()
        harness.press("f", "x", "y")
        self.assertEqual(harness.state.filtered_count, 0)
        harness.press("BACKSPACE")
        self.assertEqual(harness.state.input_buffer, "x")
        harness.press("CTRL_U")
        self.assertEqual(harness.state.input_buffer, "")
        self.assertEqual(harness.state.filtered_count, 3)

    def test_commit_returns_to_browsing_and_keeps_filter(self) -> None:
        harness = _Harness()
        harness.press("f", "_", "1", "ENTER")

        self.assertIs(harness.state.mode, Mode.BROWSING)
        self.assertEqual(harness.state.selected_entity().name, "test_case_1")


class RunTests(unittest.TestCase):
    def test_run_renders_loading_before_blocking_call(self) -> None:
        harness = _Harness()
        harness.run.side_effect = lambda *_: (harness.renders.append("running") or RunResult("ok\n", "", 0))

        harness.press("j", "ENTER")

        self.assertEqual(harness.renders, [True, "running"])
        harness.run.assert_called_once_with("tests/test_sample.py::test_case_1", harness.controller.settings)
        self.assertFalse(harness.state.loading)
        self.assertEqual(harness.state.output_lines, ["ok"])

    def test_run_uses_stderr_when_stdout_empty(self) -> None:
        harness = _Harness(run=mock.Mock(return_value=RunResult("", "ERROR: boom\n", 4)))
        harness.press("ENTER")
        self.assertEqual(harness.state.output_buffer, "ERROR: boom\n")

    def test_spawn_failure_opens_error_modal(self) -> None:
        harness = _Harness(run=mock.Mock(side_effect=ExternalCommandError("Failed to run pytest")))
        harness.press("ENTER")

        self.assertFalse(harness.state.loading)
        self.assertIs(harness.state.mode, Mode.ERROR_DISPLAY)
        self.assertEqual(harness.state.error_message, "Failed to run pytest")

        harness.press("ESC")
        self.assertIs(harness.state.mode, Mode.BROWSING)
        self.assertEqual(harness.state.error_message, "")

    def test_run_in_shell_dispatches_command_line(self) -> None:
        harness = _Harness()
        harness.press("r")
        harness.dispatch_shell.assert_called_once_with("pytest tests/test_sample.py::test_case_0 -vvv -p no:warnings")
        self.assertIs(harness.state.mode, Mode.BROWSING)

    def test_shell_error_opens_error_modal(self) -> None:
        harness = _Harness()
        harness.dispatch_shell.return_value = "Not implemented for your os"
        harness.press("r")

        self.assertIs(harness.state.mode, Mode.ERROR_DISPLAY)
        self.assertEqual(harness.state.error_message, "Not implemented for your os")

    def test_open_in_editor_passes_file_and_line(self) -> None:
        harness = _Harness()
        harness.press("G", "o")
        harness.open_editor.assert_called_once_with("tests/test_sample.py", 7)

    def test_editor_error_opens_error_modal(self) -> None:
        harness = _Harness()
        harness.open_editor.return_value = "Cannot edit: $EDITOR is not set."
        harness.press("e")
        self.assertIs(harness.state.mode, Mode.ERROR_DISPLAY)


class OutputScrollTests(unittest.TestCase):
    def _scrolled(self) -> _Harness:
        harness = _Harness()
        harness.state.output_rows = 10
        harness.state.set_output("\n".join(f"line {idx}" for idx in range(30)))
        harness.press("2")
        return harness

    def test_scroll_saturates_at_buffer_bounds(self) -> None:
        harness = self._scrolled()
        harness.press("k")
        self.assertEqual(harness.state.output_scroll_offset, 0)
        harness.press("j", "j", "j", "j", "j")
        self.assertEqual(harness.state.output_scroll_offset, 20)
        harness.press("g")
        self.assertEqual(harness.state.output_scroll_offset, 0)
        harness.press("END")
        self.assertEqual(harness.state.output_scroll_offset, 20)

    def test_page_moves_half_viewport(self) -> None:
        harness = self._scrolled()
        harness.press("PGDN")
        self.assertEqual(harness.state.output_scroll_offset, 5)
        harness.press("CTRL_U")
        self.assertEqual(harness.state.output_scroll_offset, 0)

    def test_activate_tests_list_resets_offset(self) -> None:
        harness = self._scrolled()
        harness.press("j", "1")
        self.assertIs(harness.state.mode, Mode.BROWSING)
        self.assertEqual(harness.state.output_scroll_offset, 0)

    def test_short_output_cannot_scroll(self) -> None:
        harness = _Harness()
        harness.state.output_rows = 10
        harness.state.set_output("one\ntwo\n")
        harness.press("2", "j", "G")
        self.assertEqual(harness.state.output_scroll_offset, 0)


if __name__ == "__main__":
    unittest.main()
