"""Discovery through the runner's collect-only tree output."""

from __future__ import annotations

import subprocess
import unittest
from unittest import mock

from pytexp.discovery.collected import fetch_collected_output, parse_collected_output
from pytexp.errors import ExternalCommandError

COLLECTED_TREE = """\
============================= test session starts ==============================
collected 4 items

<Dir project>
  <Dir tests>
    <Module test_alpha.py>
      <Function test_one>
      <Class TestGroup>
        <Function test_member[1-2]>
      <Function test_after_class>
    <Package pkg>
      <Module test_beta.py>
        <Function test_two>

========================== 4 tests collected in 0.01s ==========================
"""


def _full_paths(text: str) -> list[str]:
    tree = parse_collected_output(text)
    return [tree.full_path(entity) for entity in tree.all_entities()]


class ParseCollectedOutputTests(unittest.TestCase):
    def test_builds_node_ids_from_nested_tree(self) -> None:
        self.assertEqual(
            _full_paths(COLLECTED_TREE),
            [
                "tests/test_alpha.py::test_one",
                "tests/test_alpha.py::TestGroup",
                "tests/test_alpha.py::TestGroup::test_member[1-2]",
                "tests/test_alpha.py::test_after_class",
                "tests/pkg/test_beta.py::test_two",
            ],
        )

    def test_module_names_with_paths_are_kept(self) -> None:
        text = "<Module tests/test_legacy.py>\n  <Function test_old>\n"
        self.assertEqual(_full_paths(text), ["tests/test_legacy.py::test_old"])

    def test_functions_before_any_module_are_ignored(self) -> None:
        text = "<Function test_orphan>\n<Module test_a.py>\n  <Function test_a>\n"
        self.assertEqual(_full_paths(text), ["test_a.py::test_a"])

    def test_new_module_resets_current_class(self) -> None:
        text = (
            "<Module test_a.py>\n"
            "  <Class TestA>\n"
            "    <Function test_in_class>\n"
            "<Module test_b.py>\n"
            "  <Function test_plain>\n"
        )
        self.assertEqual(
            _full_paths(text),
            ["test_a.py::TestA", "test_a.py::TestA::test_in_class", "test_b.py::test_plain"],
        )

    def test_top_level_package_is_part_of_module_path(self) -> None:
        text = (
            "<Package tests>\n"
            "  <Module test_api.py>\n"
            "    <Function test_get>\n"
            "  <Package unit>\n"
            "    <Module test_model.py>\n"
            "      <Function test_save>\n"
        )
        self.assertEqual(
            _full_paths(text),
            ["tests/test_api.py::test_get", "tests/unit/test_model.py::test_save"],
        )

    def test_rootdir_dir_above_package_is_dropped(self) -> None:
        text = (
            "<Dir project>\n"
            "  <Package tests>\n"
            "    <Module test_api.py>\n"
            "      <Function test_get>\n"
        )
        self.assertEqual(_full_paths(text), ["tests/test_api.py::test_get"])

    def test_nested_class_and_its_tests_are_skipped(self) -> None:
        text = (
            "<Module test_n.py>\n"
            "  <Class TestOuter>\n"
            "    <Function test_before>\n"
            "    <Class TestInner>\n"
            "      <Function test_x>\n"
            "    <Function test_after>\n"
            "  <Function test_module_level>\n"
        )
        with self.assertLogs("pytexp.discovery.collected", level="DEBUG") as logs:
            paths = _full_paths(text)

        self.assertEqual(
            paths,
            [
                "test_n.py::TestOuter",
                "test_n.py::TestOuter::test_before",
                "test_n.py::TestOuter::test_after",
                "test_n.py::test_module_level",
            ],
        )
        self.assertIn("TestInner", "\n".join(logs.output))

    def test_crlf_output_is_accepted(self) -> None:
        text = "<Module test_a.py>\r\n  <Function test_a>\r\n"
        self.assertEqual(_full_paths(text), ["test_a.py::test_a"])


class FetchCollectedOutputTests(unittest.TestCase):
    def test_runs_runner_in_collect_only_mode(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout=b"<Module test_a.py>\n", stderr=b"")
        with mock.patch("pytexp.discovery.collected.subprocess.run", return_value=completed) as run:
            output = fetch_collected_output("pytest", ("tests",))

        self.assertEqual(output, "<Module test_a.py>\n")
        self.assertEqual(run.call_args.args[0], ["pytest", "--collect-only", "-p", "no:warnings", "tests"])

    def test_missing_runner_raises_external_command_error(self) -> None:
        with mock.patch("pytexp.discovery.collected.subprocess.run", side_effect=FileNotFoundError("nope")):
            with self.assertRaises(ExternalCommandError):
                fetch_collected_output("missing-runner")

    def test_failure_without_stdout_reports_stderr(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=4, stdout=b"", stderr=b"usage error\n")
        with mock.patch("pytexp.discovery.collected.subprocess.run", return_value=completed):
            with self.assertRaises(ExternalCommandError) as ctx:
                fetch_collected_output()

        self.assertEqual(str(ctx.exception), "usage error")

    def test_nonzero_exit_with_stdout_is_still_parsed(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=2, stdout=b"<Module test_a.py>\n", stderr=b"")
        with mock.patch("pytexp.discovery.collected.subprocess.run", return_value=completed):
            self.assertEqual(fetch_collected_output(), "<Module test_a.py>\n")


if __name__ == "__main__":
    unittest.main()
