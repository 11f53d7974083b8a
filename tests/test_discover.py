"""Startup discovery policy and collect-only formatting."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from pytexp.discovery import EntityTreeBuilder, discover, discover_collected, format_collect_only
from pytexp.errors import EntityParseError


def _write(root: Path, relative: str, text: str) -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class DiscoverTests(unittest.TestCase):
    def test_discovers_entities_across_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp) / "tests"
            _write(root, "test_a.py", "def test_one():\n    pass\n")
            _write(root, "sub/test_b.py", "class TestB:\n    def test_two(self):\n        pass\n")
            _write(root, "helpers.py", "def test_not_collected():\n    pass\n")

            result = discover(root)

            prefix = root.as_posix()
            self.assertEqual(
                [result.tree.full_path(entity) for entity in result.tree.all_entities()],
                [
                    f"{prefix}/test_a.py::test_one",
                    f"{prefix}/sub/test_b.py::TestB",
                    f"{prefix}/sub/test_b.py::TestB::test_two",
                ],
            )
            self.assertEqual(result.skipped, [])
            self.assertEqual(result.skipped_summary(), "")

    def test_broken_file_is_skipped_and_reported(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _write(root, "test_bad.py", "def test_bad(:\n    pass\n")
            _write(root, "test_good.py", "def test_good():\n    pass\n")

            with self.assertLogs("pytexp.discovery.discover", level="WARNING"):
                result = discover(root)

            self.assertEqual([entity.name for entity in result.tree.all_entities()], ["test_good"])
            self.assertEqual(len(result.skipped), 1)
            path, message = result.skipped[0]
            self.assertEqual(path, (root / "test_bad.py").as_posix())
            self.assertTrue(message.startswith("line 1: "))
            self.assertTrue(result.skipped_summary().startswith("Skipped 1 file that failed to parse:"))

    def test_strict_mode_propagates_parse_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _write(root, "test_bad.py", "class TestBad(:\n    pass\n")

            with self.assertRaises(EntityParseError):
                discover(root, strict=True)

    def test_missing_root_discovers_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            result = discover(Path(tmp) / "absent")

        self.assertEqual(len(result.tree), 0)

    def test_collect_backend_passes_root_to_runner(self) -> None:
        output = "<Module test_a.py>\n  <Function test_a>\n"
        with mock.patch("pytexp.discovery.discover.fetch_collected_output", return_value=output) as fetch:
            result = discover_collected("pytest", "tests")

        fetch.assert_called_once_with("pytest", ("tests",))
        self.assertEqual(len(result.tree), 1)


class FormatCollectOnlyTests(unittest.TestCase):
    def test_lists_paths_then_plural_summary(self) -> None:
        builder = EntityTreeBuilder()
        builder.add_module("tests/test_a.py")
        builder.add_function("test_one", 1, in_class=False)
        builder.add_function("test_two", 4, in_class=False)

        self.assertEqual(
            format_collect_only(builder.build()),
            "tests/test_a.py::test_one\ntests/test_a.py::test_two\n2 tests collected\n",
        )

    def test_singular_summary(self) -> None:
        builder = EntityTreeBuilder()
        builder.add_module("tests/test_a.py")
        builder.add_function("test_one", 1, in_class=False)

        self.assertEqual(format_collect_only(builder.build()), "tests/test_a.py::test_one\n1 test collected\n")

    def test_zero_entities(self) -> None:
        self.assertEqual(format_collect_only(EntityTreeBuilder().build()), "0 tests collected\n")


if __name__ == "__main__":
    unittest.main()
