"""Startup discovery: scan, parse, and assemble the entity tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import EntityParseError
from .collected import fetch_collected_output, parse_collected_output
from .parser import parse_file
from .scanner import scan_test_files
from .tree import EntityTree, EntityTreeBuilder
from .types import DiscoveryRules

logger = logging.getLogger(__name__)


@dataclass
class DiscoveryResult:
    tree: EntityTree
    skipped: list[tuple[str, str]] = field(default_factory=list)

    def skipped_summary(self) -> str:
        """Human-readable summary of skipped files, empty when none were skipped."""
        if not self.skipped:
            return ""
        noun = "file" if len(self.skipped) == 1 else "files"
        lines = [f"Skipped {len(self.skipped)} {noun} that failed to parse:"]
        lines.extend(f"{path}: {message}" for path, message in self.skipped)
        return "\n".join(lines)


def discover(
    root: Path | str = "tests",
    rules: DiscoveryRules | None = None,
    strict: bool = False,
) -> DiscoveryResult:
    """Discover test entities below ``root``.

    With ``strict`` the first ``EntityParseError`` propagates; otherwise the
    offending file is skipped and recorded in ``DiscoveryResult.skipped``.
    ``ScanError`` always propagates.
    """
    rules = rules or DiscoveryRules()
    builder = EntityTreeBuilder()
    skipped: list[tuple[str, str]] = []
    paths = scan_test_files(root, rules)
    for path in paths:
        try:
            parsed = parse_file(path, rules)
        except EntityParseError as exc:
            if strict:
                raise
            logger.warning("skipping %s", exc)
            skipped.append((path.as_posix(), exc.message if exc.line is None else f"line {exc.line}: {exc.message}"))
            continue
        builder.add_parsed_file(path, parsed)
    tree = builder.build()
    logger.info("discovered %d entities in %d files under %s", len(tree), len(paths), root)
    return DiscoveryResult(tree=tree, skipped=skipped)


def discover_collected(runner: str = "pytest", root: Path | str | None = None) -> DiscoveryResult:
    """Discover entities by asking the runner to collect tests."""
    extra_args = (str(root),) if root is not None else ()
    tree = parse_collected_output(fetch_collected_output(runner, extra_args))
    logger.info("collected %d entities via %s", len(tree), runner)
    return DiscoveryResult(tree=tree)


def format_collect_only(tree: EntityTree) -> str:
    """Render every selectable full path, one per line, plus a count summary."""
    lines = [tree.full_path(entity) for entity in tree.all_entities()]
    count = len(lines)
    noun = "test" if count == 1 else "tests"
    lines.append(f"{count} {noun} collected")
    return "\n".join(lines) + "\n"
