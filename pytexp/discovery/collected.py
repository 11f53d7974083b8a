"""Entity discovery from ``pytest --collect-only`` output.

Reads pytest's indented collection tree (``<Module ...>``, ``<Class ...>``,
``<Function ...>``) and rebuilds the same arena the source parser produces.
Directory and package nodes only contribute path components.
"""

from __future__ import annotations

import logging
import re
import subprocess

from ..errors import ExternalCommandError
from .tree import EntityTree, EntityTreeBuilder

logger = logging.getLogger(__name__)

COLLECTION_LINE_RE = re.compile(r"^(\s*)<(Module|Class|Function)\s(.*)>$")
CONTAINER_LINE_RE = re.compile(r"^(\s*)<(Dir|Package)\s(.*)>$")


def fetch_collected_output(runner: str = "pytest", extra_args: tuple[str, ...] = ()) -> str:
    """Run the test runner in collect-only mode and return its stdout."""
    cmd = [runner, "--collect-only", "-p", "no:warnings", *extra_args]
    logger.debug("collecting with %s", cmd)
    try:
        proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, check=False)
    except OSError as exc:
        raise ExternalCommandError(f"Failed to run {runner}: {exc}") from exc
    stdout = proc.stdout.decode("utf-8", errors="replace")
    if not stdout.strip() and proc.returncode != 0:
        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        raise ExternalCommandError(stderr or f"{runner} --collect-only exited with {proc.returncode}")
    return stdout


def _module_path(name: str, containers: list[tuple[int, str, str]]) -> str:
    if "/" in name:
        return name
    # A <Dir> at indent 0 is pytest's rootdir, not part of node ids; a top-level <Package> is.
    parts = [component for indent, kind, component in containers if indent > 0 or kind != "Dir"]
    return "/".join([*parts, name])


def parse_collected_output(text: str) -> EntityTree:
    """Build an ``EntityTree`` from collect-only output text.

    Functions attach to the enclosing class when they are indented below it,
    otherwise to the current module. Lines before the first module are ignored.
    Classes nested inside a test class are skipped along with their contents.
    """
    builder = EntityTreeBuilder()
    containers: list[tuple[int, str, str]] = []
    in_module = False
    class_indent: int | None = None
    skip_indent: int | None = None

    for line in text.split("\n"):
        line = line.rstrip("\r")
        container = CONTAINER_LINE_RE.match(line)
        if container is not None:
            indent = len(container.group(1))
            while containers and containers[-1][0] >= indent:
                containers.pop()
            containers.append((indent, container.group(2), container.group(3)))
            continue

        match = COLLECTION_LINE_RE.match(line)
        if match is None:
            continue
        indent = len(match.group(1))
        kind = match.group(2)
        name = match.group(3)

        if skip_indent is not None:
            if indent > skip_indent:
                continue
            skip_indent = None

        if kind == "Module":
            while containers and containers[-1][0] >= indent:
                containers.pop()
            builder.add_module(_module_path(name, containers))
            in_module = True
            class_indent = None
        elif not in_module:
            continue
        elif kind == "Class":
            if class_indent is not None and indent > class_indent:
                logger.debug("skipping nested class %s", name)
                skip_indent = indent
                continue
            builder.add_class(name)
            class_indent = indent
        else:
            in_class = class_indent is not None and indent > class_indent
            if not in_class:
                class_indent = None
            builder.add_function(name, in_class=in_class)

    return builder.build()
