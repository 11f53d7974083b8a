"""Editor launch helper for opening a test at its source line.

The command form is picked by matching the configured editor name; the
resulting string references ``$EDITOR`` and is expanded by the spawned shell.
Returns an error message string instead of raising for UI-friendly handling.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
from collections.abc import Callable

from .shell import run_command_in_shell

EDITOR_FORMS: tuple[tuple[str, str], ...] = (
    ("hx", "$EDITOR {file}:{line}"),
    ("vi", "$EDITOR {file} +{line}"),
    ("nano", "$EDITOR +{line} {file}"),
    ("code", "$EDITOR -g {file}:{line}"),
    ("pycharm", "$EDITOR -line {line} {file}"),
)
FALLBACK_EDITOR_FORM = "$EDITOR {file}"


def editor_command(editor: str, file: str, line: int) -> str:
    """Build the shell command opening ``file`` at ``line`` for ``editor``.

    Without a known line (``line <= 0``) the plain ``$EDITOR file`` form is used.
    """
    quoted = shlex.quote(file)
    if line <= 0:
        return FALLBACK_EDITOR_FORM.format(file=quoted)
    for needle, form in EDITOR_FORMS:
        if needle in editor:
            return form.format(file=quoted, line=line)
    return FALLBACK_EDITOR_FORM.format(file=quoted)


def open_in_editor(
    file: str,
    line: int,
    platform: str | None = None,
    dispatch: Callable[[str], str | None] = run_command_in_shell,
) -> str | None:
    platform = platform or sys.platform
    if platform == "darwin":
        try:
            subprocess.run(["open", "-t", file], stdout=subprocess.PIPE, stderr=subprocess.PIPE, check=False)
        except OSError as exc:
            return f"Failed to open editor: {exc}"
        return None
    if platform.startswith("win"):
        return "Not implemented for your os"
    editor = os.environ.get("EDITOR", "").strip()
    if not editor:
        return "Cannot edit: $EDITOR is not set."
    return dispatch(editor_command(editor, file, line))
