"""Dispatch a command string into a new terminal window.

Returns an error message string instead of raising for UI-friendly handling.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys

logger = logging.getLogger(__name__)


def _stderr_error(proc: subprocess.CompletedProcess) -> str | None:
    error = proc.stderr.decode("utf-8", errors="replace").strip() if proc.stderr else ""
    return error or None


def _run_in_gnome_terminal(command: str) -> str | None:
    try:
        subprocess.run(
            ["gnome-terminal", "--version"],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError:
        return "Not implemented for your terminal"
    shell = os.environ.get("SHELL", "").strip()
    if not shell:
        return "Cannot run in shell: $SHELL is not set."
    try:
        proc = subprocess.run(
            ["gnome-terminal", "--title=newWindow", "--", shell, "-c", command],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
        )
    except OSError as exc:
        return f"Failed to open terminal: {exc}"
    return _stderr_error(proc)


def _run_in_macos_terminal(command: str) -> str | None:
    # A new Terminal window loses the virtualenv, so restore cwd and venv explicitly.
    pwd = os.environ.get("PWD", "").strip()
    if not pwd:
        return "Cannot run in shell: $PWD is not set."
    venv = os.environ.get("VIRTUAL_ENV", "").strip()
    if not venv:
        return "Cannot run in shell: $VIRTUAL_ENV is not set."
    escaped = command.replace("\\", "\\\\").replace('"', '\\"')
    script = f'tell application "Terminal" to do script "cd {pwd} && {venv}/bin/{escaped}"'
    try:
        proc = subprocess.run(
            ["osascript", "-e", script],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
        )
    except OSError as exc:
        return f"Failed to run osascript: {exc}"
    return _stderr_error(proc)


def run_command_in_shell(command: str, platform: str | None = None) -> str | None:
    """Open ``command`` in a new terminal; return an error message or ``None``."""
    platform = platform or sys.platform
    logger.debug("dispatching %r to shell on %s", command, platform)
    if platform.startswith("linux"):
        return _run_in_gnome_terminal(command)
    if platform == "darwin":
        return _run_in_macos_terminal(command)
    return "Not implemented for your os"
