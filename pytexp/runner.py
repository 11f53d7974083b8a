"""Blocking test-runner invocation for one selected entity."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass

from .config import Settings
from .errors import ExternalCommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunResult:
    stdout: str
    stderr: str
    returncode: int

    def display_text(self) -> str:
        """Text for the output pane: stdout when non-empty, else stderr."""
        return self.stdout if self.stdout else self.stderr


def runner_argv(full_path: str, settings: Settings) -> list[str]:
    return [settings.runner, full_path, *settings.runner_args]


def runner_command_line(full_path: str, settings: Settings) -> str:
    """Shell-quoted runner command used by run-in-shell."""
    return shlex.join(runner_argv(full_path, settings))


def run_test(full_path: str, settings: Settings) -> RunResult:
    """Run the runner for ``full_path`` and wait for it to finish.

    Raises ``ExternalCommandError`` when the runner cannot be started.
    """
    cmd = runner_argv(full_path, settings)
    env = {**os.environ, **dict(settings.runner_env)}
    logger.debug("running %s", cmd)
    try:
        proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, env=env, check=False)
    except OSError as exc:
        raise ExternalCommandError(f"Failed to run {settings.runner}: {exc}") from exc
    logger.debug("%s exited with %s", settings.runner, proc.returncode)
    return RunResult(
        stdout=proc.stdout.decode("utf-8", errors="replace"),
        stderr=proc.stderr.decode("utf-8", errors="replace"),
        returncode=proc.returncode,
    )
