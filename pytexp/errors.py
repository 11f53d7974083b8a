"""Exception taxonomy for discovery and external-command failures.

Scan errors are fatal before the UI starts. Parse errors are file-scoped and
may be skipped by the discovery policy. External-command errors end up in the
error modal as plain messages.
"""

from __future__ import annotations

from pathlib import Path


class PytexpError(Exception):
    """Base class for errors raised by pytexp itself."""


class ScanError(PytexpError):
    """Discovery root exists but cannot be enumerated."""


class EntityParseError(PytexpError):
    """One source file could not be parsed into test entities."""

    def __init__(self, path: Path | str, message: str, line: int | None = None) -> None:
        self.path = Path(path)
        self.line = line
        self.message = message
        location = f"{self.path.as_posix()}:{line}" if line is not None else self.path.as_posix()
        super().__init__(f"{location}: {message}")


class ExternalCommandError(PytexpError):
    """A spawned process could not be started or reported failure."""
