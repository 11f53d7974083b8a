"""Filesystem walk that yields candidate test files under the discovery root."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..errors import ScanError
from .types import DiscoveryRules

logger = logging.getLogger(__name__)


def scan_test_files(root: Path | str, rules: DiscoveryRules | None = None) -> list[Path]:
    """Return test-file paths below ``root`` in deterministic walk order.

    Paths are joined onto ``root`` exactly as given, so a relative root keeps
    producing relative paths. Symlinked files and directories are skipped.
    A missing root yields an empty list; a root that cannot be listed raises
    ``ScanError``.
    """
    rules = rules or DiscoveryRules()
    root = Path(root)
    if not root.exists() and not root.is_symlink():
        logger.debug("discovery root %s does not exist", root)
        return []
    if root.is_symlink() or not root.is_dir():
        raise ScanError(f"Discovery root is not a directory: {root}")
    try:
        os.listdir(root)
    except OSError as exc:
        raise ScanError(f"Cannot read discovery root {root}: {exc}") from exc

    def skip_unreadable(exc: OSError) -> None:
        logger.debug("skipping unreadable directory %s: %s", exc.filename, exc)

    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=skip_unreadable, followlinks=False):
        base = Path(dirpath)
        dirnames[:] = sorted(
            (name for name in dirnames if not (base / name).is_symlink()),
            key=str.lower,
        )
        for filename in sorted(filenames, key=str.lower):
            if not rules.is_test_file_name(filename):
                continue
            path = base / filename
            if path.is_symlink() or not path.is_file():
                continue
            files.append(path)
    return files
