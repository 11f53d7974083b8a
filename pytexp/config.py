"""Persistent JSON config helpers.

Stores the discovery root, runner invocation, parse policy, and UI theme.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "pytexp"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_ROOT = "tests"
DEFAULT_RUNNER = "pytest"
DEFAULT_RUNNER_ARGS: tuple[str, ...] = ("-vvv", "-p", "no:warnings")
DEFAULT_RUNNER_ENV: tuple[tuple[str, str], ...] = (("PYTEST_ADDOPTS", "--color=yes"),)
DISCOVERY_MODES: tuple[str, ...] = ("source", "collect")


@dataclass(frozen=True)
class Settings:
    root: str = DEFAULT_ROOT
    runner: str = DEFAULT_RUNNER
    runner_args: tuple[str, ...] = DEFAULT_RUNNER_ARGS
    runner_env: tuple[tuple[str, str], ...] = DEFAULT_RUNNER_ENV
    theme: str | None = None
    strict_parse: bool = False
    discovery: str = "source"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _load_nonempty_str(data: dict[str, object], key: str) -> str | None:
    value = data.get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _load_str_list(data: dict[str, object], key: str) -> tuple[str, ...] | None:
    value = data.get(key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        return None
    return tuple(value)


def _load_str_map(data: dict[str, object], key: str) -> tuple[tuple[str, str], ...] | None:
    value = data.get(key)
    if not isinstance(value, dict):
        return None
    if not all(isinstance(k, str) and isinstance(v, str) for k, v in value.items()):
        return None
    return tuple(value.items())


def load_settings() -> Settings:
    """Build ``Settings`` from config, ignoring invalid entries key by key."""
    data = load_config()
    defaults = Settings()
    strict = data.get("strict_parse")
    discovery = _load_nonempty_str(data, "discovery")
    runner_args = _load_str_list(data, "runner_args")
    runner_env = _load_str_map(data, "runner_env")
    return Settings(
        root=_load_nonempty_str(data, "root") or defaults.root,
        runner=_load_nonempty_str(data, "runner") or defaults.runner,
        runner_args=runner_args if runner_args is not None else defaults.runner_args,
        runner_env=runner_env if runner_env is not None else defaults.runner_env,
        theme=_load_nonempty_str(data, "theme"),
        strict_parse=strict if isinstance(strict, bool) else defaults.strict_parse,
        discovery=discovery if discovery in DISCOVERY_MODES else defaults.discovery,
    )


def apply_overrides(settings: Settings, **overrides: object) -> Settings:
    """Return ``settings`` with non-``None`` overrides applied (CLI wins)."""
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return settings
    return replace(settings, **changes)
