"""Command-line front door for pytexp.

Parses CLI options, merges them over the persisted config, and discovers
tests. Then either prints the collected paths or starts the interactive
explorer.
"""

from __future__ import annotations

import argparse
import logging
import sys

from .config import DISCOVERY_MODES, Settings, apply_overrides, load_settings
from .discovery import DiscoveryResult, discover, discover_collected, format_collect_only
from .errors import EntityParseError, ExternalCommandError, ScanError
from .runtime import run_explorer
from .ui_theme import available_theme_names

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool, log_file: str | None) -> None:
    """Install a single root handler: ``log_file`` if given, else stderr."""
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pytexp",
        description="Browse, filter, and run pytest tests from an interactive terminal list.",
    )
    parser.add_argument("--root", default=None, help="Directory scanned for test files (default: tests).")
    parser.add_argument("--runner", default=None, help="Test runner executable (default: pytest).")
    parser.add_argument(
        "--collect-only",
        action="store_true",
        help="Print every discovered test path and exit without the UI.",
    )
    parser.add_argument(
        "--discovery",
        choices=DISCOVERY_MODES,
        default=None,
        help="Discover tests by parsing sources or by asking the runner to collect.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Abort when a test file fails to parse instead of skipping it.",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--verbose", action="store_true", help="Log debug details.")
    parser.add_argument("--log-file", metavar="PATH", default=None, help="Write log records to PATH.")
    return parser


def discover_tests(settings: Settings) -> DiscoveryResult:
    """Run the configured discovery backend, turning fatal errors into ``SystemExit``."""
    try:
        if settings.discovery == "collect":
            return discover_collected(settings.runner, settings.root)
        return discover(settings.root, strict=settings.strict_parse)
    except ScanError as exc:
        raise SystemExit(f"Cannot scan {settings.root}: {exc}") from exc
    except EntityParseError as exc:
        raise SystemExit(f"Parse error: {exc}") from exc
    except ExternalCommandError as exc:
        raise SystemExit(f"Test collection failed: {exc}") from exc


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments, discover tests, and launch the explorer."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.log_file)

    settings = apply_overrides(
        load_settings(),
        root=args.root,
        runner=args.runner,
        discovery=args.discovery,
        strict_parse=args.strict,
        theme=args.theme,
    )
    result = discover_tests(settings)

    if args.collect_only:
        sys.stdout.write(format_collect_only(result.tree))
        return

    run_explorer(result, settings, no_color=args.no_color)


if __name__ == "__main__":
    main()
