"""Test-entity discovery: scanning, parsing, and the entity arena."""

from __future__ import annotations

from .discover import DiscoveryResult, discover, discover_collected, format_collect_only
from .parser import parse_file, parse_source
from .scanner import scan_test_files
from .tree import PATH_SEPARATOR, EntityTree, EntityTreeBuilder
from .types import DiscoveryRules, EntityKind, ParsedEntity, SourceEntity

__all__ = [
    "DiscoveryResult",
    "DiscoveryRules",
    "EntityKind",
    "EntityTree",
    "EntityTreeBuilder",
    "PATH_SEPARATOR",
    "ParsedEntity",
    "SourceEntity",
    "discover",
    "discover_collected",
    "format_collect_only",
    "parse_file",
    "parse_source",
    "scan_test_files",
]
