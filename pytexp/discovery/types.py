"""Shared discovery datatypes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EntityKind(str, Enum):
    MODULE = "Module"
    CLASS = "Class"
    FUNCTION = "Function"


@dataclass(frozen=True)
class SourceEntity:
    """One discovered test-bearing unit.

    ``parent`` is the arena id of the owning entity, ``None`` for modules.
    ``source_line`` is 1-based; ``0`` when the location is unknown.
    """

    id: int
    name: str
    kind: EntityKind
    parent: int | None
    source_line: int = 0


@dataclass(frozen=True)
class DiscoveryRules:
    """Naming conventions that decide which files and names are tests."""

    source_suffix: str = ".py"
    file_prefix: str = "test_"
    file_suffix: str = "_test.py"
    class_prefix: str = "Test"
    function_prefix: str = "test_"

    def is_test_file_name(self, name: str) -> bool:
        if not name.endswith(self.source_suffix):
            return False
        return name.endswith(self.file_suffix) or name.startswith(self.file_prefix)

    def is_test_function_name(self, name: str) -> bool:
        return name.startswith(self.function_prefix)

    def is_test_class_name(self, name: str) -> bool:
        return name.startswith(self.class_prefix)


@dataclass(frozen=True)
class ParsedEntity:
    """Parser output for one file, before arena ids are assigned.

    ``class_name`` is set for methods of a test class, ``None`` otherwise.
    """

    name: str
    kind: EntityKind
    source_line: int
    class_name: str | None = None
