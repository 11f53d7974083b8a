"""Arena of discovered entities plus full-path reconstruction.

Entities are stored in one list indexed by id; parent links are ids, so the
structure stays an acyclic forest rooted at module entities.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from .types import EntityKind, ParsedEntity, SourceEntity

PATH_SEPARATOR = "::"


class EntityTree:
    """Immutable collection of discovered entities."""

    def __init__(self, entities: Sequence[SourceEntity] = ()) -> None:
        self._entities: tuple[SourceEntity, ...] = tuple(entities)
        for idx, entity in enumerate(self._entities):
            if entity.id != idx:
                raise ValueError(f"entity id {entity.id} does not match arena slot {idx}")
            self._check_parent(entity)
        self._selectable: tuple[SourceEntity, ...] = tuple(
            entity for entity in self._entities if entity.kind is not EntityKind.MODULE
        )

    def _check_parent(self, entity: SourceEntity) -> None:
        if entity.kind is EntityKind.MODULE:
            if entity.parent is not None:
                raise ValueError(f"module {entity.name!r} cannot have a parent")
            return
        if entity.parent is None or not (0 <= entity.parent < entity.id):
            raise ValueError(f"entity {entity.name!r} has invalid parent {entity.parent!r}")
        parent_kind = self._entities[entity.parent].kind
        if entity.kind is EntityKind.CLASS and parent_kind is not EntityKind.MODULE:
            raise ValueError(f"class {entity.name!r} must belong to a module")
        if entity.kind is EntityKind.FUNCTION and parent_kind is EntityKind.FUNCTION:
            raise ValueError(f"function {entity.name!r} cannot belong to a function")

    def __len__(self) -> int:
        return len(self._selectable)

    def all_entities(self) -> tuple[SourceEntity, ...]:
        """Selectable entities (classes and functions) in discovery order."""
        return self._selectable

    def modules(self) -> tuple[SourceEntity, ...]:
        return tuple(entity for entity in self._entities if entity.kind is EntityKind.MODULE)

    def parent_of(self, entity: SourceEntity) -> SourceEntity | None:
        if entity.parent is None:
            return None
        return self._entities[entity.parent]

    def module_of(self, entity: SourceEntity) -> SourceEntity:
        current = entity
        while current.parent is not None:
            current = self._entities[current.parent]
        return current

    def full_path(self, entity: SourceEntity) -> str:
        """Return ``file::Class::function``-style node id for ``entity``."""
        names = [entity.name]
        current = entity
        while current.parent is not None:
            current = self._entities[current.parent]
            names.append(current.name)
        return PATH_SEPARATOR.join(reversed(names))

    def file_path(self, entity: SourceEntity) -> str:
        return self.module_of(entity).name

    def matches(self, entity: SourceEntity, predicate) -> bool:
        return bool(predicate(self.full_path(entity)))


class EntityTreeBuilder:
    """Assign arena ids while files are parsed in discovery order."""

    def __init__(self) -> None:
        self._entities: list[SourceEntity] = []
        self._module_id: int | None = None
        self._class_id: int | None = None

    def _append(self, name: str, kind: EntityKind, parent: int | None, source_line: int) -> int:
        entity_id = len(self._entities)
        self._entities.append(
            SourceEntity(id=entity_id, name=name, kind=kind, parent=parent, source_line=source_line)
        )
        return entity_id

    def add_module(self, path: Path | str) -> int:
        name = path.as_posix() if isinstance(path, Path) else path
        self._module_id = self._append(name, EntityKind.MODULE, None, 0)
        self._class_id = None
        return self._module_id

    def add_class(self, name: str, source_line: int = 0) -> int | None:
        if self._module_id is None:
            return None
        self._class_id = self._append(name, EntityKind.CLASS, self._module_id, source_line)
        return self._class_id

    def add_function(self, name: str, source_line: int = 0, in_class: bool = True) -> int | None:
        if self._module_id is None:
            return None
        parent = self._class_id if in_class and self._class_id is not None else self._module_id
        return self._append(name, EntityKind.FUNCTION, parent, source_line)

    def add_parsed_file(self, path: Path | str, parsed: Iterable[ParsedEntity]) -> None:
        """Add one file's entities; files without tests leave no module behind."""
        parsed = list(parsed)
        if not parsed:
            return
        self.add_module(path)
        for item in parsed:
            if item.kind is EntityKind.CLASS:
                self.add_class(item.name, item.source_line)
            elif item.kind is EntityKind.FUNCTION:
                self.add_function(item.name, item.source_line, in_class=item.class_name is not None)

    def build(self) -> EntityTree:
        return EntityTree(self._entities)
