"""Live substring filter over entity full paths.

The filter text is split on single spaces; every token must be a literal,
case-sensitive substring of a full path for the entity to stay visible.
Empty tokens match everything.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from .discovery import EntityTree, SourceEntity

TOKEN_SEPARATOR = " "


def tokenize(raw_text: str) -> tuple[str, ...]:
    return tuple(raw_text.split(TOKEN_SEPARATOR))


def matches_all(tokens: tuple[str, ...], full_path: str) -> bool:
    """AND-of-substrings predicate; order of tokens does not matter."""
    return all(token in full_path for token in tokens)


@dataclass(frozen=True)
class FilterState:
    raw_text: str = ""
    tokens: tuple[str, ...] = ("",)

    @classmethod
    def from_text(cls, raw_text: str) -> FilterState:
        return cls(raw_text=raw_text, tokens=tokenize(raw_text))

    def matches(self, full_path: str) -> bool:
        return matches_all(self.tokens, full_path)


class FilteredView:
    """Order-preserving lazy projection of ``tree`` through ``filter_state``."""

    def __init__(self, tree: EntityTree, filter_state: FilterState) -> None:
        self.tree = tree
        self.filter_state = filter_state

    def __iter__(self) -> Iterator[SourceEntity]:
        predicate = self.filter_state.matches
        for entity in self.tree.all_entities():
            if self.tree.matches(entity, predicate):
                yield entity

    def count(self) -> int:
        return sum(1 for _ in self)

    def nth(self, index: int) -> SourceEntity | None:
        """Return the ``index``-th visible entity, or ``None`` when out of range."""
        if index < 0:
            return None
        for position, entity in enumerate(self):
            if position == index:
                return entity
        return None

    def window(self, start: int, rows: int) -> list[tuple[int, SourceEntity]]:
        """Return ``(view_index, entity)`` pairs for ``rows`` entries from ``start``."""
        if rows <= 0:
            return []
        out: list[tuple[int, SourceEntity]] = []
        for position, entity in enumerate(self):
            if position < start:
                continue
            if position >= start + rows:
                break
            out.append((position, entity))
        return out
