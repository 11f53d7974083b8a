"""Mutable explorer state owned by the event loop."""

from __future__ import annotations

from dataclasses import dataclass, field

from .discovery import EntityTree, SourceEntity
from .filtering import FilteredView, FilterState
from .modes import Mode, ModeMachine, Trigger
from .selection import SelectionCursor


@dataclass
class AppState:
    tree: EntityTree
    modes: ModeMachine = field(default_factory=ModeMachine)
    input_buffer: str = ""
    output_buffer: str = ""
    output_lines: list[str] = field(default_factory=list)
    cursor: SelectionCursor = field(default_factory=SelectionCursor)
    output_scroll_offset: int = 0
    loading: bool = False
    error_message: str = ""
    filtered_count: int = 0
    list_rows: int = 1
    output_rows: int = 1
    dirty: bool = True

    @property
    def mode(self) -> Mode:
        return self.modes.mode

    @property
    def total_count(self) -> int:
        return len(self.tree)

    def filter_state(self) -> FilterState:
        return FilterState.from_text(self.input_buffer)

    def filtered_view(self) -> FilteredView:
        return FilteredView(self.tree, self.filter_state())

    def refresh_filter(self) -> None:
        """Recompute the match count and re-clamp the cursor."""
        self.filtered_count = self.filtered_view().count()
        self.cursor.reclamp(self.filtered_count)

    def selected_entity(self) -> SourceEntity | None:
        if self.filtered_count <= 0:
            return None
        return self.filtered_view().nth(self.cursor.index)

    def set_output(self, text: str) -> None:
        self.output_buffer = text
        self.output_lines = text.splitlines()
        self.output_scroll_offset = 0

    def max_output_offset(self) -> int:
        return max(0, len(self.output_lines) - max(1, self.output_rows))

    def set_error(self, message: str) -> None:
        self.error_message = message
        self.modes.require(Trigger.COMMAND_FAILED)
        self.dirty = True

    def clear_error(self) -> None:
        self.error_message = ""
