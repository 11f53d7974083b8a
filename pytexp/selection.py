"""Cursor over the filtered view.

Every move saturates at ``[0, count - 1]``; with an empty view the cursor
stays at ``0`` and moves are no-ops.
"""

from __future__ import annotations


def clamp_index(index: int, count: int) -> int:
    """Clamp ``index`` into ``[0, max(0, count - 1)]`` without underflow."""
    if count <= 0:
        return 0
    return max(0, min(index, count - 1))


def half_page(viewport_rows: int) -> int:
    return max(1, viewport_rows // 2)


class SelectionCursor:
    def __init__(self, index: int = 0) -> None:
        self.index = max(0, index)

    def __repr__(self) -> str:
        return f"SelectionCursor(index={self.index})"

    def _set(self, index: int, count: int) -> bool:
        target = clamp_index(index, count)
        if target == self.index:
            return False
        self.index = target
        return True

    def move(self, delta: int, count: int) -> bool:
        """Step by ``delta`` rows; return whether the cursor moved."""
        if count <= 0:
            return False
        return self._set(self.index + delta, count)

    def page(self, direction: int, count: int, viewport_rows: int) -> bool:
        """Move half a viewport up (``direction < 0``) or down."""
        step = half_page(viewport_rows)
        return self.move(step if direction > 0 else -step, count)

    def first(self, count: int) -> bool:
        if count <= 0:
            return False
        return self._set(0, count)

    def last(self, count: int) -> bool:
        if count <= 0:
            return False
        return self._set(count - 1, count)

    def reclamp(self, count: int) -> bool:
        """Re-apply bounds after the view changed, keeping the index when valid."""
        return self._set(min(self.index, max(0, count - 1)), count)
