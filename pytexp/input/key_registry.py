"""Key-to-trigger binding tables, one per mode."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..modes import Trigger


@dataclass(frozen=True)
class KeyBinding:
    """Mapping from one or more key tokens to a trigger and its side effect."""

    combos: tuple[str, ...]
    trigger: Trigger
    handler: Callable[[], None]


class KeyBindingRegistry:
    """Small key-dispatch table with an optional catch-all for other keys."""

    def __init__(self, fallback: Callable[[str], KeyBinding | None] | None = None) -> None:
        self._bindings: dict[str, KeyBinding] = {}
        self._fallback = fallback

    def register_bindings(self, *bindings: KeyBinding) -> KeyBindingRegistry:
        """Register bindings, overwriting earlier ones for the same combos."""
        for binding in bindings:
            for combo in binding.combos:
                self._bindings[combo] = binding
        return self

    def lookup(self, key: str) -> KeyBinding | None:
        binding = self._bindings.get(key)
        if binding is None and self._fallback is not None:
            return self._fallback(key)
        return binding
