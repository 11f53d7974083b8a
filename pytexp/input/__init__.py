"""Input-layer public API for key decoding and per-mode key dispatch."""

from .key_registry import KeyBinding, KeyBindingRegistry
from .keys import OUTPUT_LINE_STEP, KeyActions, build_keymaps, handle_key
from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, read_key

__all__ = [
    "read_key",
    "_PENDING_BYTES",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyActions",
    "KeyBinding",
    "KeyBindingRegistry",
    "OUTPUT_LINE_STEP",
    "build_keymaps",
    "handle_key",
]
