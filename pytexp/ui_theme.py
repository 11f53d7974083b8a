"""UI theme definitions and selection helpers.

Themes are ANSI palettes for chrome only; runner output keeps its own colors.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    help_text: str
    help_key: str
    border: str
    border_active: str
    title: str
    filter_text: str
    filter_count: str
    selected: str
    loading: str
    error_border: str
    error_text: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    help_text="\033[2;38;5;250m",
    help_key="\033[1;38;5;229m",
    border="\033[2m",
    border_active="\033[33m",
    title="\033[1m",
    filter_text="\033[1;38;5;81m",
    filter_count="\033[2;38;5;250m",
    selected="\033[30;43m",
    loading="\033[1;38;5;45m",
    error_border="\033[31m",
    error_text="\033[38;5;210m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    help_text="\033[2;38;5;110m",
    help_key="\033[1;38;5;153m",
    border="\033[2;38;5;31m",
    border_active="\033[38;5;45m",
    title="\033[1;38;5;117m",
    filter_text="\033[1;38;5;45m",
    filter_count="\033[2;38;5;110m",
    selected="\033[30;48;5;45m",
    loading="\033[1;38;5;39m",
    error_border="\033[38;5;203m",
    error_text="\033[38;5;210m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="\033[0m",
    help_text="",
    help_key="",
    border="",
    border_active="",
    title="",
    filter_text="",
    filter_count="",
    selected="\033[7m",
    loading="",
    error_border="",
    error_text="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    if not name:
        return DEFAULT_THEME
    return _THEMES.get(str(name).strip().lower(), DEFAULT_THEME)
