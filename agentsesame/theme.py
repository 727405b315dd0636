"""Colour themes resolved from the ``[theme]`` configuration section."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .text import Color

_HEX6 = re.compile(r"[0-9A-Fa-f]{6}")


@dataclass
class ThemeConfig:
    """Optional hex colour overrides, named after Material colour roles."""

    primary: str | None = None
    on_surface: str | None = None
    on_surface_variant: str | None = None
    surface_variant: str | None = None
    surface_container: str | None = None
    secondary: str | None = None
    tertiary: str | None = None
    primary_container: str | None = None
    error: str | None = None


def parse_hex_color(hex_str: str) -> Color | None:
    """Parse ``#RRGGBB`` (the ``#`` is optional); None if malformed."""
    digits = hex_str.lstrip("#")
    if not _HEX6.fullmatch(digits):
        return None
    return Color.rgb(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def _parse_or(hex_str: str | None, default: Color) -> Color:
    if hex_str is None:
        return default
    return parse_hex_color(hex_str) or default


@dataclass(frozen=True)
class Theme:
    """Concrete colours for every role the interface draws with."""

    primary: Color
    on_surface: Color
    on_surface_variant: Color
    surface_variant: Color
    surface_container: Color
    secondary: Color
    tertiary: Color
    primary_container: Color
    error: Color

    @classmethod
    def from_config(cls, config: ThemeConfig | None) -> Theme:
        c = config or ThemeConfig()
        return cls(
            primary=_parse_or(c.primary, Color.rgb(232, 123, 53)),
            on_surface=_parse_or(c.on_surface, Color.WHITE),
            on_surface_variant=_parse_or(c.on_surface_variant, Color.DARK_GRAY),
            surface_variant=_parse_or(c.surface_variant, Color.rgb(40, 40, 60)),
            surface_container=_parse_or(c.surface_container, Color.rgb(60, 60, 60)),
            secondary=_parse_or(c.secondary, Color.CYAN),
            tertiary=_parse_or(c.tertiary, Color.rgb(100, 255, 100)),
            primary_container=_parse_or(c.primary_container, Color.YELLOW),
            error=_parse_or(c.error, Color.RED),
        )