"""Styled text primitives: colours, styles, spans and lines."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import ClassVar

from wcwidth import wcwidth


def _cell_width(ch: str) -> int:
    width = wcwidth(ch)
    return width if width > 0 else 0


@dataclass(frozen=True)
class Color:
    """A terminal colour: either a named palette entry or a 24-bit RGB value."""

    name: str = "reset"
    value: tuple[int, int, int] | None = None

    RESET: ClassVar[Color]
    BLACK: ClassVar[Color]
    WHITE: ClassVar[Color]
    DARK_GRAY: ClassVar[Color]
    CYAN: ClassVar[Color]
    YELLOW: ClassVar[Color]
    RED: ClassVar[Color]

    @classmethod
    def rgb(cls, r: int, g: int, b: int) -> Color:
        """Build an RGB colour; each channel must lie in 0..255."""
        for channel in (r, g, b):
            if not 0 <= channel <= 255:
                raise ValueError(f"colour channel out of range: {channel}")
        return cls("rgb", (r, g, b))

    def __str__(self) -> str:
        if self.value is not None:
            return "#{:02X}{:02X}{:02X}".format(*self.value)
        return self.name


Color.RESET = Color("reset")
Color.BLACK = Color("black")
Color.WHITE = Color("white")
Color.DARK_GRAY = Color("dark_gray")
Color.CYAN = Color("cyan")
Color.YELLOW = Color("yellow")
Color.RED = Color("red")


class Modifier(enum.Flag):
    """Text attributes that can be combined."""

    NONE = 0
    BOLD = enum.auto()
    DIM = enum.auto()
    ITALIC = enum.auto()
    UNDERLINED = enum.auto()
    REVERSED = enum.auto()


@dataclass(frozen=True)
class Style:
    """Foreground, background and modifiers applied to a run of text."""

    fg: Color | None = None
    bg: Color | None = None
    modifiers: Modifier = Modifier.NONE

    def add_modifier(self, modifier: Modifier) -> Style:
        return replace(self, modifiers=self.modifiers | modifier)

    def with_fg(self, color: Color) -> Style:
        return replace(self, fg=color)

    def with_bg(self, color: Color) -> Style:
        return replace(self, bg=color)


@dataclass(frozen=True)
class Span:
    """A run of text sharing one style."""

    content: str
    style: Style = Style()

    def width(self) -> int:
        """Display width in terminal cells."""
        return sum(_cell_width(ch) for ch in self.content)


@dataclass
class Line:
    """A single row of styled spans."""

    spans: list[Span] = field(default_factory=list)
    style: Style = Style()

    def width(self) -> int:
        return sum(span.width() for span in self.spans)

    def plain(self) -> str:
        """The line's text without styling."""
        return "".join(span.content for span in self.spans)