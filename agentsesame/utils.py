"""Formatting, truncation and highlighting helpers for the terminal UI."""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Sequence
from datetime import datetime

from wcwidth import wcwidth

from .text import Color, Modifier, Span, Style

_FILTER_PREFIXES = ("agent:", "-agent:", "dir:", "date:")
_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def _char_width(ch: str) -> int:
    width = wcwidth(ch)
    return width if width > 0 else 0


def display_width(s: str) -> int:
    """Display width of a string in terminal cells."""
    return sum(_char_width(ch) for ch in s)


def format_time_ago(dt: datetime, now: datetime) -> str:
    """Describe how long ago ``dt`` was, relative to ``now``."""
    seconds = int((now - dt).total_seconds())
    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = seconds // 3600
    if hours < 24:
        return f"{hours}h ago"
    days = seconds // 86400
    if days < 7:
        return f"{days}d ago"
    if days < 30:
        return f"{days // 7}w ago"
    if days < 365:
        return f"{days // 30}mo ago"
    return f"{days // 365}y ago"


def format_directory(path: str, max_width: int) -> str:
    """Shorten a directory for display: home becomes ``~``, long paths lose their left end."""
    home = os.path.expanduser("~")
    display = path.replace(home, "~") if home and home != "~" else path

    if display_width(display) <= max_width:
        return display

    available = max(0, max_width - 3)
    width = 0
    start = len(display)
    for index, ch in reversed(list(enumerate(display))):
        cw = _char_width(ch)
        if width + cw > available:
            break
        width += cw
        start = index
    return "..." + display[start:]


def _take_cells(s: str, limit: int) -> str:
    out = []
    width = 0
    for ch in s:
        cw = _char_width(ch)
        if width + cw > limit:
            break
        out.append(ch)
        width += cw
    return "".join(out)


def truncate_to_width(s: str, max_cells: int) -> str:
    """Fit ``s`` into ``max_cells`` cells, ending in ``...`` when cut."""
    if display_width(s) <= max_cells:
        return s
    if max_cells <= 3:
        return _take_cells(s, max_cells)
    return _take_cells(s, max_cells - 3) + "..."


def pad_to_width(s: str, target_cells: int) -> str:
    """Pad with spaces, or truncate, so ``s`` fills ``target_cells`` cells."""
    width = display_width(s)
    if width >= target_cells:
        return truncate_to_width(s, target_cells)
    return s + " " * (target_cells - width)


def get_age_color(age_hours: float) -> Color:
    """Colour for a timestamp of the given age: green when fresh, grey when old."""
    if age_hours < 1.0:
        return Color.rgb(0, 255, 100)
    if age_hours < 6.0:
        return Color.rgb(100, 255, 100)
    if age_hours < 24.0:
        return Color.rgb(200, 255, 100)
    if age_hours < 48.0:
        return Color.rgb(255, 255, 100)
    if age_hours < 72.0:
        return Color.rgb(255, 200, 80)
    if age_hours < 168.0:
        return Color.rgb(255, 150, 50)
    return Color.rgb(140, 140, 140)


def extract_highlight_terms(query: str) -> list[str]:
    """Lower-cased query words to highlight, without filter keywords."""
    terms = (
        word.strip('"').lower()
        for word in query.split()
        if not word.startswith(_FILTER_PREFIXES)
    )
    return [term for term in terms if term]


def highlight_spans_with_terms(
    text: str, terms: Sequence[str], base_color: Color
) -> list[Span]:
    """Split ``text`` into spans, emphasising every (ASCII case-insensitive) term match."""
    base_style = Style(fg=base_color)
    if not terms or not text:
        return [Span(text, base_style)]

    highlight_style = base_style.add_modifier(Modifier.BOLD | Modifier.REVERSED)
    folded_text = text.translate(_ASCII_LOWER)

    matches: list[tuple[int, int]] = []
    for term in terms:
        if not term or len(term) > len(text):
            continue
        folded_term = term.translate(_ASCII_LOWER)
        start = folded_text.find(folded_term)
        while start != -1:
            matches.append((start, start + len(folded_term)))
            start = folded_text.find(folded_term, start + 1)

    if not matches:
        return [Span(text, base_style)]

    merged: list[list[int]] = []
    for start, end in sorted(matches):
        if merged and start < merged[-1][1]:
            merged[-1][1] = max(merged[-1][1], end)
        else:
            merged.append([start, end])

    spans: list[Span] = []
    pos = 0
    for start, end in merged:
        if start > pos:
            spans.append(Span(text[pos:start], base_style))
        spans.append(Span(text[start:end], highlight_style))
        pos = end
    if pos < len(text):
        spans.append(Span(text[pos:], base_style))
    return spans


def highlight_spans(text: str, query: str, base_color: Color) -> list[Span]:
    """Highlight the terms of ``query`` in ``text``."""
    return highlight_spans_with_terms(text, extract_highlight_terms(query), base_color)


def _pipe_to(command: list[str], text: str) -> bool:
    try:
        result = subprocess.run(
            command,
            input=text.encode("utf-8"),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError:
        return False
    return result.returncode == 0


def copy_to_clipboard(text: str) -> bool:
    """Copy ``text`` with the platform's clipboard tool; True on success."""
    if sys.platform.startswith("win"):
        return _pipe_to(["clip"], text)
    if sys.platform == "darwin":
        return _pipe_to(["pbcopy"], text)
    return _pipe_to(["wl-copy"], text) or _pipe_to(
        ["xclip", "-selection", "clipboard"], text
    )